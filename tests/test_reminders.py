"""Tests for the reminder reconciler's pure steps."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from backend.services import reminders

UTC = timezone.utc
NOW = datetime(2025, 6, 1, tzinfo=UTC)
TASK = {"id": "t1", "title": "Essay", "status": "pending", "due_date": "2025-06-10T09:00:00Z"}


class TestDedupe:
    """Exact (task, instant) duplicates collapse to the first row."""

    def test_exact_duplicates_collapse(self):
        rows = [
            {"id": "r1", "task_id": "t1", "remind_at": "2025-06-08T07:00:00+00:00"},
            {"id": "r2", "task_id": "t1", "remind_at": "2025-06-08T07:00:00+00:00"},
        ]
        kept, duplicates = reminders.dedupe_reminders(rows)
        assert [row["id"] for row in kept] == ["r1"]
        assert duplicates == ["r2"]

    def test_equivalent_instants_share_a_key(self):
        rows = [
            {"id": "r1", "task_id": "t1", "remind_at": "2025-06-08T07:00:00Z"},
            {"id": "r2", "task_id": "t1", "remind_at": "2025-06-08T09:00:00+02:00"},
        ]
        kept, duplicates = reminders.dedupe_reminders(rows)
        assert len(kept) == 1
        assert duplicates == ["r2"]

    def test_different_tasks_are_kept(self):
        rows = [
            {"id": "r1", "task_id": "t1", "remind_at": "2025-06-08T07:00:00Z"},
            {"id": "r2", "task_id": "t2", "remind_at": "2025-06-08T07:00:00Z"},
            {"id": "r3", "task_id": None, "remind_at": "2025-06-08T07:00:00Z"},
        ]
        kept, duplicates = reminders.dedupe_reminders(rows)
        assert len(kept) == 3
        assert duplicates == []

    def test_key_format(self):
        assert reminders.reminder_key({"task_id": None, "remind_at": "2025-06-08T07:00:00Z"}) == (
            "null::2025-06-08T07:00:00+00:00"
        )


class TestSynthesize:
    """Automatic reminders two days before and on the due date."""

    def test_two_reminders_for_future_task(self):
        created = reminders.synthesize_reminders([TASK], [], "07:00:00", NOW, UTC)
        assert [row["remind_at"] for row in created] == [
            "2025-06-08T07:00:00+00:00",
            "2025-06-10T07:00:00+00:00",
        ]
        assert created[0]["message"] == 'Reminder: "Essay" is due on 2025-06-10 09:00'
        assert created[0]["notification_type"] == "email"
        assert created[0]["status"] == "pending"
        assert created[0]["task_id"] == "t1"

    def test_past_candidates_are_skipped(self):
        now = datetime(2025, 6, 9, tzinfo=UTC)
        created = reminders.synthesize_reminders([TASK], [], "07:00:00", now, UTC)
        assert [row["remind_at"] for row in created] == ["2025-06-10T07:00:00+00:00"]

    def test_existing_reminders_are_not_recreated(self):
        existing = [{"task_id": "t1", "remind_at": "2025-06-08T07:00:00Z"}]
        created = reminders.synthesize_reminders([TASK], existing, "07:00:00", NOW, UTC)
        assert [row["remind_at"] for row in created] == ["2025-06-10T07:00:00+00:00"]

    def test_second_pass_is_a_no_op(self):
        first = reminders.synthesize_reminders([TASK], [], "07:00:00", NOW, UTC)
        merged = reminders.merge_reminders([], first)
        assert reminders.synthesize_reminders([TASK], merged, "07:00:00", NOW, UTC) == []

    def test_completed_and_undated_tasks_are_ignored(self):
        tasks = [
            {**TASK, "status": "completed"},
            {"id": "t2", "title": "Someday", "status": "pending", "due_date": None},
        ]
        assert reminders.synthesize_reminders(tasks, [], "07:00:00", NOW, UTC) == []

    def test_reminder_time_uses_local_timezone(self):
        tz = ZoneInfo("America/New_York")
        created = reminders.synthesize_reminders([TASK], [], "07:00", NOW, tz)
        # 07:00 EDT is 11:00 UTC
        assert [row["remind_at"] for row in created] == [
            "2025-06-08T11:00:00+00:00",
            "2025-06-10T11:00:00+00:00",
        ]


class TestClassify:
    """Upcoming vs past split."""

    def test_pending_future_is_upcoming(self):
        reminder = {"status": "pending", "remind_at": "2025-06-08T07:00:00Z"}
        assert reminders.classify_reminder(reminder, "pending", NOW) == "upcoming"

    def test_sent_is_past(self):
        reminder = {"status": "sent", "remind_at": "2025-06-08T07:00:00Z"}
        assert reminders.classify_reminder(reminder, "pending", NOW) == "past"

    def test_elapsed_is_past(self):
        reminder = {"status": "pending", "remind_at": "2025-05-30T07:00:00Z"}
        assert reminders.classify_reminder(reminder, "pending", NOW) == "past"

    def test_completed_task_is_past(self):
        reminder = {"status": "pending", "remind_at": "2025-06-08T07:00:00Z"}
        assert reminders.classify_reminder(reminder, "completed", NOW) == "past"


def test_merge_sorts_by_instant():
    existing = [{"id": "b", "task_id": "t1", "remind_at": "2025-06-10T07:00:00+00:00"}]
    inserted = [{"id": "a", "task_id": "t1", "remind_at": "2025-06-08T07:00:00+00:00"}]
    assert [row["id"] for row in reminders.merge_reminders(existing, inserted)] == ["a", "b"]
