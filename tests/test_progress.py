"""Tests for the progress aggregator."""

from datetime import datetime, timezone

import pytest

from backend.services import progress


class TestComputeProgress:
    """Remaining hours and progress percent for a single task."""

    def test_logged_hours_drive_progress(self):
        assert progress.compute_progress(5, 2) == (3.0, 40)

    def test_explicit_zero_counts_as_unset(self):
        assert progress.compute_progress(5, 2, 0) == (3.0, 40)

    def test_explicit_progress_wins(self):
        assert progress.compute_progress(5, 2, 70) == (3.0, 70)

    def test_over_logged_task_is_clamped(self):
        assert progress.compute_progress(2, 3) == (0.0, 100)

    def test_nothing_required_nothing_logged(self):
        assert progress.compute_progress(0, 0) == (0.0, 0)

    def test_missing_hours_required(self):
        assert progress.compute_progress(None, 0) == (0.0, 0)

    def test_rounds_half_up(self):
        # 1 of 8 hours is 12.5 %
        assert progress.compute_progress(8, 1) == (7.0, 13)

    def test_remaining_rounded_to_one_decimal(self):
        remaining, percent = progress.compute_progress(3, 1.25)
        assert remaining == 1.8
        assert percent == 42

    def test_explicit_progress_clamped(self):
        assert progress.compute_progress(5, 0, 140)[1] == 100


class TestAnnotateTasks:
    """Annotations over a task list."""

    def test_sums_logs_per_task(self):
        tasks = [
            {"id": "a", "hours_required": 5, "progress_percentage": 0},
            {"id": "b", "hours_required": 4, "progress_percentage": 0},
        ]
        logs = [
            {"task_id": "a", "hours_studied": 1.5},
            {"task_id": "a", "hours_studied": 0.5},
            {"task_id": "b", "hours_studied": 1},
            {"task_id": None, "hours_studied": 9},
        ]
        annotated = progress.annotate_tasks(tasks, logs)
        assert [(t["remaining_hours"], t["progress_percent"]) for t in annotated] == [(3.0, 40), (3.0, 25)]

    def test_does_not_mutate_input(self):
        tasks = [{"id": "a", "hours_required": 1}]
        progress.annotate_tasks(tasks, [])
        assert "remaining_hours" not in tasks[0]

    def test_empty_inputs(self):
        assert progress.annotate_tasks([], []) == []
        assert progress.logged_hours_by_task(None) == {}


class TestStatus:
    """Display status and manual transitions."""

    now = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

    def test_past_due_is_overdue(self):
        task = {"status": "pending", "due_date": "2025-05-30T09:00:00+00:00"}
        assert progress.display_status(task, self.now) == "overdue"

    def test_completed_never_overdue(self):
        task = {"status": "completed", "due_date": "2025-05-30T09:00:00+00:00"}
        assert progress.display_status(task, self.now) == "completed"

    def test_future_due_keeps_status(self):
        task = {"status": "in_progress", "due_date": "2025-06-03T09:00:00Z"}
        assert progress.display_status(task, self.now) == "in_progress"

    def test_overdue_cannot_be_set(self):
        with pytest.raises(ValueError):
            progress.next_status("pending", "overdue")

    def test_completed_only_reopens_to_pending(self):
        assert progress.next_status("completed", "pending") == "pending"
        with pytest.raises(ValueError):
            progress.next_status("completed", "in_progress")

    def test_unknown_status(self):
        with pytest.raises(ValueError):
            progress.next_status("pending", "archived")


class TestApplyCompletion:
    """Patch produced by the log-progress form."""

    def test_full_progress_completes(self):
        patch = progress.apply_completion({"hours_required": 5, "status": "pending"}, 1, 100)
        assert patch["status"] == "completed"
        assert patch["progress_percentage"] == 100
        assert "completed_at" in patch

    def test_partial_progress_keeps_status(self):
        patch = progress.apply_completion({"hours_required": 5, "status": "in_progress"}, 1, 50)
        assert patch == {"progress_percentage": 50, "status": "in_progress"}

    def test_no_hours_left_completes(self):
        patch = progress.apply_completion({"hours_required": 5, "status": "pending"}, 5, 80)
        assert patch["status"] == "completed"

    def test_rejects_out_of_range(self):
        with pytest.raises(ValueError):
            progress.apply_completion({"hours_required": 5}, 1, 101)


class TestSubjectTaskStats:
    """Per-subject completion summary."""

    def test_counts_and_rate(self):
        subjects = [{"id": "s1", "name": "Math", "color": "#6A0DAD"}, {"id": "s2", "name": "Art"}]
        tasks = [
            {"subject_id": "s1", "status": "completed"},
            {"subject_id": "s1", "status": "pending"},
            {"subject_id": "s1", "status": "in_progress"},
            {"subject_id": "ghost", "status": "overdue"},
        ]
        stats = {row["subject_id"]: row for row in progress.subject_task_stats(subjects, tasks)}
        assert stats["s1"]["total"] == 3
        assert stats["s1"]["completion_rate"] == 33
        assert stats["s2"]["total"] == 0
        assert stats["s2"]["completion_rate"] == 0
        assert stats["ghost"]["name"] == "Unknown"
        assert stats["ghost"]["overdue"] == 1
