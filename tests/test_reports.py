"""Tests for report helpers."""

from datetime import date

import pytest

from backend.services import reports


class TestReportStartDate:
    """Window starts for the report selector."""

    def test_week(self):
        assert reports.report_start_date("week", date(2025, 6, 11)) == date(2025, 6, 4)

    def test_month_clamps_short_months(self):
        assert reports.report_start_date("month", date(2025, 3, 31)) == date(2025, 2, 28)

    def test_month_wraps_year(self):
        assert reports.report_start_date("month", date(2025, 1, 15)) == date(2024, 12, 15)

    def test_all_is_one_year(self):
        assert reports.report_start_date("all", date(2025, 6, 11)) == date(2024, 6, 11)
        assert reports.report_start_date("all", date(2024, 2, 29)) == date(2023, 2, 28)

    def test_unknown_range(self):
        with pytest.raises(ValueError):
            reports.report_start_date("decade", date(2025, 6, 11))


class TestWeeklyProgress:
    """Hours bucketed by Sunday-started weeks."""

    def test_week_start_is_sunday(self):
        assert reports.week_start(date(2025, 6, 11)) == date(2025, 6, 8)
        assert reports.week_start(date(2025, 6, 8)) == date(2025, 6, 8)

    def test_buckets_and_labels(self):
        logs = [
            {"date": "2025-06-08", "hours_studied": 1.5},
            {"date": "2025-06-14", "hours_studied": 2},
            {"date": "2025-06-15", "hours_studied": 0.25},
        ]
        assert reports.weekly_progress(logs) == [
            {"week_start": "2025-06-08", "week": "Jun 8", "hours": 3.5},
            {"week_start": "2025-06-15", "week": "Jun 15", "hours": 0.3},
        ]

    def test_keeps_last_eight_weeks(self):
        logs = [{"date": f"2025-{month:02d}-01", "hours_studied": 1} for month in range(1, 13)]
        rows = reports.weekly_progress(logs)
        assert len(rows) == 8
        assert rows[-1]["week"] == "Nov 30"


class TestSummaries:
    """Subject performance, status mix and totals."""

    tasks = [
        {"subject_id": "s1", "status": "completed", "subject_name": "Math"},
        {"subject_id": "s1", "status": "pending", "subject_name": "Math"},
        {"subject_id": "s2", "status": "in_progress", "subject_name": "Physics"},
    ]
    logs = [
        {"subject_id": "s1", "hours_studied": 2},
        {"subject_id": "s1", "hours_studied": 1.25},
        {"subject_id": "s3", "hours_studied": 4},
    ]

    def test_subject_performance(self):
        rows = {row["subject_id"]: row for row in reports.subject_performance(self.tasks, self.logs)}
        assert rows["s1"]["tasks_completed"] == 1
        assert rows["s1"]["tasks_total"] == 2
        assert rows["s1"]["hours_studied"] == 3.3
        assert rows["s2"]["hours_studied"] == 0.0
        assert "s3" not in rows

    def test_status_distribution(self):
        rows = reports.task_status_distribution(self.tasks)
        assert rows == [
            {"status": "pending", "count": 1},
            {"status": "in progress", "count": 1},
            {"status": "completed", "count": 1},
            {"status": "overdue", "count": 0},
        ]

    def test_report_summary(self):
        assert reports.report_summary(self.tasks, self.logs) == {
            "total_hours": 7.3,
            "tasks_completed": 1,
            "tasks_total": 3,
            "completion_rate": 33,
        }

    def test_empty_summary(self):
        assert reports.report_summary([], [])["completion_rate"] == 0


class TestAllowedAbsences:
    """Absences that keep attendance strictly above 75%."""

    def test_typical_subject(self):
        assert reports.allowed_absences(3, 16) == 11

    def test_tiny_subject(self):
        assert reports.allowed_absences(1, 1) == 0

    def test_no_credits(self):
        assert reports.allowed_absences(None, 16) is None
        assert reports.allowed_absences(0, 16) is None
