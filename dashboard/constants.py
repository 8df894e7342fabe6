DAY_LABELS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
DAY_TO_INDEX = {label: idx for idx, label in enumerate(DAY_LABELS)}

TASK_TYPES = ["assignment", "quiz", "revision", "exam", "project"]
PRIORITIES = ["low", "medium", "high"]
TASK_STATUSES = ["pending", "in_progress", "completed"]
RECURRENCES = ["weekly", "once", "daily"]
NOTIFICATION_TYPES = ["email", "push", "both"]
ROLES = ["student", "mentor", "admin"]
REPORT_RANGES = {"week": "Last 7 days", "month": "Last month", "all": "Last year"}

SUBJECT_COLORS = [
    "#6A0DAD",
    "#8A2BE2",
    "#A78BFA",
    "#14B8A6",
    "#06B6D4",
    "#64748B",
    "#9CA3AF",
    "#EC4899",
    "#F59E0B",
]

PRIORITY_META = {
    "high": {"weight": 3, "color": "#D95252"},
    "medium": {"weight": 2, "color": "#D9C979"},
    "low": {"weight": 1, "color": "#8FB6D9"},
}

STATUS_COLORS = {
    "pending": "#F59E0B",
    "in progress": "#06B6D4",
    "completed": "#14B8A6",
    "overdue": "#D95252",
}

TAB_DASHBOARD = "Dashboard"
TAB_SUBJECTS = "Subjects"
TAB_PLANNER = "Study Planner"
TAB_TASKS = "Tasks"
TAB_PROGRESS = "Progress"
TAB_REMINDERS = "Reminders"
TAB_REPORTS = "Reports"
TAB_ADMIN = "Admin"
TAB_SETTINGS = "Settings"
