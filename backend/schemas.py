from __future__ import annotations

from datetime import date as date_type, datetime, time
from typing import Optional, List, Dict, Any, Literal

from pydantic import BaseModel, Field

TaskType = Literal["assignment", "quiz", "revision", "exam", "project"]
Priority = Literal["low", "medium", "high"]
TaskStatus = Literal["pending", "in_progress", "completed", "overdue"]
Recurrence = Literal["once", "weekly", "daily"]
NotificationType = Literal["email", "push", "both"]
Role = Literal["student", "mentor", "admin"]


class ProfileSettingsPayload(BaseModel):
    full_name: Optional[str] = None
    semester_length_weeks: Optional[int] = Field(None, ge=1, le=52)
    reminder_time: Optional[time] = None


class ProfileResponse(BaseModel):
    user_email: str
    full_name: Optional[str]
    role: str
    reminder_time: Optional[str]
    semester_length_weeks: Optional[int]
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class SubjectCreate(BaseModel):
    name: str = Field(..., min_length=1)
    instructor: Optional[str] = None
    credits: Optional[int] = Field(None, ge=0)
    color: Optional[str] = None


class SubjectPatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    instructor: Optional[str] = None
    credits: Optional[int] = Field(None, ge=0)
    color: Optional[str] = None


class TaskCreate(BaseModel):
    subject_id: str
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    task_type: TaskType = "assignment"
    due_date: datetime
    priority: Priority = "medium"
    hours_required: float = Field(..., gt=0)


class TaskPatch(BaseModel):
    subject_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    task_type: Optional[TaskType] = None
    due_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    hours_required: Optional[float] = Field(None, ge=0)
    progress_percentage: Optional[int] = Field(None, ge=0, le=100)


class TaskStatusPayload(BaseModel):
    status: TaskStatus


class TaskCompletionPayload(BaseModel):
    hours_studied: float = Field(..., gt=0, le=24)
    progress_percentage: int = Field(100, ge=0, le=100)
    description: Optional[str] = None


class ProgressLogCreate(BaseModel):
    subject_id: str
    task_id: Optional[str] = None
    date: Optional[date_type] = None
    hours_studied: float = Field(..., gt=0, le=24)
    notes: Optional[str] = None


class NewPlanTask(BaseModel):
    title: str = Field(..., min_length=1)
    hours_required: float = Field(..., gt=0)
    due_date: datetime
    task_type: TaskType = "assignment"
    priority: Priority = "medium"


class StudyPlanCreate(BaseModel):
    subject_id: str
    day_of_week: int = Field(..., ge=0, le=6)
    start_time: time
    end_time: time
    recurrence: Recurrence = "weekly"
    task_id: Optional[str] = None
    new_task: Optional[NewPlanTask] = None


class ReminderCreate(BaseModel):
    task_id: str
    remind_at: datetime
    message: Optional[str] = None
    notification_type: NotificationType = "email"


class ReminderPatch(BaseModel):
    task_id: Optional[str] = None
    remind_at: Optional[datetime] = None
    message: Optional[str] = None
    notification_type: Optional[NotificationType] = None


class ReminderStatusPayload(BaseModel):
    status: Literal["sent", "failed"]


class RoleUpdatePayload(BaseModel):
    role: Role


class RemindersResponse(BaseModel):
    upcoming: List[Dict[str, Any]]
    past: List[Dict[str, Any]]
    removed_duplicates: int
    created: int


class DashboardResponse(BaseModel):
    stats: Dict[str, int]
    todo: List[Dict[str, Any]]
    due_soon: List[Dict[str, Any]]
    today_plans: List[Dict[str, Any]]


class ReportResponse(BaseModel):
    range: str
    start_date: str
    subject_performance: List[Dict[str, Any]]
    weekly_progress: List[Dict[str, Any]]
    task_status: List[Dict[str, Any]]
    summary: Dict[str, Any]


class AdminOverviewResponse(BaseModel):
    stats: Dict[str, int]
    users: List[Dict[str, Any]]
    logs: List[Dict[str, Any]]
