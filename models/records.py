# models/records.py
"""In-memory shapes handed to the UI and the assistant.

Table rows (see the sibling modules) are normalized into these records by
``utils.normalize``; the session context keeps a list of them per signed-in
identity.
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field

from models.ids import as_utc, utcnow
from models.project import DEFAULT_PHASES
from utils.progress import project_progress

# naive values are read as UTC; the store only takes aware datetimes
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


def default_avatar(email: str) -> str:
    return f"https://api.dicebear.com/7.x/avataaars/svg?seed={email}"


class Identity(BaseModel):
    id: str
    email: str
    name: str
    role: str = "student"  # student | professor
    avatar: str = ""


class MemberRecord(BaseModel):
    id: str
    user_id: Optional[str] = None
    name: str = ""
    email: str = ""
    role: str = ""
    avatar: str = ""
    contribution_percentage: float = 0
    tasks_completed: int = 0
    hours_logged: float = 0


class TaskRecord(BaseModel):
    id: str
    title: str
    description: str = ""
    assigned_to: str = ""
    status: str = "todo"
    tags: List[str] = Field(default_factory=list)
    deadline: UtcDatetime = Field(default_factory=utcnow)
    hours_logged: float = 0
    priority: str = "medium"


class ProjectRecord(BaseModel):
    id: str
    title: str
    description: str = ""
    created_by: str
    members: List[MemberRecord] = Field(default_factory=list)
    tasks: List[TaskRecord] = Field(default_factory=list)
    phases: List[str] = Field(default_factory=lambda: list(DEFAULT_PHASES))
    current_phase: str = "Planning"
    deadline: UtcDatetime = Field(default_factory=utcnow)
    status: str = "active"
    created_at: UtcDatetime = Field(default_factory=utcnow)
    persisted: bool = True

    @property
    def progress(self) -> int:
        # always derived from the task list, never stored
        return project_progress(self.tasks)

    def find_task(self, task_id: str) -> Optional[TaskRecord]:
        return next((t for t in self.tasks if t.id == task_id), None)


# ---- write payloads ----

class NewMember(BaseModel):
    user_id: Optional[str] = None
    name: str
    email: str
    role: str = ""
    avatar: Optional[str] = None
    contribution_percentage: float = 0
    tasks_completed: int = 0
    hours_logged: float = 0


class NewProject(BaseModel):
    title: str
    description: str = ""
    phases: List[str] = Field(default_factory=lambda: list(DEFAULT_PHASES))
    current_phase: str = "Planning"
    deadline: UtcDatetime = Field(default_factory=utcnow)
    status: str = "active"
    members: List[NewMember] = Field(default_factory=list)


class NewTask(BaseModel):
    title: str
    description: str = ""
    assigned_to: str = ""
    status: str = "todo"
    tags: List[str] = Field(default_factory=list)
    deadline: UtcDatetime = Field(default_factory=utcnow)
    hours_logged: float = 0
    priority: str = "medium"


class ProjectUpdate(BaseModel):
    """Partial update; only fields the caller sets are written."""
    title: Optional[str] = None
    description: Optional[str] = None
    phases: Optional[List[str]] = None
    current_phase: Optional[str] = None
    deadline: Optional[UtcDatetime] = None
    status: Optional[str] = None

    def values(self) -> dict:
        return self.model_dump(exclude_unset=True)


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    assigned_to: Optional[str] = None
    status: Optional[str] = None
    tags: Optional[List[str]] = None
    deadline: Optional[UtcDatetime] = None
    hours_logged: Optional[float] = None
    priority: Optional[str] = None

    def values(self) -> dict:
        return self.model_dump(exclude_unset=True)
