# models/snapshot.py
"""Versioned project payload accepted by the assistant and video glue.

Every optional field has a default so partially filled payloads still
validate; anything with the wrong type is rejected here rather than deep
inside a template.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from models.ids import utcnow
from models.project import DEFAULT_PHASES
from models.records import ProjectRecord, UtcDatetime

SNAPSHOT_VERSION = 1


class MemberSnapshot(BaseModel):
    id: str = ""
    name: str = ""
    email: str = ""
    role: str = ""
    contribution_percentage: float = Field(default=0, ge=0, le=100)
    tasks_completed: int = Field(default=0, ge=0)
    hours_logged: float = Field(default=0, ge=0)


class TaskSnapshot(BaseModel):
    id: str = ""
    title: str = ""
    description: str = ""
    status: str = "todo"
    assigned_to: str = ""
    hours_logged: float = Field(default=0, ge=0)
    priority: str = "medium"


class ProjectSnapshot(BaseModel):
    kind: Literal["project_snapshot"] = "project_snapshot"
    schema_version: Literal[1] = SNAPSHOT_VERSION
    id: str
    title: str
    description: str = ""
    members: List[MemberSnapshot] = Field(default_factory=list)
    tasks: List[TaskSnapshot] = Field(default_factory=list)
    phases: List[str] = Field(default_factory=lambda: list(DEFAULT_PHASES))
    current_phase: str = "Planning"
    deadline: Optional[UtcDatetime] = None
    status: str = "active"
    created_at: UtcDatetime = Field(default_factory=utcnow)

    @classmethod
    def from_record(cls, project: ProjectRecord) -> "ProjectSnapshot":
        data = project.model_dump(exclude={"persisted"})
        return cls.model_validate(data)

    def tasks_with_status(self, status: str) -> List[TaskSnapshot]:
        return [t for t in self.tasks if t.status == status]
