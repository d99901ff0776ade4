# models/project.py
from sqlmodel import SQLModel, Field, Relationship, Column, JSON
from sqlalchemy import CheckConstraint
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from models.ids import new_id, utcnow

if TYPE_CHECKING:
    from models.project_member import ProjectMember
    from models.task import Task
    from models.generated_video import GeneratedVideo
    from models.nudge import Nudge

PROJECT_STATUSES = ("active", "completed", "archived")
DEFAULT_PHASES = ["Planning", "Design", "Development", "Testing", "Deployment"]

_CASCADE = {"cascade": "all, delete-orphan"}


class Project(SQLModel, table=True):
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("status IN ('active','completed','archived')", name="ck_project_status"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True)
    title: str
    description: Optional[str] = None
    # identity ids come from the auth table, which may live outside this database
    created_by: str = Field(index=True)
    phases: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    current_phase: Optional[str] = None
    deadline: Optional[datetime] = None
    status: str = Field(default="active")
    created_at: datetime = Field(default_factory=utcnow)

    members: List["ProjectMember"] = Relationship(back_populates="project", sa_relationship_kwargs=_CASCADE)
    tasks: List["Task"] = Relationship(back_populates="project", sa_relationship_kwargs=_CASCADE)
    videos: List["GeneratedVideo"] = Relationship(back_populates="project", sa_relationship_kwargs=_CASCADE)
    nudges: List["Nudge"] = Relationship(back_populates="project", sa_relationship_kwargs=_CASCADE)
