# models/task.py
from sqlmodel import SQLModel, Field, Relationship, Column, JSON
from sqlalchemy import CheckConstraint
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from models.ids import new_id

if TYPE_CHECKING:
    from models.project import Project

TASK_STATUSES = ("todo", "in-progress", "completed")
TASK_PRIORITIES = ("low", "medium", "high")


class Task(SQLModel, table=True):
    __tablename__ = "project_tasks"
    __table_args__ = (
        CheckConstraint("status IN ('todo','in-progress','completed')", name="ck_task_status"),
        CheckConstraint("priority IN ('low','medium','high')", name="ck_task_priority"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True)
    project_id: str = Field(foreign_key="projects.id", index=True)
    title: str
    description: Optional[str] = None
    assigned_to: Optional[str] = None  # member id, may not resolve
    status: str = Field(default="todo")
    tags: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    deadline: Optional[datetime] = None
    hours_logged: Optional[float] = Field(default=0)
    priority: str = Field(default="medium")

    project: "Project" = Relationship(back_populates="tasks")
