# models/nudge.py
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

from models.ids import new_id, utcnow

if TYPE_CHECKING:
    from models.project import Project

NUDGE_TYPES = ("reminder", "motivation", "workload_balance")


class Nudge(SQLModel, table=True):
    __tablename__ = "ai_nudges"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    project_id: str = Field(foreign_key="projects.id", index=True)
    user_id: str
    nudge_type: str
    message: str
    voice_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)

    project: "Project" = Relationship(back_populates="nudges")
