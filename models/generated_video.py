# models/generated_video.py
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

from models.ids import new_id, utcnow

if TYPE_CHECKING:
    from models.project import Project


class GeneratedVideo(SQLModel, table=True):
    __tablename__ = "generated_videos"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    project_id: str = Field(foreign_key="projects.id", index=True)
    user_id: Optional[str] = None
    video_url: Optional[str] = None
    script: Optional[str] = None
    generation_status: str = Field(default="completed")
    created_at: datetime = Field(default_factory=utcnow)

    project: "Project" = Relationship(back_populates="videos")
