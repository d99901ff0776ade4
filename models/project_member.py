# models/project_member.py
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import CheckConstraint
from typing import Optional, TYPE_CHECKING

from models.ids import new_id

if TYPE_CHECKING:
    from models.project import Project


class ProjectMember(SQLModel, table=True):
    """Membership row; contribution figures are entered by people, not computed."""
    __tablename__ = "project_members"
    __table_args__ = (
        CheckConstraint("contribution_percentage BETWEEN 0 AND 100", name="ck_member_contribution"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True)
    project_id: str = Field(foreign_key="projects.id", index=True)
    user_id: Optional[str] = Field(default=None, index=True)
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    avatar: Optional[str] = None
    contribution_percentage: Optional[float] = Field(default=0)
    tasks_completed: Optional[int] = Field(default=0)
    hours_logged: Optional[float] = Field(default=0)

    project: "Project" = Relationship(back_populates="members")
