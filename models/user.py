# models/user.py
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from models.ids import new_id, utcnow


class User(SQLModel, table=True):
    """Auth identity table. Projects reference it by id only."""
    __tablename__ = "users"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(index=True, unique=True)
    name: Optional[str] = None
    role: str = Field(default="student")  # student | professor
    avatar: Optional[str] = None
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow)
