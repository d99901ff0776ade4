# models/__init__.py
from .project import Project
from .project_member import ProjectMember
from .user import User
from .task import Task
from .generated_video import GeneratedVideo
from .nudge import Nudge
