# db.py

#============================================================#
#                         CollabKill                         #
#============================================================#
# Purpose     : Group-project collaboration for students and #
#               professors: tasks, contributions, phases and #
#               AI summaries (SQLite/Supabase powered)       #
#============================================================#


from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine, select

from config import get_setting
from errors import StoreError
from models import GeneratedVideo, Nudge, Project, ProjectMember, Task, User

logger = logging.getLogger(__name__)

# ---- Engine / Session ----
DATABASE_URL = get_setting("DATABASE_URL")


def make_engine(url: str = DATABASE_URL):
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)
    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every session sees an empty database
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = make_engine()


def init_db(bind=None):
    SQLModel.metadata.create_all(bind or engine)


@contextmanager
def get_session(bind=None):
    with Session(bind or engine, expire_on_commit=False) as s:
        yield s


def _dump(row) -> Dict:
    return row.model_dump()


class _Store:
    """Shared plumbing: every query runs in its own session and store
    failures surface as StoreError."""

    def __init__(self, bind=None):
        self.bind = bind or engine

    @contextmanager
    def _session(self, action: str):
        try:
            with get_session(self.bind) as s:
                yield s
        except SQLAlchemyError as e:
            raise StoreError(f"{action} failed: {e}") from e


# ---- identities ----
class UserStore(_Store):

    def get_by_email(self, email: str) -> Optional[Dict]:
        with self._session("user lookup") as s:
            u = s.exec(select(User).where(User.email == email.strip().lower())).one_or_none()
            return _dump(u) if u else None

    def create(self, email: str, password_hash: str, name: str, role: str,
               avatar: Optional[str] = None) -> Dict:
        with self._session("user insert") as s:
            u = User(email=email.strip().lower(), password_hash=password_hash,
                     name=name, role=role, avatar=avatar)
            s.add(u)
            s.commit()
            return _dump(u)


# ---- projects, members, tasks ----
class ProjectStore(_Store):
    """Row-level access to the project tables. Returns plain dicts to avoid
    detached lazy loads."""

    def owned_projects(self, user_id: str) -> List[Dict]:
        with self._session("owned projects query") as s:
            rows = s.exec(select(Project).where(Project.created_by == user_id)
                          .order_by(Project.created_at)).all()
            return [_dump(p) for p in rows]

    def member_project_ids(self, user_id: str) -> List[str]:
        with self._session("membership query") as s:
            return list(s.exec(select(ProjectMember.project_id)
                               .where(ProjectMember.user_id == user_id)).all())

    def projects_by_ids(self, project_ids: Iterable[str]) -> List[Dict]:
        project_ids = list(project_ids)
        if not project_ids:
            return []
        with self._session("projects by id query") as s:
            rows = s.exec(select(Project).where(Project.id.in_(project_ids))
                          .order_by(Project.created_at)).all()
            return [_dump(p) for p in rows]

    def get_project(self, project_id: str) -> Optional[Dict]:
        with self._session("project lookup") as s:
            p = s.get(Project, project_id)
            return _dump(p) if p else None

    def members_for(self, project_id: str) -> List[Dict]:
        with self._session("members query") as s:
            rows = s.exec(select(ProjectMember).where(ProjectMember.project_id == project_id)).all()
            return [_dump(m) for m in rows]

    def tasks_for(self, project_id: str) -> List[Dict]:
        with self._session("tasks query") as s:
            rows = s.exec(select(Task).where(Task.project_id == project_id)).all()
            return [_dump(t) for t in rows]

    def insert_project(self, values: Dict) -> Dict:
        with self._session("project insert") as s:
            p = Project(**values)
            s.add(p)
            s.commit()
            return _dump(p)

    def insert_members(self, project_id: str, members: Iterable[Dict]) -> List[Dict]:
        with self._session("members insert") as s:
            rows = [ProjectMember(project_id=project_id, **m) for m in members]
            s.add_all(rows)
            s.commit()
            return [_dump(m) for m in rows]

    def update_project(self, project_id: str, values: Dict) -> bool:
        with self._session("project update") as s:
            p = s.get(Project, project_id)
            if not p:
                return False
            for k, v in values.items():
                setattr(p, k, v)
            s.commit()
            return True

    def delete_project(self, project_id: str) -> bool:
        with self._session("project delete") as s:
            p = s.get(Project, project_id)
            if not p:
                return False
            s.delete(p)  # cascades to members, tasks, videos, nudges
            s.commit()
            return True

    def insert_task(self, project_id: str, values: Dict) -> Dict:
        with self._session("task insert") as s:
            t = Task(project_id=project_id, **values)
            s.add(t)
            s.commit()
            return _dump(t)

    def update_task(self, task_id: str, values: Dict) -> bool:
        with self._session("task update") as s:
            t = s.get(Task, task_id)
            if not t:
                return False
            for k, v in values.items():
                setattr(t, k, v)
            s.commit()
            return True

    # ---- AI artefacts ----
    def insert_video(self, values: Dict) -> Dict:
        with self._session("video insert") as s:
            v = GeneratedVideo(**values)
            s.add(v)
            s.commit()
            return _dump(v)

    def videos_for(self, project_id: str) -> List[Dict]:
        with self._session("videos query") as s:
            rows = s.exec(select(GeneratedVideo).where(GeneratedVideo.project_id == project_id)
                          .order_by(GeneratedVideo.created_at.desc())).all()
            return [_dump(v) for v in rows]

    def delete_video(self, video_id: str) -> bool:
        with self._session("video delete") as s:
            v = s.get(GeneratedVideo, video_id)
            if not v:
                return False
            s.delete(v)
            s.commit()
            return True

    def insert_nudge(self, values: Dict) -> Dict:
        with self._session("nudge insert") as s:
            n = Nudge(**values)
            s.add(n)
            s.commit()
            return _dump(n)
