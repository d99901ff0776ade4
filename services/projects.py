# services/projects.py
"""Per-identity project state: loading, merging and mutating projects.

A ``SessionContext`` is created on sign-in and closed on sign-out; every
aggregation and mutation goes through one. Nothing here is shared between
identities.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Union

from errors import AuthError
from models.ids import local_id, utcnow
from models.records import (
    Identity, MemberRecord, NewProject, NewTask, ProjectRecord, ProjectUpdate,
    TaskRecord, TaskUpdate, default_avatar,
)
from utils.normalize import project_from_rows
from utils.sample_data import sample_projects

logger = logging.getLogger(__name__)


def merge_unique(*groups: List[Dict]) -> List[Dict]:
    """Concatenate row groups and keep the first row seen for each id.

    Owned projects are passed first, so when a project is both owned and
    joined the owned row is the one kept.
    """
    seen = set()
    merged = []
    for group in groups:
        for row in group:
            if row["id"] in seen:
                continue
            seen.add(row["id"])
            merged.append(row)
    return merged


class SessionContext:

    def __init__(self, identity: Optional[Identity], store):
        self.identity = identity
        self.store = store
        self.projects: List[ProjectRecord] = []
        self.current_project_id: Optional[str] = None
        self.is_loading = False
        self.closed = False

    # ---- lifecycle ----
    def close(self) -> None:
        self.projects = []
        self.current_project_id = None
        self.closed = True

    def _require_open(self) -> None:
        if self.closed:
            raise AuthError("Session has been signed out")

    # ---- reads ----
    def _lookup(self, what: str, fn, project_id: str) -> List[Dict]:
        try:
            return fn(project_id) or []
        except Exception:
            logger.exception("Error loading %s for project %s", what, project_id)
            return []

    def _hydrate(self, row: Dict) -> ProjectRecord:
        members = self._lookup("members", self.store.members_for, row["id"])
        tasks = self._lookup("tasks", self.store.tasks_for, row["id"])
        return project_from_rows(row, members, tasks)

    def load_projects(self) -> List[ProjectRecord]:
        """Owned plus joined projects, hydrated. Falls back to the sample
        project when the project queries fail."""
        self._require_open()
        if self.identity is None:
            self.projects = []
            return self.projects
        self.is_loading = True
        user_id = self.identity.id
        try:
            owned = self.store.owned_projects(user_id)
            member_ids = self.store.member_project_ids(user_id)
            joined = self.store.projects_by_ids(member_ids) if member_ids else []
            self.projects = [self._hydrate(row) for row in merge_unique(owned, joined)]
        except Exception:
            logger.exception("Error loading projects for %s, using sample data", user_id)
            self.projects = sample_projects(user_id)
        finally:
            self.is_loading = False
        return self.projects

    def get_project(self, project_id: str) -> Optional[ProjectRecord]:
        return next((p for p in self.projects if p.id == project_id), None)

    @property
    def current_project(self) -> Optional[ProjectRecord]:
        if self.current_project_id is None:
            return None
        return self.get_project(self.current_project_id)

    def set_current_project(self, project_id: Optional[str]) -> None:
        self.current_project_id = project_id

    # ---- writes ----
    def _replace(self, project: ProjectRecord) -> None:
        self.projects = [project if p.id == project.id else p for p in self.projects]

    def create_project(self, data: Union[NewProject, Dict]) -> Optional[ProjectRecord]:
        """Insert, then reload everything so server-assigned fields show up.
        If the project row cannot be written it is kept locally only; a
        failed member insert is logged and the saved project still loads."""
        self._require_open()
        data = NewProject.model_validate(data)
        values = data.model_dump(exclude={"members"})
        try:
            row = self.store.insert_project({**values, "created_by": self.identity.id})
        except Exception:
            logger.exception("Error adding project %r, keeping it locally", data.title)
            project = ProjectRecord(
                id=local_id(),
                created_by=self.identity.id,
                created_at=utcnow(),
                members=[
                    MemberRecord(id=local_id(), **{**m.model_dump(), "avatar": m.avatar or default_avatar(m.email)})
                    for m in data.members
                ],
                persisted=False,
                **values,
            )
            self.projects.append(project)
            return project
        if data.members:
            try:
                self.store.insert_members(row["id"], [m.model_dump() for m in data.members])
            except Exception:
                logger.exception("Error adding members to project %s", row["id"])
        self.load_projects()
        return self.get_project(row["id"])

    def update_project(self, project_id: str, updates: Union[ProjectUpdate, Dict]) -> Optional[ProjectRecord]:
        """Write the changed fields; local state takes them whether or not
        the store accepted the write."""
        self._require_open()
        values = ProjectUpdate.model_validate(updates).values()
        try:
            self.store.update_project(project_id, values)
        except Exception:
            logger.exception("Error updating project %s", project_id)
        project = self.get_project(project_id)
        if project is None:
            return None
        project = project.model_copy(update=values)
        self._replace(project)
        return project

    def delete_project(self, project_id: str) -> None:
        self._require_open()
        try:
            self.store.delete_project(project_id)
        except Exception:
            logger.exception("Error deleting project %s", project_id)
        self.projects = [p for p in self.projects if p.id != project_id]
        if self.current_project_id == project_id:
            self.current_project_id = None

    def create_task(self, project_id: str, data: Union[NewTask, Dict]) -> Optional[TaskRecord]:
        self._require_open()
        data = NewTask.model_validate(data)
        try:
            row = self.store.insert_task(project_id, data.model_dump())
        except Exception:
            logger.exception("Error adding task %r to project %s, keeping it locally", data.title, project_id)
            task = TaskRecord(id=local_id(), **data.model_dump())
            project = self.get_project(project_id)
            if project is not None:
                self._replace(project.model_copy(update={"tasks": [*project.tasks, task]}))
            return task
        self.load_projects()
        project = self.get_project(project_id)
        return project.find_task(row["id"]) if project else None

    def update_task(self, project_id: str, task_id: str,
                    updates: Union[TaskUpdate, Dict]) -> Optional[TaskRecord]:
        self._require_open()
        values = TaskUpdate.model_validate(updates).values()
        try:
            self.store.update_task(task_id, values)
        except Exception:
            logger.exception("Error updating task %s", task_id)
        project = self.get_project(project_id)
        if project is None:
            return None
        tasks = [t.model_copy(update=values) if t.id == task_id else t for t in project.tasks]
        self._replace(project.model_copy(update={"tasks": tasks}))
        return next((t for t in tasks if t.id == task_id), None)
