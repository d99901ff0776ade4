from db import ProjectStore
from errors import StoreError
from models.records import Identity, NewMember, NewProject, NewTask
from services.projects import SessionContext


def _ctx(store, uid="A"):
    ctx = SessionContext(Identity(id=uid, email="a@u.edu", name="Ann"), store)
    ctx.load_projects()
    return ctx


class BrokenStore:
    """Reads work but every write fails."""

    def __init__(self, projects=()):
        self.projects = list(projects)

    def owned_projects(self, user_id):
        return self.projects

    def member_project_ids(self, user_id):
        return []

    def projects_by_ids(self, ids):
        return []

    def members_for(self, project_id):
        return []

    def tasks_for(self, project_id):
        return [{"id": "t1", "title": "Draft", "status": "todo"}]

    def _fail(self, *args, **kwargs):
        raise StoreError("read-only")

    insert_project = insert_members = update_project = delete_project = _fail
    insert_task = update_task = _fail


def test_create_project_reloads(store):
    ctx = _ctx(store)
    project = ctx.create_project(NewProject(
        title="Capstone", description="Final year project",
        members=[NewMember(name="Bob", email="bob@u.edu", role="Backend")],
    ))
    assert project.persisted
    assert project.created_by == "A"
    assert [m.name for m in project.members] == ["Bob"]
    assert [p.id for p in ctx.projects] == [project.id]


def test_create_project_failure_keeps_local_copy():
    ctx = _ctx(BrokenStore())
    project = ctx.create_project({"title": "Offline", "members": [{"name": "Bob", "email": "bob@u.edu"}]})
    assert project.id.startswith("local-")
    assert not project.persisted
    assert project.members[0].avatar.endswith("seed=bob@u.edu")
    assert ctx.get_project(project.id) is project


def test_update_project_applies_locally_even_when_store_fails():
    ctx = _ctx(BrokenStore([{"id": "P1", "title": "Mine", "created_by": "A"}]))
    updated = ctx.update_project("P1", {"current_phase": "Testing"})
    assert updated.current_phase == "Testing"
    assert ctx.get_project("P1").current_phase == "Testing"
    assert ctx.get_project("P1").title == "Mine"


def test_update_project_persists(store):
    ctx = _ctx(store)
    project = ctx.create_project(NewProject(title="Capstone"))
    ctx.update_project(project.id, {"status": "completed"})
    assert store.get_project(project.id)["status"] == "completed"


def test_update_task_is_idempotent(store):
    ctx = _ctx(store)
    project = ctx.create_project(NewProject(title="Capstone"))
    task = ctx.create_task(project.id, NewTask(title="Build API"))

    ctx.update_task(project.id, task.id, {"status": "completed", "hours_logged": 5})
    once = ctx.get_project(project.id).model_dump()
    stored_once = store.tasks_for(project.id)
    ctx.update_task(project.id, task.id, {"status": "completed", "hours_logged": 5})
    assert ctx.get_project(project.id).model_dump() == once
    assert store.tasks_for(project.id) == stored_once
    assert ctx.get_project(project.id).progress == 100


def test_update_task_applies_locally_when_store_fails():
    ctx = _ctx(BrokenStore([{"id": "P1", "title": "Mine", "created_by": "A"}]))
    task = ctx.update_task("P1", "t1", {"status": "in-progress"})
    assert task.status == "in-progress"
    assert ctx.get_project("P1").find_task("t1").status == "in-progress"


def test_create_task_reloads(store):
    ctx = _ctx(store)
    project = ctx.create_project(NewProject(title="Capstone"))
    task = ctx.create_task(project.id, {"title": "Write report", "tags": ["docs"], "priority": "high"})
    assert task.tags == ["docs"]
    assert task.priority == "high"
    assert ctx.get_project(project.id).find_task(task.id) is not None


def test_create_task_failure_keeps_local_copy():
    ctx = _ctx(BrokenStore([{"id": "P1", "title": "Mine", "created_by": "A"}]))
    task = ctx.create_task("P1", NewTask(title="Offline task"))
    assert task.id.startswith("local-")
    assert [t.title for t in ctx.get_project("P1").tasks] == ["Draft", "Offline task"]


def test_delete_project(store):
    ctx = _ctx(store)
    project = ctx.create_project(NewProject(title="Capstone"))
    ctx.set_current_project(project.id)
    ctx.delete_project(project.id)
    assert ctx.projects == []
    assert ctx.current_project_id is None
    assert store.get_project(project.id) is None


def test_member_insert_failure_keeps_saved_project(engine):
    class NoMembersStore(ProjectStore):
        def insert_members(self, project_id, members):
            raise StoreError("members insert failed")

    store = NoMembersStore(engine)
    ctx = _ctx(store)
    project = ctx.create_project(NewProject(title="Capstone", members=[NewMember(name="Bob", email="bob@u.edu")]))
    assert project.persisted
    assert not project.id.startswith("local-")
    assert project.members == []
    assert store.get_project(project.id)["title"] == "Capstone"
    assert [p.id for p in ctx.projects] == [project.id]
