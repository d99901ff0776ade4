# utils/sample_data.py
"""The single hard-coded project shown when live data cannot be loaded."""
from datetime import datetime
from typing import List

from models.project import DEFAULT_PHASES
from models.records import MemberRecord, ProjectRecord, TaskRecord, default_avatar

_MEMBERS = [
    # id, name, email, role, contribution %, tasks completed, hours
    ("1", "Alice Johnson", "alice@university.edu", "Frontend Developer", 35, 8, 42),
    ("2", "Bob Smith", "bob@university.edu", "Backend Developer", 28, 6, 38),
    ("3", "Charlie Brown", "charlie@university.edu", "UI/UX Designer", 25, 5, 35),
    ("4", "Diana Prince", "diana@university.edu", "QA Tester", 12, 2, 15),
]

_TASKS = [
    ("1", "Design user authentication flow", "Create wireframes and mockups for login/signup pages",
     "3", "completed", ["UI", "Design"], "2024-12-15", 8, "high"),
    ("2", "Implement user authentication API", "Create backend endpoints for user registration and login",
     "2", "in-progress", ["Backend", "API"], "2024-12-20", 12, "high"),
    ("3", "Build product catalog interface", "Develop the main product browsing and search functionality",
     "1", "in-progress", ["Frontend", "UI"], "2024-12-25", 15, "medium"),
    ("4", "Write test cases for authentication", "Create comprehensive test suite for user authentication",
     "4", "todo", ["Testing", "QA"], "2024-12-30", 0, "medium"),
]


def sample_project(owner_id: str, project_id: str = "1") -> ProjectRecord:
    members = [
        MemberRecord(id=i, name=n, email=e, role=r, avatar=default_avatar(n.split()[0].lower()),
                     contribution_percentage=c, tasks_completed=tc, hours_logged=h)
        for (i, n, e, r, c, tc, h) in _MEMBERS
    ]
    tasks = [
        TaskRecord(id=i, title=t, description=d, assigned_to=a, status=s, tags=list(tags),
                   deadline=datetime.fromisoformat(dl), hours_logged=h, priority=p)
        for (i, t, d, a, s, tags, dl, h, p) in _TASKS
    ]
    return ProjectRecord(
        id=project_id,
        title="E-commerce Mobile Application",
        description="Developing a full-stack mobile application for online shopping with React Native and Node.js",
        created_by=owner_id,
        members=members,
        tasks=tasks,
        phases=list(DEFAULT_PHASES),
        current_phase="Development",
        deadline=datetime(2025, 1, 15),
        status="active",
        created_at=datetime(2024, 11, 1),
        persisted=False,
    )


def sample_projects(owner_id: str) -> List[ProjectRecord]:
    return [sample_project(owner_id)]
