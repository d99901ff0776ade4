from datetime import datetime

from models.records import MemberRecord, TaskRecord
from utils.progress import average_contribution, count_by_status, project_progress
from utils.sample_data import sample_project
from utils.stats import dashboard_stats, days_remaining, project_report


def _tasks(done, total):
    return [TaskRecord(id=str(i), title=f"t{i}", status="completed" if i < done else "todo")
            for i in range(total)]


def test_project_progress():
    assert project_progress([]) == 0
    assert project_progress(_tasks(1, 2)) == 50
    assert project_progress(_tasks(3, 10)) == 30
    assert project_progress(_tasks(2, 3)) == 67
    assert project_progress(_tasks(4, 4)) == 100


def test_progress_rounds_half_up():
    # 12.5 -> 13
    assert project_progress(_tasks(1, 8)) == 13


def test_count_by_status():
    tasks = _tasks(1, 3) + [TaskRecord(id="x", title="x", status="in-progress")]
    counts = count_by_status(tasks)
    assert counts["completed"] == 1
    assert counts["todo"] == 2
    assert counts["in-progress"] == 1


def test_average_contribution():
    assert average_contribution([]) == 0
    members = [MemberRecord(id="1", contribution_percentage=35),
               MemberRecord(id="2", contribution_percentage=28)]
    assert average_contribution(members) == 32  # 31.5 rounds up


def test_dashboard_stats():
    project = sample_project("u1")
    done = project.model_copy(update={"id": "2", "status": "completed"})
    stats = dashboard_stats([project, done])
    assert stats["active_projects"] == 1
    assert stats["completed_projects"] == 1
    assert stats["team_members"] == 8
    assert stats["hours_logged"] == 70


def test_project_report():
    project = sample_project("u1")
    report = project_report(project, now=datetime(2025, 1, 10))
    assert report["progress"] == 25
    assert report["completed_tasks"] == 1
    assert report["in_progress_tasks"] == 2
    assert report["todo_tasks"] == 1
    assert report["total_hours"] == 130
    assert report["average_contribution"] == 25
    assert report["days_remaining"] == 5
    assert report["contributions"][0] == {"name": "Alice Johnson", "contribution_percentage": 35}


def test_days_remaining_rounds_up():
    assert days_remaining(datetime(2025, 1, 2, 1), now=datetime(2025, 1, 1)) == 2
