# utils/stats.py
from datetime import datetime
import math

from models.ids import as_utc, utcnow
from utils.progress import average_contribution, count_by_status


def dashboard_stats(projects) -> dict:
    projects = list(projects)
    return {
        "active_projects": sum(1 for p in projects if p.status == "active"),
        "completed_projects": sum(1 for p in projects if p.status == "completed"),
        "team_members": sum(len(p.members) for p in projects),
        "hours_logged": sum(t.hours_logged for p in projects for t in p.tasks),
    }


def days_remaining(deadline: datetime, now: datetime = None) -> int:
    now = as_utc(now) if now else utcnow()
    return math.ceil((as_utc(deadline) - now).total_seconds() / 86400)


def project_report(project, now: datetime = None) -> dict:
    """Headline figures for a single project's report page."""
    counts = count_by_status(project.tasks)
    return {
        "progress": project.progress,
        "total_hours": sum(m.hours_logged for m in project.members),
        "completed_tasks": counts.get("completed", 0),
        "in_progress_tasks": counts.get("in-progress", 0),
        "todo_tasks": counts.get("todo", 0),
        "average_contribution": average_contribution(project.members),
        "days_remaining": days_remaining(project.deadline, now),
        "contributions": [
            {"name": m.name, "contribution_percentage": m.contribution_percentage}
            for m in project.members
        ],
    }
