# utils/normalize.py
"""Turn raw store rows (plain dicts with nullable columns) into records."""
from datetime import date, datetime
from typing import Iterable, Optional

from dateutil import parser

from models.ids import as_utc, utcnow
from models.project import DEFAULT_PHASES
from models.records import MemberRecord, ProjectRecord, TaskRecord, default_avatar


def parse_date(x) -> Optional[datetime]:
    if not x:
        return None
    if isinstance(x, datetime):
        dt = x
    elif isinstance(x, date):
        dt = datetime(x.year, x.month, x.day)
    else:
        try:
            dt = parser.parse(str(x))
        except (ValueError, OverflowError):
            return None
    return as_utc(dt)


def _date_or_now(x) -> datetime:
    return parse_date(x) or utcnow()


def _num(x):
    return x or 0


def member_from_row(row: dict) -> MemberRecord:
    email = row.get("email") or ""
    return MemberRecord(
        id=str(row["id"]),
        user_id=row.get("user_id"),
        name=row.get("name") or "",
        email=email,
        role=row.get("role") or "",
        avatar=row.get("avatar") or default_avatar(email),
        contribution_percentage=_num(row.get("contribution_percentage")),
        tasks_completed=_num(row.get("tasks_completed")),
        hours_logged=_num(row.get("hours_logged")),
    )


def task_from_row(row: dict) -> TaskRecord:
    tags = row.get("tags")
    return TaskRecord(
        id=str(row["id"]),
        title=row.get("title") or "",
        description=row.get("description") or "",
        assigned_to=row.get("assigned_to") or "",
        status=row.get("status") or "todo",
        tags=list(tags) if isinstance(tags, (list, tuple)) else [],
        deadline=_date_or_now(row.get("deadline")),
        hours_logged=_num(row.get("hours_logged")),
        priority=row.get("priority") or "medium",
    )


def project_from_rows(row: dict, members: Iterable[dict], tasks: Iterable[dict]) -> ProjectRecord:
    phases = row.get("phases")
    return ProjectRecord(
        id=str(row["id"]),
        title=row.get("title") or "",
        description=row.get("description") or "",
        created_by=str(row.get("created_by") or ""),
        members=[member_from_row(m) for m in members or []],
        tasks=[task_from_row(t) for t in tasks or []],
        phases=list(phases) if isinstance(phases, (list, tuple)) else list(DEFAULT_PHASES),
        current_phase=row.get("current_phase") or "Planning",
        deadline=_date_or_now(row.get("deadline")),
        status=row.get("status") or "active",
        created_at=_date_or_now(row.get("created_at")),
    )
