import uuid
from datetime import datetime, timezone


def new_id() -> str:
    return str(uuid.uuid4())


def local_id() -> str:
    """Client-side id for records that never reached the store."""
    return f"local-{uuid.uuid4().hex[:12]}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt):
    """Timezone-aware UTC copy of ``dt``; naive values are taken as UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
