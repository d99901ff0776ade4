# utils/progress.py
import math
from collections import Counter

COMPLETED = "completed"


def _percent(part, whole) -> int:
    if not whole:
        return 0
    # half-up rounding; round() would send 12.5 to 12
    return int(math.floor(100 * part / whole + 0.5))


def count_by_status(tasks) -> Counter:
    return Counter(getattr(t, "status", None) for t in tasks)


def project_progress(tasks) -> int:
    """Percent of tasks whose status is completed, 0 for an empty list."""
    tasks = list(tasks)
    done = sum(1 for t in tasks if getattr(t, "status", None) == COMPLETED)
    return _percent(done, len(tasks))


def average_contribution(members) -> int:
    members = list(members)
    if not members:
        return 0
    total = sum(float(getattr(m, "contribution_percentage", 0) or 0) for m in members)
    return int(math.floor(total / len(members) + 0.5))
