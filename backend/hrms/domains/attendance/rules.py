"""Working-hours, lateness and status rule applied to attendance records before they are saved."""

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Optional

from hrms.core.config import settings
from hrms.core.errors import ValidationFailed

STANDARD_START_HOUR = 9
STANDARD_HOURS = 8.0
HALF_DAY_HOURS = 4.0
MAX_WORKING_HOURS = 24.0

PRESENT_STATUSES = ("present", "late", "half-day")


def total_break_minutes(breaks: Optional[Iterable[Mapping[str, Any]]]) -> float:
    return sum(float(item.get("duration") or 0) for item in breaks or [])


def compute_working_hours(
    check_in: Optional[datetime],
    check_out: Optional[datetime],
    breaks: Optional[Iterable[Mapping[str, Any]]] = None,
) -> float:
    if check_in is None or check_out is None:
        return 0.0
    total_minutes = (check_out - check_in).total_seconds() / 60
    working_minutes = total_minutes - total_break_minutes(breaks)
    return max(0.0, working_minutes / 60)


def is_late(check_in: Optional[datetime]) -> bool:
    if check_in is None:
        return False
    cutoff = check_in.replace(hour=STANDARD_START_HOUR, minute=0, second=0, microsecond=0)
    return check_in > cutoff


def derive_status(check_in: datetime, working_hours: float) -> str:
    if is_late(check_in):
        return "late"
    if working_hours < HALF_DAY_HOURS:
        return "half-day"
    return "present"


def apply_attendance_rule(record: Any, policy: Optional[str] = None) -> Any:
    """Recompute hours, overtime and status; hours are zero until both timestamps exist.

    With the ``preserve_manual`` policy a status set through a manual mark is
    kept while hours are still recomputed; ``always`` overwrites it.
    """
    if record.check_in is None or record.check_out is None:
        record.working_hours = 0.0
        record.overtime_hours = 0.0
        return record

    hours =compute_working_hours(record.check_in, record.check_out, record.breaks)
    if hours > MAX_WORKING_HOURS:
        raise ValidationFailed(
            f"Working hours cannot exceed {MAX_WORKING_HOURS:g} (computed {hours:.2f})"
        )

    record.working_hours = hours
    record.overtime_hours = max(0.0, hours - STANDARD_HOURS)

    policy = policy or settings.attendance_status_policy
    if policy == "preserve_manual" and record.manually_marked:
        return record
    record.status = derive_status(record.check_in, hours)
    return record
