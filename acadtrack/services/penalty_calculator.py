import math
from datetime import datetime, timezone
from typing import NamedTuple, Optional

MINUTES_PER_DAY = 1440


class LatePolicy(NamedTuple):
    grace_period_minutes: int = 10
    percent_per_day: int = 10
    max_percent: int = 100


class LatePenalty(NamedTuple):
    is_late: bool
    late_by_minutes: Optional[int]
    days_late: int
    percent: int


ON_TIME = LatePenalty(False, 0, 0, 0)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def compute_late_penalty(
    due_at: datetime,
    submitted_at: Optional[datetime],
    *,
    policy: LatePolicy = LatePolicy(),
    as_of: Optional[datetime] = None,
) -> LatePenalty:
    """
    Returns the lateness of a submission and the penalty percent it earns.

    Policy:
    - grace_period_minutes: if late_by_minutes <= grace -> not late, no penalty
    - percent_per_day: percent off per started day late
    - max_percent: cap total deduction (never above 100)

    With no submission, lateness is measured at ``as_of``; with neither there
    is nothing to penalize yet. Naive timestamps are read as UTC.
    """
    reference = submitted_at if submitted_at is not None else as_of
    if reference is None:
        return LatePenalty(False, None, 0, 0)

    due = _as_utc(due_at)
    submitted = _as_utc(reference)

    if submitted <= due:
        return ON_TIME

    late_minutes = int((submitted - due).total_seconds() // 60)

    if late_minutes <= policy.grace_period_minutes:
        return LatePenalty(False, late_minutes, 0, 0)

    # ceil, so 1 minute past grace counts as 1 day late
    days_late = max(1, math.ceil(late_minutes / MINUTES_PER_DAY))

    cap = max(0, min(policy.max_percent, 100))
    percent = min(days_late * policy.percent_per_day, cap)
    return LatePenalty(True, late_minutes, days_late, percent)
