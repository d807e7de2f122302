"""
Streak and lifetime resolution.

Persisted user records are authoritative; a streak derived from submission
history is only used when an identity has no record.
"""

from datetime import date, timedelta
from typing import Iterable, Mapping

from stepleague.data_models.leaderboard import Identity, UserRecordSnapshot


def calculate_streak(submission_dates: Iterable[date], reference_date: date) -> int:
    """
    Calculate the current daily streak from a set of submission dates.

    The streak must start today or yesterday (relative to ``reference_date``)
    and counts consecutive calendar days backwards from there. Duplicate
    dates are ignored and any gap ends the run.

    Args:
        submission_dates: Dates with at least one submission, in any order
        reference_date: The date to calculate the streak from (typically today)

    Returns:
        Current streak length in days
    """
    # Future-dated rows never start a streak
    sorted_dates = sorted({d for d in submission_dates if d <= reference_date}, reverse=True)
    if not sorted_dates:
        return 0

    yesterday = reference_date - timedelta(days=1)
    if sorted_dates[0] not in (reference_date, yesterday):
        return 0

    streak = 0
    expected = sorted_dates[0]
    for submitted in sorted_dates:
        if submitted != expected:
            break
        streak += 1
        expected = submitted - timedelta(days=1)

    return streak


def resolve_streak(
    identity: Identity,
    records: Mapping[str, UserRecordSnapshot],
    history: Mapping[str, Iterable[date]],
    reference_date: date,
) -> int:
    """Prefer the persisted streak; fall back to history only when no record exists. Proxies never streak."""
    if identity.is_proxy:
        return 0

    record = records.get(identity.id)
    if record is not None and record.current_streak is not None:
        return record.current_streak

    return calculate_streak(history.get(identity.id, ()), reference_date)


def resolve_lifetime_steps(identity: Identity, records: Mapping[str, UserRecordSnapshot]) -> int:
    if identity.is_proxy:
        return 0
    record = records.get(identity.id)
    if record is None or record.total_steps_lifetime is None:
        return 0
    return int(record.total_steps_lifetime)
