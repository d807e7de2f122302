"""
Period-over-period comparison for a single identity.
"""

from typing import Dict, Mapping, Optional, Tuple

from stepleague.data_models.leaderboard import ComparisonResult, Identity, UserStats


def improvement_percentage(total_a: int, stats_b: Optional[UserStats]) -> Optional[float]:
    """Percentage change from period B to period A, or None when B has no steps."""
    if stats_b is None or stats_b.total_steps <= 0:
        return None
    return (total_a - stats_b.total_steps) / stats_b.total_steps * 100


def common_days_steps(stats_a: UserStats, stats_b: Optional[UserStats]) -> Tuple[Optional[int], Optional[int]]:
    """
    Sum each period's steps over the dates both periods have submissions for.

    Returns (None, None) without a period B or when no date is shared.
    """
    if stats_b is None:
        return None, None

    common_dates = stats_a.submission_dates & stats_b.submission_dates
    if not common_dates:
        return None, None

    steps_a = sum(stats_a.steps_by_date[d] for d in common_dates)
    steps_b = sum(stats_b.steps_by_date[d] for d in common_dates)
    return steps_a, steps_b


def compare_periods(stats_a: UserStats, stats_b: Optional[UserStats]) -> ComparisonResult:
    common_a, common_b = common_days_steps(stats_a, stats_b)
    return ComparisonResult(
        identity=stats_a.identity,
        period_a=stats_a,
        period_b=stats_b,
        improvement_pct=improvement_percentage(stats_a.total_steps, stats_b),
        common_days_steps_a=common_a,
        common_days_steps_b=common_b,
    )


def compare_all(
    stats_a: Mapping[Identity, UserStats],
    stats_b: Optional[Mapping[Identity, UserStats]],
) -> Dict[Identity, ComparisonResult]:
    """Compare every identity with period A stats. Identities only present in period B are dropped."""
    stats_b = stats_b or {}
    return {
        identity: compare_periods(a, stats_b.get(identity))
        for identity, a in stats_a.items()
    }
