"""
Leaderboard data models for the stats aggregation engine.

Provides immutable data transfer objects for identities, periods, per-period stats
and the assembled leaderboard payload. Everything here is built fresh per request.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Union


@dataclass(frozen=True)
class UserRef:
    """A real user participating in a league."""
    id: str

    @property
    def is_proxy(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, str]:
        return {"type": "user", "id": self.id}


@dataclass(frozen=True)
class ProxyRef:
    """A placeholder participant tracked by a league manager."""
    id: str

    @property
    def is_proxy(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, str]:
        return {"type": "proxy", "id": self.id}


Identity = Union[UserRef, ProxyRef]


@dataclass(frozen=True)
class PeriodRange:
    """Inclusive date range."""
    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class ResolvedPeriod:
    """
    Result of resolving a period keyword against league settings.

    ``range`` is None either for an unbounded period (all time with no counting
    start date) or for an empty one (the whole period falls before the counting
    start date); ``is_empty`` tells the two apart.
    """
    preset: str
    range: Optional[PeriodRange]
    is_empty: bool = False

    @property
    def is_unbounded(self) -> bool:
        return self.range is None and not self.is_empty

    @property
    def days(self) -> int:
        return self.range.days if self.range else 0


@dataclass(frozen=True)
class SubmissionRow:
    """A raw daily submission as read from storage."""
    identity: Identity
    for_date: date
    steps: int
    verified: bool


@dataclass(frozen=True)
class LeagueSettings:
    """League configuration the engine reads."""
    league_id: str
    name: str
    counting_start_date: Optional[date] = None


@dataclass(frozen=True)
class UserRecordSnapshot:
    """Read-only view of a persisted streak/lifetime record."""
    user_id: str
    current_streak: Optional[int]
    total_steps_lifetime: Optional[int]


@dataclass(frozen=True)
class UserProfile:
    """Names shown for a league member."""
    user_id: str
    display_name: Optional[str]
    nickname: Optional[str]


@dataclass(frozen=True)
class ReactionSummary:
    """High-five counts per recipient and which recipients the viewer has high-fived."""
    counts: Mapping[str, int] = field(default_factory=dict)
    sent_by_viewer: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class UserStats:
    """Per-identity stats for one period. ``total_steps`` always equals the sum of ``steps_by_date``."""
    identity: Identity
    total_steps: int = 0
    verified_days: int = 0
    unverified_days: int = 0
    steps_by_date: Mapping[date, int] = field(default_factory=dict)

    @property
    def days_submitted(self) -> int:
        return len(self.steps_by_date)

    @property
    def submission_dates(self) -> FrozenSet[date]:
        return frozenset(self.steps_by_date)

    @property
    def average_per_day(self) -> float:
        return self.total_steps / self.days_submitted if self.days_submitted > 0 else 0


@dataclass(frozen=True)
class ComparisonResult:
    """Join of period A and period B stats for one identity."""
    identity: Identity
    period_a: UserStats
    period_b: Optional[UserStats]
    improvement_pct: Optional[float]
    common_days_steps_a: Optional[int]
    common_days_steps_b: Optional[int]


@dataclass(frozen=True)
class Participant:
    """Display and authoritative data attached to a compared identity before ranking."""
    comparison: ComparisonResult
    display_name: Optional[str]
    nickname: Optional[str]
    current_streak: int
    total_steps_lifetime: int
    high_five_count: int = 0
    user_has_high_fived: bool = False

    @property
    def identity(self) -> Identity:
        return self.comparison.identity

    @property
    def is_proxy(self) -> bool:
        return self.comparison.identity.is_proxy


@dataclass(frozen=True)
class RankedParticipant:
    """A participant after ranking, with badges attached."""
    rank: int
    participant: Participant
    badges: tuple = ()


@dataclass(frozen=True)
class LeaderboardQuery:
    """Validated leaderboard query parameters."""
    league_id: str
    period: str = "this_week"
    period_b: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_date_b: Optional[date] = None
    end_date_b: Optional[date] = None
    verified: str = "all"
    sort_by: str = "steps"
    limit: int = 50
    offset: int = 0


@dataclass(frozen=True)
class LeaderboardRow:
    """Single leaderboard row as presented to clients."""
    rank: int
    identity: Identity
    display_name: Optional[str]
    nickname: Optional[str]
    total_steps: int
    days_submitted: int
    total_days_in_period: int
    average_per_day: float
    verified_days: int
    unverified_days: int
    streak: int
    period_b_steps: Optional[int]
    period_b_days: Optional[int]
    improvement_pct: Optional[float]
    common_days_steps_a: Optional[int]
    common_days_steps_b: Optional[int]
    badges: List[str]
    is_proxy: bool
    high_five_count: int
    user_has_high_fived: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "identity": self.identity.to_dict(),
            "display_name": self.display_name,
            "nickname": self.nickname,
            "total_steps": self.total_steps,
            "days_submitted": self.days_submitted,
            "total_days_in_period": self.total_days_in_period,
            "average_per_day": self.average_per_day,
            "verified_days": self.verified_days,
            "unverified_days": self.unverified_days,
            "streak": self.streak,
            "period_b_steps": self.period_b_steps,
            "period_b_days": self.period_b_days,
            "improvement_pct": self.improvement_pct,
            "common_days_steps_a": self.common_days_steps_a,
            "common_days_steps_b": self.common_days_steps_b,
            "badges": list(self.badges),
            "is_proxy": self.is_proxy,
            "high_five_count": self.high_five_count,
            "user_has_high_fived": self.user_has_high_fived,
        }


@dataclass(frozen=True)
class LeaderboardMeta:
    """Summary metadata computed over all participants, not just the returned page."""
    total_members: int
    team_total_steps: int
    total_days_in_period: int
    period_a: Optional[PeriodRange]
    period_b: Optional[PeriodRange]
    limit: int
    offset: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_members": self.total_members,
            "team_total_steps": self.team_total_steps,
            "total_days_in_period": self.total_days_in_period,
            "period_a": self.period_a.to_dict() if self.period_a else None,
            "period_b": self.period_b.to_dict() if self.period_b else None,
            "limit": self.limit,
            "offset": self.offset,
        }


@dataclass(frozen=True)
class LeaderboardResponse:
    """Paginated leaderboard payload."""
    leaderboard: List[LeaderboardRow]
    meta: LeaderboardMeta

    def to_dict(self) -> Dict[str, Any]:
        return {
            "leaderboard": [row.to_dict() for row in self.leaderboard],
            "meta": self.meta.to_dict(),
        }
