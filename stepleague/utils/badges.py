"""
Badge assignment for ranked leaderboards.

Badges are decorations only: they are attached after ranking is final and
never feed back into the order.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from stepleague.constants import BadgeConstants
from stepleague.data_models.leaderboard import RankedParticipant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BadgeRules:
    """Thresholds used when assigning badges."""
    most_improved_count: int = BadgeConstants.MOST_IMPROVED_COUNT
    streak_tiers: Tuple[Tuple[int, str], ...] = BadgeConstants.STREAK_TIERS
    lifetime_tiers: Tuple[Tuple[int, str], ...] = BadgeConstants.LIFETIME_TIERS

    @classmethod
    def from_config(cls, config_service) -> "BadgeRules":
        """
        Build rules from the configuration service.

        Missing keys keep their defaults. Malformed or out-of-range values are
        logged and also fall back to the defaults, so a bad setting never
        fails a leaderboard request.
        """
        if config_service is None:
            return cls()
        return cls(
            most_improved_count=_parse_count(
                config_service.get('badges.most_improved_count'), BadgeConstants.MOST_IMPROVED_COUNT
            ),
            streak_tiers=_normalize_tiers(
                'badges.streak_tiers', config_service.get('badges.streak_tiers'), BadgeConstants.STREAK_TIERS
            ),
            lifetime_tiers=_normalize_tiers(
                'badges.lifetime_tiers', config_service.get('badges.lifetime_tiers'), BadgeConstants.LIFETIME_TIERS
            ),
        )


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_count(raw, default: int) -> int:
    if raw is None:
        return default
    if not _is_int(raw) or raw < 0:
        logger.warning(f"Invalid value for 'badges.most_improved_count': {raw!r}, using {default}")
        return default
    return raw


def _normalize_tiers(key: str, raw, default: Tuple[Tuple[int, str], ...]) -> Tuple[Tuple[int, str], ...]:
    """Tiers are stored as JSON lists of [threshold, badge]; sort them highest first."""
    if not raw:
        return default
    if not isinstance(raw, list) or not all(
        isinstance(tier, list) and len(tier) == 2 and _is_int(tier[0]) and isinstance(tier[1], str)
        for tier in raw
    ):
        logger.warning(f"Invalid value for '{key}': {raw!r}, using defaults")
        return default
    return tuple(sorted(((threshold, badge) for threshold, badge in raw), reverse=True))


def tier_badge(value: int, tiers: Sequence[Tuple[int, str]]) -> Optional[str]:
    """Return the highest tier badge ``value`` qualifies for, if any."""
    for threshold, badge in tiers:
        if value >= threshold:
            return badge
    return None


def assign_badges(ranked: Sequence[RankedParticipant], rules: BadgeRules = BadgeRules()) -> List[RankedParticipant]:
    """Return ``ranked`` with badge tuples attached, order unchanged."""
    if not ranked:
        return []

    improvers = sorted(
        (r for r in ranked
         if r.participant.comparison.improvement_pct is not None
         and r.participant.comparison.improvement_pct > 0),
        key=lambda r: r.participant.comparison.improvement_pct,
        reverse=True,
    )
    most_improved = {id(r) for r in improvers[:rules.most_improved_count]}

    result = []
    for entry in ranked:
        badges = []
        if entry.rank == 1:
            badges.append(BadgeConstants.LEADER)
        if id(entry) in most_improved:
            badges.append(BadgeConstants.MOST_IMPROVED)

        participant = entry.participant
        if not participant.is_proxy:
            streak_badge = tier_badge(participant.current_streak, rules.streak_tiers)
            if streak_badge:
                badges.append(streak_badge)
            lifetime_badge = tier_badge(participant.total_steps_lifetime, rules.lifetime_tiers)
            if lifetime_badge:
                badges.append(lifetime_badge)

        result.append(replace(entry, badges=tuple(badges)))

    return result
