"""
Query parameter parsing for leaderboard requests.

Turns a raw string mapping (as received from a query string) into a validated
LeaderboardQuery. All checks happen here, before any data access.
"""

import re
import uuid
from datetime import date
from typing import Mapping, Optional

from stepleague.constants import PaginationConstants
from stepleague.data_models.leaderboard import LeaderboardQuery
from stepleague.utils.leaderboard_exceptions import ValidationError
from stepleague.utils.periods import PERIOD_PRESETS
from stepleague.utils.ranking import SORT_OPTIONS, RankingUtility


VERIFIED_FILTERS = ('all', 'verified', 'unverified')

_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def parse_date(value: Optional[str], field: str) -> Optional[date]:
    """
    Parse a YYYY-MM-DD string into a date.

    Raises:
        ValidationError: If the value is not a real calendar date in that format
    """
    if value is None or value == '':
        return None
    value = str(value).strip()
    if not _DATE_PATTERN.match(value):
        raise ValidationError(field, "expected a date in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(field, f"invalid date '{value}'") from e


def parse_int(value, field: str, default: int, minimum: int, maximum: Optional[int] = None) -> int:
    """Parse an integer parameter and enforce its bounds."""
    if value is None or value == '':
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError as e:
        raise ValidationError(field, "expected an integer") from e

    if parsed < minimum:
        raise ValidationError(field, f"must be at least {minimum}")
    if maximum is not None and parsed > maximum:
        raise ValidationError(field, f"must be at most {maximum}")
    return parsed


def _parse_choice(value, field: str, default: str, choices) -> str:
    if value is None or value == '':
        return default
    if value not in choices:
        raise ValidationError(field, f"must be one of {', '.join(choices)}")
    return value


def parse_leaderboard_params(
    params: Mapping[str, str],
    default_limit: int = PaginationConstants.DEFAULT_LIMIT,
    max_limit: int = PaginationConstants.MAX_LIMIT,
    default_period: str = 'this_week',
) -> LeaderboardQuery:
    """
    Validate raw leaderboard parameters.

    Args:
        params: Raw parameter mapping (league_id, period, period_b, start_date,
            end_date, start_date_b, end_date_b, verified, sort_by, limit, offset)
        default_limit: Page size when ``limit`` is omitted
        max_limit: Largest accepted page size
        default_period: Period used when ``period`` is omitted

    Returns:
        LeaderboardQuery with typed values

    Raises:
        ValidationError: On the first missing or malformed parameter
    """
    league_id = params.get('league_id')
    if not league_id:
        raise ValidationError('league_id', "is required")
    try:
        league_id = str(uuid.UUID(str(league_id)))
    except ValueError as e:
        raise ValidationError('league_id', "must be a UUID") from e

    period = _parse_choice(params.get('period'), 'period', default_period, PERIOD_PRESETS)
    period_b = params.get('period_b') or None
    if period_b is not None:
        period_b = _parse_choice(period_b, 'period_b', None, PERIOD_PRESETS)

    start_date = parse_date(params.get('start_date'), 'start_date')
    end_date = parse_date(params.get('end_date'), 'end_date')
    start_date_b = parse_date(params.get('start_date_b'), 'start_date_b')
    end_date_b = parse_date(params.get('end_date_b'), 'end_date_b')

    if period == 'custom':
        _require_custom_bounds(start_date, end_date, 'start_date', 'end_date')
    if period_b == 'custom':
        _require_custom_bounds(start_date_b, end_date_b, 'start_date_b', 'end_date_b')

    return LeaderboardQuery(
        league_id=league_id,
        period=period,
        period_b=period_b,
        start_date=start_date,
        end_date=end_date,
        start_date_b=start_date_b,
        end_date_b=end_date_b,
        verified=_parse_choice(params.get('verified'), 'verified', 'all', VERIFIED_FILTERS),
        sort_by=_parse_sort_by(params.get('sort_by')),
        limit=parse_int(params.get('limit'), 'limit', default_limit, PaginationConstants.MIN_LIMIT, max_limit),
        offset=parse_int(params.get('offset'), 'offset', 0, 0),
    )


def _require_custom_bounds(start: Optional[date], end: Optional[date], start_field: str, end_field: str):
    if start is None:
        raise ValidationError(start_field, "is required for custom periods")
    if end is None:
        raise ValidationError(end_field, "is required for custom periods")
    if start > end:
        raise ValidationError(start_field, f"must not be after {end_field}")


def _parse_sort_by(value) -> str:
    if value is None or value == '':
        return 'steps'
    if not RankingUtility.validate_sort_by(value):
        raise ValidationError('sort_by', f"must be one of {', '.join(SORT_OPTIONS)}")
    return value
