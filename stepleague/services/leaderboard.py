"""
Leaderboard service for league step competitions.

Computes a league leaderboard from raw submissions on every call: resolves the
requested periods, reads users, proxies, streak records and reactions
concurrently, then deduplicates, aggregates, compares, ranks and badges the
participants before paginating the result. Nothing is cached or written.
"""

import asyncio
import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union

from stepleague.config import Config
from stepleague.constants import DisplayConstants
from stepleague.data_models.leaderboard import (
    Identity, LeaderboardMeta, LeaderboardQuery, LeaderboardResponse, LeaderboardRow,
    Participant, RankedParticipant, ReactionSummary, ResolvedPeriod, SubmissionRow,
    UserProfile, UserRecordSnapshot, UserStats
)
from stepleague.services.base import BaseService
from stepleague.services.league_data import LeagueDataService
from stepleague.utils.aggregation import aggregate_submissions
from stepleague.utils.badges import BadgeRules, assign_badges
from stepleague.utils.comparison import compare_all
from stepleague.utils.leaderboard_exceptions import NotAuthorizedError
from stepleague.utils.periods import resolve_period
from stepleague.utils.query_parser import parse_leaderboard_params
from stepleague.utils.ranking import RankingUtility
from stepleague.utils.streaks import resolve_lifetime_steps, resolve_streak

logger = logging.getLogger(__name__)


def round_half_up(value: Optional[float], places: int = DisplayConstants.DECIMAL_PLACES) -> Optional[float]:
    """Round for presentation only; internal values stay unrounded."""
    if value is None:
        return None
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


async def run_concurrently(*coroutines: Awaitable) -> list:
    """
    Run independent reads as tasks and wait for all of them.

    If any read fails, the remaining tasks are cancelled and the first error
    propagates; no partial results are returned.
    """
    tasks = [asyncio.ensure_future(coroutine) for coroutine in coroutines]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class LeaderboardService(BaseService):
    """Service for computing league leaderboards from raw submissions."""

    def __init__(
        self,
        session_factory,
        config_service=None,
        data_service: Optional[LeagueDataService] = None,
        today_provider: Optional[Callable[[], date]] = None,
    ):
        super().__init__(session_factory)
        self.config_service = config_service
        self.data_service = data_service or LeagueDataService(session_factory)
        self._today = today_provider or date.today

    async def get_leaderboard(
        self,
        params: Union[Mapping[str, str], LeaderboardQuery],
        viewer_id: Optional[str],
    ) -> LeaderboardResponse:
        """
        Compute the leaderboard for a league.

        Args:
            params: Raw query parameters or an already validated LeaderboardQuery
            viewer_id: Id of the calling user; must be a member of the league

        Returns:
            LeaderboardResponse with the requested page and summary metadata

        Raises:
            ValidationError: Malformed or missing parameters (before any read)
            NotAuthorizedError: Viewer is not a member of the league
            DataSourceError: Any storage read failed
        """
        query = params if isinstance(params, LeaderboardQuery) else parse_leaderboard_params(
            params,
            default_limit=Config.LEADERBOARD_DEFAULT_LIMIT,
            max_limit=Config.LEADERBOARD_MAX_LIMIT,
            default_period=Config.DEFAULT_PERIOD,
        )

        settings, is_member = await run_concurrently(
            self.data_service.get_league_settings(query.league_id),
            self.data_service.is_member(query.league_id, viewer_id),
        )
        if settings is None or not is_member:
            logger.info(f"Leaderboard access denied for user {viewer_id} on league {query.league_id}")
            raise NotAuthorizedError(query.league_id, viewer_id)

        today = self._today()
        period_a = resolve_period(
            query.period, today, query.start_date, query.end_date, settings.counting_start_date
        )
        period_b = None
        if query.period_b:
            period_b = resolve_period(
                query.period_b, today, query.start_date_b, query.end_date_b, settings.counting_start_date
            )
            if period_b.is_empty:
                # A comparison period entirely before the counting start has nothing to compare
                period_b = None

        members = await self.data_service.get_member_profiles(query.league_id)
        member_ids = [member.user_id for member in members]

        user_rows_a, user_rows_b, proxy_data, streak_sources, reactions = await run_concurrently(
            self._fetch_user_rows(member_ids, period_a, query.verified),
            self._fetch_user_rows(member_ids, period_b, query.verified),
            self._fetch_proxy_rows(query.league_id, period_a, period_b, query.verified),
            self._fetch_streak_sources(member_ids),
            self.data_service.get_reaction_summary(member_ids, viewer_id),
        )
        proxy_names, proxy_rows_a, proxy_rows_b = proxy_data
        records, history = streak_sources

        stats_a = self._combine(user_rows_a, proxy_rows_a)
        stats_b = self._combine(user_rows_b, proxy_rows_b) if period_b is not None else None
        comparisons = compare_all(stats_a, stats_b)

        profiles = {member.user_id: member for member in members}
        participants = [
            self._build_participant(comparison, profiles, proxy_names, records, history, reactions, today)
            for comparison in comparisons.values()
        ]

        ranked = RankingUtility.rank(participants, query.sort_by)
        ranked = assign_badges(ranked, BadgeRules.from_config(self.config_service))

        response = self._assemble_response(ranked, query, period_a, period_b)
        logger.info(
            f"Computed leaderboard for league {query.league_id}: {response.meta.total_members} participants, "
            f"period={query.period}, period_b={query.period_b}, sort_by={query.sort_by}"
        )
        return response

    async def _fetch_user_rows(
        self, member_ids: List[str], period: Optional[ResolvedPeriod], verified: str
    ) -> List[SubmissionRow]:
        if period is None or period.is_empty:
            return []
        return await self.data_service.fetch_user_submissions(member_ids, period.range, verified)

    async def _fetch_proxy_rows(
        self,
        league_id: str,
        period_a: ResolvedPeriod,
        period_b: Optional[ResolvedPeriod],
        verified: str,
    ) -> Tuple[Dict[str, str], List[SubmissionRow], List[SubmissionRow]]:
        """Proxy members of this league and their rows for both periods."""
        proxy_names = await self.data_service.get_proxy_members(league_id)
        proxy_ids = list(proxy_names)

        async def _rows(period: Optional[ResolvedPeriod]) -> List[SubmissionRow]:
            if period is None or period.is_empty:
                return []
            return await self.data_service.fetch_proxy_submissions(proxy_ids, period.range, verified)

        rows_a, rows_b = await run_concurrently(_rows(period_a), _rows(period_b))
        return proxy_names, rows_a, rows_b

    async def _fetch_streak_sources(
        self, member_ids: List[str]
    ) -> Tuple[Dict[str, UserRecordSnapshot], Dict[str, List[date]]]:
        return tuple(await run_concurrently(
            self.data_service.get_user_records(member_ids),
            self.data_service.get_submission_history(member_ids),
        ))

    @staticmethod
    def _combine(user_rows: List[SubmissionRow], proxy_rows: List[SubmissionRow]) -> Dict[Identity, UserStats]:
        """Users first, then proxies; this order is the tie-break for equal sort values."""
        combined = dict(aggregate_submissions(user_rows))
        combined.update(aggregate_submissions(proxy_rows))
        return combined

    @staticmethod
    def _build_participant(
        comparison,
        profiles: Mapping[str, UserProfile],
        proxy_names: Mapping[str, str],
        records: Mapping[str, UserRecordSnapshot],
        history: Mapping[str, List[date]],
        reactions: ReactionSummary,
        today: date,
    ) -> Participant:
        identity = comparison.identity
        if identity.is_proxy:
            return Participant(
                comparison=comparison,
                display_name=proxy_names.get(identity.id) or DisplayConstants.UNKNOWN_PROXY_NAME,
                nickname=None,
                current_streak=0,
                total_steps_lifetime=0,
            )

        profile = profiles.get(identity.id)
        return Participant(
            comparison=comparison,
            display_name=profile.display_name if profile else None,
            nickname=profile.nickname if profile else None,
            current_streak=resolve_streak(identity, records, history, today),
            total_steps_lifetime=resolve_lifetime_steps(identity, records),
            high_five_count=reactions.counts.get(identity.id, 0),
            user_has_high_fived=identity.id in reactions.sent_by_viewer,
        )

    @staticmethod
    def _assemble_response(
        ranked: List[RankedParticipant],
        query: LeaderboardQuery,
        period_a: ResolvedPeriod,
        period_b: Optional[ResolvedPeriod],
    ) -> LeaderboardResponse:
        """Paginate after ranking so rank numbers stay stable across pages."""
        total_days = period_a.days
        page = ranked[query.offset:query.offset + query.limit]

        rows = []
        for entry in page:
            participant = entry.participant
            comparison = participant.comparison
            stats_a = comparison.period_a
            stats_b = comparison.period_b
            rows.append(LeaderboardRow(
                rank=entry.rank,
                identity=participant.identity,
                display_name=participant.nickname or participant.display_name,
                nickname=participant.nickname,
                total_steps=stats_a.total_steps,
                days_submitted=stats_a.days_submitted,
                total_days_in_period=total_days,
                average_per_day=round_half_up(stats_a.average_per_day),
                verified_days=stats_a.verified_days,
                unverified_days=stats_a.unverified_days,
                streak=participant.current_streak,
                period_b_steps=stats_b.total_steps if stats_b else None,
                period_b_days=stats_b.days_submitted if stats_b else None,
                improvement_pct=round_half_up(comparison.improvement_pct),
                common_days_steps_a=comparison.common_days_steps_a,
                common_days_steps_b=comparison.common_days_steps_b,
                badges=list(entry.badges),
                is_proxy=participant.is_proxy,
                high_five_count=participant.high_five_count,
                user_has_high_fived=participant.user_has_high_fived,
            ))

        meta = LeaderboardMeta(
            total_members=len(ranked),
            team_total_steps=sum(entry.participant.comparison.period_a.total_steps for entry in ranked),
            total_days_in_period=total_days,
            period_a=period_a.range,
            period_b=period_b.range if period_b else None,
            limit=query.limit,
            offset=query.offset,
        )
        return LeaderboardResponse(leaderboard=rows, meta=meta)
