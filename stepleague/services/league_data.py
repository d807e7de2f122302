"""
Read-only data access for leaderboard computation.

Every public method opens its own session so independent reads can run
concurrently. Storage failures surface as DataSourceError.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from stepleague.data_models.leaderboard import (
    LeagueSettings, PeriodRange, ProxyRef, ReactionSummary, SubmissionRow, UserProfile,
    UserRecordSnapshot, UserRef
)
from stepleague.database.models import (
    HighFive, League, Membership, ProxyMember, Submission, User, UserRecord
)
from stepleague.services.base import BaseService

logger = logging.getLogger(__name__)


def _apply_filters(query, period_range: Optional[PeriodRange], verified: str):
    """Restrict a submissions query by date range and verification state."""
    if period_range is not None:
        query = query.where(
            Submission.for_date >= period_range.start,
            Submission.for_date <= period_range.end,
        )
    if verified == 'verified':
        query = query.where(Submission.verified.is_(True))
    elif verified == 'unverified':
        query = query.where(Submission.verified.is_(False))
    return query


class LeagueDataService(BaseService):
    """Collaborator stores consumed by the leaderboard engine."""

    async def get_league_settings(self, league_id: str) -> Optional[LeagueSettings]:
        async def _read(session: AsyncSession):
            league = await session.get(League, league_id)
            if league is None:
                return None
            return LeagueSettings(
                league_id=league.id,
                name=league.name,
                counting_start_date=league.counting_start_date,
            )
        return await self.run_read("league settings lookup", _read)

    async def is_member(self, league_id: str, user_id: Optional[str]) -> bool:
        """Yes/no membership check for the caller."""
        if not user_id:
            return False

        async def _read(session: AsyncSession):
            count = await session.scalar(
                select(func.count(Membership.id)).where(
                    Membership.league_id == league_id,
                    Membership.user_id == user_id,
                )
            )
            return bool(count)
        return await self.run_read("membership check", _read)

    async def get_member_profiles(self, league_id: str) -> List[UserProfile]:
        """League members with their display names, in join order."""
        async def _read(session: AsyncSession):
            result = await session.execute(
                select(User.id, User.display_name, User.nickname)
                .join(Membership, Membership.user_id == User.id)
                .where(Membership.league_id == league_id)
                .order_by(Membership.joined_at, Membership.id)
            )
            return [
                UserProfile(user_id=row.id, display_name=row.display_name, nickname=row.nickname)
                for row in result
            ]
        return await self.run_read("member lookup", _read)

    async def fetch_user_submissions(
        self,
        user_ids: Sequence[str],
        period_range: Optional[PeriodRange],
        verified: str = 'all',
    ) -> List[SubmissionRow]:
        """
        Fetch raw submission rows for real users.

        Rows are intentionally not filtered by league: a user's steps count
        toward every league they belong to. ``period_range`` of None means no
        date restriction.
        """
        if not user_ids:
            return []

        async def _read(session: AsyncSession):
            query = select(
                Submission.user_id, Submission.for_date, Submission.steps, Submission.verified
            ).where(Submission.user_id.in_(list(user_ids)))
            query = _apply_filters(query, period_range, verified).order_by(Submission.for_date, Submission.id)
            result = await session.execute(query)
            return [
                SubmissionRow(
                    identity=UserRef(row.user_id),
                    for_date=row.for_date,
                    steps=row.steps or 0,
                    verified=bool(row.verified),
                )
                for row in result
            ]
        return await self.run_read("user submission fetch", _read)

    async def get_proxy_members(self, league_id: str) -> Dict[str, str]:
        """Proxy member display names keyed by proxy id, in creation order."""
        async def _read(session: AsyncSession):
            result = await session.execute(
                select(ProxyMember.id, ProxyMember.display_name)
                .where(ProxyMember.league_id == league_id)
                .order_by(ProxyMember.created_at, ProxyMember.id)
            )
            return {row.id: row.display_name for row in result}
        return await self.run_read("proxy member lookup", _read)

    async def fetch_proxy_submissions(
        self,
        proxy_ids: Sequence[str],
        period_range: Optional[PeriodRange],
        verified: str = 'all',
    ) -> List[SubmissionRow]:
        """Fetch raw submission rows for proxy members. Proxies are league-bound through their ids."""
        if not proxy_ids:
            return []

        async def _read(session: AsyncSession):
            query = select(
                Submission.proxy_member_id, Submission.for_date, Submission.steps, Submission.verified
            ).where(Submission.proxy_member_id.in_(list(proxy_ids)))
            query = _apply_filters(query, period_range, verified).order_by(Submission.for_date, Submission.id)
            result = await session.execute(query)
            return [
                SubmissionRow(
                    identity=ProxyRef(row.proxy_member_id),
                    for_date=row.for_date,
                    steps=row.steps or 0,
                    verified=bool(row.verified),
                )
                for row in result
            ]
        return await self.run_read("proxy submission fetch", _read)

    async def get_user_records(self, user_ids: Sequence[str]) -> Dict[str, UserRecordSnapshot]:
        if not user_ids:
            return {}

        async def _read(session: AsyncSession):
            result = await session.execute(
                select(UserRecord.user_id, UserRecord.current_streak, UserRecord.total_steps_lifetime)
                .where(UserRecord.user_id.in_(list(user_ids)))
            )
            return {
                row.user_id: UserRecordSnapshot(
                    user_id=row.user_id,
                    current_streak=row.current_streak,
                    total_steps_lifetime=row.total_steps_lifetime,
                )
                for row in result
            }
        return await self.run_read("user record lookup", _read)

    async def get_submission_history(self, user_ids: Sequence[str]) -> Dict[str, List[date]]:
        """Distinct submission dates per user across their whole history, most recent first."""
        if not user_ids:
            return {}

        async def _read(session: AsyncSession):
            result = await session.execute(
                select(Submission.user_id, Submission.for_date)
                .where(Submission.user_id.in_(list(user_ids)))
                .distinct()
                .order_by(Submission.user_id, Submission.for_date.desc())
            )
            history: Dict[str, List[date]] = {}
            for row in result:
                history.setdefault(row.user_id, []).append(row.for_date)
            return history
        return await self.run_read("submission history fetch", _read)

    async def get_reaction_summary(self, recipient_ids: Iterable[str], viewer_id: Optional[str]) -> ReactionSummary:
        """High-five counts per recipient plus the recipients the viewer has high-fived."""
        recipient_ids = list(recipient_ids)
        if not recipient_ids:
            return ReactionSummary()

        async def _read(session: AsyncSession):
            result = await session.execute(
                select(HighFive.sender_id, HighFive.recipient_id)
                .where(HighFive.recipient_id.in_(recipient_ids))
            )
            counts: Dict[str, int] = {}
            sent_by_viewer = set()
            for row in result:
                counts[row.recipient_id] = counts.get(row.recipient_id, 0) + 1
                if viewer_id and row.sender_id == viewer_id:
                    sent_by_viewer.add(row.recipient_id)
            return ReactionSummary(counts=counts, sent_by_viewer=frozenset(sent_by_viewer))
        return await self.run_read("reaction lookup", _read)
