"""
Shared ranking utilities for leaderboard ordering.

Ranking is done in memory over the combined user + proxy set so both kinds of
participant are ordered by the same rules.
"""

from typing import Callable, Dict, List, Optional, Sequence

from stepleague.data_models.leaderboard import Participant, RankedParticipant


SORT_OPTIONS = ('steps', 'improvement', 'average', 'streak')


class RankingUtility:
    """Shared ranking logic for consistent leaderboard ordering."""

    @staticmethod
    def get_sort_value_mapping() -> Dict[str, Callable[[Participant], Optional[float]]]:
        """Get the value each sort option ranks by."""
        return {
            'steps': lambda p: p.comparison.period_a.total_steps,
            'improvement': lambda p: p.comparison.improvement_pct,
            'average': lambda p: p.comparison.period_a.average_per_day,
            'streak': lambda p: p.current_streak,
        }

    @staticmethod
    def validate_sort_by(sort_by: str) -> bool:
        """Validate sort_by parameter against allowed values."""
        return sort_by in SORT_OPTIONS

    @staticmethod
    def sort_participants(participants: Sequence[Participant], sort_by: str = 'steps') -> List[Participant]:
        """
        Sort participants descending by the selected value.

        Missing values (e.g. no improvement without a period B) sort last. The
        sort is stable, so ties keep their input order with no secondary key.
        """
        value_of = RankingUtility.get_sort_value_mapping().get(sort_by)
        if value_of is None:
            raise ValueError(f"Invalid sort_by value: {sort_by}")

        def sort_key(participant: Participant):
            value = value_of(participant)
            return (value is not None, value if value is not None else 0)

        return sorted(participants, key=sort_key, reverse=True)

    @staticmethod
    def assign_ranks(participants: Sequence[Participant]) -> List[RankedParticipant]:
        """Assign dense 1-based ranks in the given order."""
        return [
            RankedParticipant(rank=index + 1, participant=participant)
            for index, participant in enumerate(participants)
        ]

    @staticmethod
    def rank(participants: Sequence[Participant], sort_by: str = 'steps') -> List[RankedParticipant]:
        return RankingUtility.assign_ranks(RankingUtility.sort_participants(participants, sort_by))
