"""
Tests for leaderboard ordering, rank assignment and badges.
"""

from datetime import date, timedelta

import pytest

from stepleague.data_models.leaderboard import (
    ComparisonResult, Participant, ProxyRef, UserRef, UserStats
)
from stepleague.utils.badges import BadgeRules, assign_badges, tier_badge
from stepleague.utils.ranking import RankingUtility


def participant(identity, total_steps=0, days=1, improvement=None, streak=0, lifetime=0):
    """Build a participant whose period A steps are spread evenly over ``days`` days."""
    per_day = total_steps // days
    stats = UserStats(
        identity=identity,
        total_steps=per_day * days,
        unverified_days=days,
        steps_by_date={date(2026, 1, 1) + timedelta(days=i): per_day for i in range(days)},
    )
    comparison = ComparisonResult(
        identity=identity,
        period_a=stats,
        period_b=None,
        improvement_pct=improvement,
        common_days_steps_a=None,
        common_days_steps_b=None,
    )
    return Participant(
        comparison=comparison,
        display_name=identity.id,
        nickname=None,
        current_streak=streak,
        total_steps_lifetime=lifetime,
    )


def names(ranked):
    return [entry.participant.identity.id for entry in ranked]


class TestRanking:
    def test_sort_by_steps_with_dense_ranks(self):
        ranked = RankingUtility.rank([
            participant(UserRef("a"), 30000),
            participant(UserRef("b"), 50000),
            participant(UserRef("c"), 40000),
        ], 'steps')

        assert names(ranked) == ["b", "c", "a"]
        assert [entry.rank for entry in ranked] == [1, 2, 3]

    def test_ties_keep_input_order_and_get_distinct_ranks(self):
        ranked = RankingUtility.rank([
            participant(UserRef("first"), 1000),
            participant(UserRef("second"), 1000),
            participant(ProxyRef("third"), 1000),
        ], 'steps')

        assert names(ranked) == ["first", "second", "third"]
        assert [entry.rank for entry in ranked] == [1, 2, 3]

    def test_missing_improvement_sorts_last(self):
        ranked = RankingUtility.rank([
            participant(UserRef("none"), 1000, improvement=None),
            participant(UserRef("down"), 1000, improvement=-40.0),
            participant(UserRef("up"), 1000, improvement=25.0),
        ], 'improvement')

        assert names(ranked) == ["up", "down", "none"]

    def test_sort_by_average(self):
        ranked = RankingUtility.rank([
            participant(UserRef("many_days"), 30000, days=3),
            participant(UserRef("one_day"), 15000, days=1),
        ], 'average')

        assert names(ranked) == ["one_day", "many_days"]

    def test_sort_by_streak(self):
        ranked = RankingUtility.rank([
            participant(UserRef("short"), 90000, streak=2),
            participant(UserRef("long"), 100, streak=12),
        ], 'streak')

        assert names(ranked) == ["long", "short"]

    def test_invalid_sort_key(self):
        assert not RankingUtility.validate_sort_by('name')
        with pytest.raises(ValueError):
            RankingUtility.sort_participants([], 'name')

    def test_empty_input(self):
        assert RankingUtility.rank([], 'steps') == []


class TestBadges:
    def test_leader_badge_only_for_rank_one(self):
        ranked = assign_badges(RankingUtility.rank([
            participant(UserRef("a"), 500),
            participant(UserRef("b"), 900),
        ]))

        assert ranked[0].badges == ("leader",)
        assert ranked[1].badges == ()

    def test_most_improved_limited_to_top_positive(self):
        ranked = assign_badges(RankingUtility.rank([
            participant(UserRef("a"), 5000, improvement=10.0),
            participant(UserRef("b"), 4000, improvement=50.0),
            participant(UserRef("c"), 3000, improvement=30.0),
            participant(UserRef("d"), 2000, improvement=20.0),
            participant(UserRef("e"), 1000, improvement=-5.0),
        ]))
        badges = {entry.participant.identity.id: entry.badges for entry in ranked}

        assert "most_improved" in badges["b"]
        assert "most_improved" in badges["c"]
        assert "most_improved" in badges["d"]
        assert "most_improved" not in badges["a"]
        assert "most_improved" not in badges["e"]

    def test_streak_and_lifetime_tiers(self):
        ranked = assign_badges(RankingUtility.rank([
            participant(UserRef("leader"), 9000, streak=35, lifetime=1_200_000),
            participant(UserRef("member"), 100, streak=7, lifetime=150_000),
        ]))

        assert ranked[0].badges == ("leader", "streak_30", "million_club")
        assert ranked[1].badges == ("streak_7", "100k_club")

    def test_proxies_get_no_streak_or_lifetime_badges(self):
        ranked = assign_badges(RankingUtility.rank([
            participant(ProxyRef("p"), 9000, streak=40, lifetime=2_000_000),
        ]))
        assert ranked[0].badges == ("leader",)

    def test_badges_do_not_reorder(self):
        ranked = RankingUtility.rank([
            participant(UserRef("a"), 900),
            participant(UserRef("b"), 100, streak=50, improvement=90.0),
        ])
        badged = assign_badges(ranked)

        assert names(badged) == names(ranked)
        assert [entry.rank for entry in badged] == [1, 2]

    def test_custom_rules(self):
        rules = BadgeRules(most_improved_count=1, streak_tiers=((2, "streak_2"),), lifetime_tiers=())
        ranked = assign_badges(RankingUtility.rank([
            participant(UserRef("a"), 900, improvement=5.0, streak=3),
            participant(UserRef("b"), 100, improvement=10.0),
        ]), rules)

        assert ranked[0].badges == ("leader", "streak_2")
        assert ranked[1].badges == ("most_improved",)

    def test_tier_badge_picks_highest(self):
        tiers = ((30, "streak_30"), (7, "streak_7"), (3, "streak_3"))
        assert tier_badge(31, tiers) == "streak_30"
        assert tier_badge(7, tiers) == "streak_7"
        assert tier_badge(2, tiers) is None

    def test_rules_from_config(self):
        class StubConfig:
            values = {'badges.most_improved_count': 1, 'badges.streak_tiers': [[5, "streak_5"], [10, "streak_10"]]}

            def get(self, key, default=None):
                return self.values.get(key, default)

        rules = BadgeRules.from_config(StubConfig())

        assert rules.most_improved_count == 1
        assert rules.streak_tiers == ((10, "streak_10"), (5, "streak_5"))
        assert rules.lifetime_tiers == BadgeRules().lifetime_tiers

    @pytest.mark.parametrize("values", [
        {'badges.streak_tiers': {"30": "streak_30", "7": "streak_7"}},
        {'badges.streak_tiers': [[30, "streak_30"], [7]]},
        {'badges.streak_tiers': [["thirty", "streak_30"]]},
        {'badges.lifetime_tiers': "million_club"},
        {'badges.most_improved_count': "three"},
        {'badges.most_improved_count': -1},
        {'badges.most_improved_count': True},
    ])
    def test_malformed_config_falls_back_to_defaults(self, values):
        class StubConfig:
            def get(self, key, default=None):
                return values.get(key, default)

        assert BadgeRules.from_config(StubConfig()) == BadgeRules()

    def test_malformed_config_does_not_break_badging(self):
        class StubConfig:
            def get(self, key, default=None):
                return {'badges.most_improved_count': -1}.get(key, default)

        ranked = assign_badges(RankingUtility.rank([
            participant(UserRef("a"), 900, improvement=5.0),
            participant(UserRef("b"), 100, improvement=10.0),
        ]), BadgeRules.from_config(StubConfig()))

        assert ranked[0].badges == ("leader", "most_improved")
        assert ranked[1].badges == ("most_improved",)

    def test_empty(self):
        assert assign_badges([]) == []
