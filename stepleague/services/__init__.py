"""
Services package for the StepLeague leaderboard engine.

Services own database sessions; pure computation lives in stepleague.utils.
"""

from .base import BaseService
from .configuration import ConfigurationService
from .league_data import LeagueDataService
from .leaderboard import LeaderboardService

__all__ = ['BaseService', 'ConfigurationService', 'LeagueDataService', 'LeaderboardService']
