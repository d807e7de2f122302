#!/usr/bin/env python3
"""
Command-line entry point for computing a league leaderboard.

Prints the leaderboard payload as JSON, or the client-facing error body with a
non-zero exit code.

Usage:
    python -m stepleague.main --league-id <uuid> --viewer-id <user id> [--period last_week]
"""

import argparse
import asyncio
import json
import sys
from typing import Dict, List, Optional

from stepleague.config import Config
from stepleague.database.database import Database
from stepleague.services.configuration import ConfigurationService
from stepleague.services.leaderboard import LeaderboardService
from stepleague.utils.error_responses import build_error_response
from stepleague.utils.logger import setup_logger


QUERY_OPTIONS = (
    'league_id', 'period', 'period_b', 'start_date', 'end_date',
    'start_date_b', 'end_date_b', 'verified', 'sort_by', 'limit', 'offset',
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute a StepLeague leaderboard")
    parser.add_argument('--league-id', required=True)
    parser.add_argument('--viewer-id', required=True, help="User requesting the leaderboard")
    parser.add_argument('--period')
    parser.add_argument('--period-b')
    parser.add_argument('--start-date')
    parser.add_argument('--end-date')
    parser.add_argument('--start-date-b')
    parser.add_argument('--end-date-b')
    parser.add_argument('--verified')
    parser.add_argument('--sort-by')
    parser.add_argument('--limit')
    parser.add_argument('--offset')
    parser.add_argument('--database-url', help="Overrides DATABASE_URL")
    return parser


def params_from_args(args: argparse.Namespace) -> Dict[str, str]:
    """Collect the query options that were actually given."""
    return {
        option: getattr(args, option)
        for option in QUERY_OPTIONS
        if getattr(args, option) is not None
    }


async def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    # Package-level logger so service modules' records are emitted too
    logger = setup_logger('stepleague')
    Config.validate()

    db = Database(args.database_url)
    await db.initialize()
    try:
        config_service = ConfigurationService(db.session_factory)
        await config_service.load_all()
        service = LeaderboardService(db.session_factory, config_service)

        try:
            response = await service.get_leaderboard(params_from_args(args), args.viewer_id)
        except Exception as e:
            status, body = build_error_response(e)
            logger.warning(f"Leaderboard request failed with status {status}: {e}")
            print(json.dumps(body, indent=2))
            return 1

        print(json.dumps(response.to_dict(), indent=2))
        return 0
    finally:
        await db.close()


def main():
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
