import os
from typing import Optional

from dotenv import load_dotenv

from stepleague.constants import PaginationConstants

load_dotenv()

class Config:
    """Leaderboard engine configuration settings"""
    
    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///stepleague.db')
    
    # Logging settings
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    
    # Leaderboard query settings
    LEADERBOARD_DEFAULT_LIMIT = int(os.getenv('LEADERBOARD_DEFAULT_LIMIT', 50))
    LEADERBOARD_MAX_LIMIT = int(os.getenv('LEADERBOARD_MAX_LIMIT', 200))
    DEFAULT_PERIOD = os.getenv('LEADERBOARD_DEFAULT_PERIOD', 'this_week')
    
    @classmethod
    def get_async_database_url(cls, database_url: Optional[str] = None) -> str:
        """Get the database URL (``DATABASE_URL`` unless given) with an async driver for sqlite URLs"""
        database_url = database_url or cls.DATABASE_URL
        if database_url.startswith('sqlite:///'):
            database_url = database_url.replace('sqlite:///', 'sqlite+aiosqlite:///')
        return database_url
    
    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.DATABASE_URL:
            raise ValueError("DATABASE_URL is required")
        if cls.LEADERBOARD_DEFAULT_LIMIT < PaginationConstants.MIN_LIMIT:
            raise ValueError(f"LEADERBOARD_DEFAULT_LIMIT must be at least {PaginationConstants.MIN_LIMIT}")
        if cls.LEADERBOARD_MAX_LIMIT < cls.LEADERBOARD_DEFAULT_LIMIT:
            raise ValueError("LEADERBOARD_MAX_LIMIT must not be below LEADERBOARD_DEFAULT_LIMIT")
        if cls.LEADERBOARD_MAX_LIMIT > PaginationConstants.MAX_LIMIT:
            raise ValueError(f"LEADERBOARD_MAX_LIMIT must be at most {PaginationConstants.MAX_LIMIT}")
