"""
Engine-wide constants for the StepLeague leaderboard.

This module contains the magic numbers used by ranking, badges and pagination.
Badge thresholds can be overridden at runtime through the configuration service.
"""

class BadgeConstants:
    """Constants related to badge assignment."""
    
    LEADER = "leader"
    MOST_IMPROVED = "most_improved"
    
    # Number of participants eligible for the most improved badge
    MOST_IMPROVED_COUNT = 3
    
    # Streak tiers, highest first: (minimum current streak, badge)
    STREAK_TIERS = (
        (30, "streak_30"),
        (7, "streak_7"),
        (3, "streak_3"),
    )
    
    # Lifetime tiers, highest first: (minimum lifetime steps, badge)
    LIFETIME_TIERS = (
        (1_000_000, "million_club"),
        (500_000, "500k_club"),
        (100_000, "100k_club"),
    )

class PaginationConstants:
    """Constants for paginated leaderboards."""
    
    DEFAULT_LIMIT = 50
    MIN_LIMIT = 1
    MAX_LIMIT = 200

class DisplayConstants:
    """Constants for presentation formatting."""
    
    # Decimal places kept for averages and percentages in responses
    DECIMAL_PLACES = 1
    
    UNKNOWN_PROXY_NAME = "Unknown Proxy"
