"""
Configuration management service for StepLeague.

Provides async runtime configuration (badge thresholds and similar tunables)
backed by the app_settings table with in-memory caching.
"""

import json
import logging
from typing import Any, Dict
from sqlalchemy import select
from stepleague.services.base import BaseService
from stepleague.database.models import AppSetting

logger = logging.getLogger(__name__)

class ConfigurationService(BaseService):
    """Manages runtime configuration with simple caching."""

    def __init__(self, session_factory):
        """
        Initialize configuration service with session factory.

        Args:
            session_factory: Async session factory from Database class
        """
        super().__init__(session_factory)
        self._cache: Dict[str, Any] = {}

    async def load_all(self):
        """Load all settings from database into memory, skipping invalid JSON."""
        new_cache = {}
        async with self.get_session() as session:
            result = await session.execute(select(AppSetting))
            settings = result.scalars().all()

            for setting in settings:
                try:
                    new_cache[setting.key] = json.loads(setting.value)
                except json.JSONDecodeError:
                    logger.warning(f"Invalid JSON for setting key '{setting.key}', skipping")
                    continue

        self._cache = new_cache
        logger.info(f"Loaded {len(self._cache)} configuration parameters")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Args:
            key: Configuration key (e.g., 'badges.most_improved_count')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return self._cache.get(key, default)

    async def set(self, key: str, value: Any):
        """
        Set configuration value and persist it, then reload the cache.

        Args:
            key: Configuration key
            value: Configuration value (will be JSON-encoded)
        """
        async with self.get_session() as session:
            setting = await session.get(AppSetting, key)

            if setting:
                setting.value = json.dumps(value)
            else:
                session.add(AppSetting(key=key, value=json.dumps(value)))

            # Commit happens automatically on context exit

        logger.info(f"Configuration '{key}' updated")
        await self.load_all()

    def list_all(self) -> Dict[str, Any]:
        """Return all configuration values."""
        return self._cache.copy()

    def get_by_category(self, category: str) -> Dict[str, Any]:
        """
        Get all configuration values for a specific category.

        Args:
            category: Configuration category (e.g., 'badges')

        Returns:
            Dictionary of configuration values for the category
        """
        prefix = f"{category}."
        return {
            key[len(prefix):]: value
            for key, value in self._cache.items()
            if key.startswith(prefix)
        }
