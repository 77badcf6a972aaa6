"""Core app configuration and database."""

from poi_accounts.core.config import get_settings, settings
from poi_accounts.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
