"""Core module - Configuration, database and errors."""

from src.core.config import get_settings, Settings
from src.core.database import DatabaseService

__all__ = [
    "get_settings",
    "Settings",
    "DatabaseService",
]
