"""Core app configuration, database, logging and security."""

from app.core.config import get_settings, settings
from app.core.database import SessionLocal, get_db
from app.core.log import configure_logging

__all__ = ["SessionLocal", "configure_logging", "get_db", "get_settings", "settings"]
