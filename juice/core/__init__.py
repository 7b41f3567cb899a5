"""Core wiring: settings, database sessions."""

from juice.core.config import Settings, get_settings, settings
from juice.core.database import SessionLocal, engine, get_db

__all__ = ["Settings", "SessionLocal", "engine", "get_db", "get_settings", "settings"]
