"""
SQLAlchemy implementations of the engine's storage collaborators.
"""
from .progress import SqlProgressStore
from .test_sessions import SqlSessionRepository

__all__ = ["SqlProgressStore", "SqlSessionRepository"]
