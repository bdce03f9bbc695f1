"""
Database package containing engine and session management.
"""

from .base import engine, async_session_maker, create_engine_for_url
from scenebook.db.base import get_db

__all__ = [
    'engine',
    'async_session_maker',
    'create_engine_for_url',
    'get_db',
]
