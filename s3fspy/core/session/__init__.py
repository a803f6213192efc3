"""
Session management module.

Persists the navigation cursor (and the endpoint it belongs to) between
processes, e.g. between two invocations of the ``s3fs`` command.
"""
from .protocols import SessionStorage
from .models import SessionData
from .sqlite_session import SQLiteSession
from .memory_session import MemorySession

__all__ = [
    'SessionStorage',
    'SessionData',
    'SQLiteSession',
    'MemorySession',
]
