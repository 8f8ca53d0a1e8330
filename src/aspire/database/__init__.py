"""
Database module for the Aspire backend
"""

from .connection import get_async_session, init_database

__all__ = ["get_async_session", "init_database"]
