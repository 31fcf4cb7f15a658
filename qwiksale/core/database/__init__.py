"""
Centralized database layer for QwikSale.

This package provides a unified location for all database entities and repositories,
organized by marketplace domain.

Structure:
- entities/: Database entity models (users, listings, carriers, support records)
- repositories/: Data access layer organized by table
- session.py: Global engine and session factory management
- utils.py: Database utility functions (engine, session factory, schema probing)
"""

from .base import Base
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
    has_table,
    utc_now,
)

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "has_table",
    "init_db",
    "utc_now",
]
