"""Database layer - engine, base classes and column types."""

from textile_kernel.db.base import Base, TrackedBase
from textile_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from textile_kernel.db.types import SizesJSON

__all__ = [
    "Base",
    "TrackedBase",
    "SizesJSON",
    "create_tables",
    "drop_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_engine_from_url",
    "reset_engine",
    "session_scope",
]
