"""Database layer - engine, base classes."""

from timesheet_kernel.db.base import Base, TrackedBase, UTCDateTime, UUIDString
from timesheet_kernel.db.engine import (
    DEFAULT_DATABASE_URL,
    build_engine,
    build_session_factory,
    create_tables,
    drop_tables,
    session_scope,
)

__all__ = [
    "DEFAULT_DATABASE_URL",
    "build_engine",
    "build_session_factory",
    "create_tables",
    "drop_tables",
    "session_scope",
    "Base",
    "TrackedBase",
    "UTCDateTime",
    "UUIDString",
]
