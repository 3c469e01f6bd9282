"""Database layer - engine, base classes and immutability listeners."""

from deadline_kernel.db.base import UUID, Base, UUIDString
from deadline_kernel.db.engine import (
    create_tables,
    get_session,
    init_engine_from_url,
)

__all__ = [
    "get_session",
    "init_engine_from_url",
    "create_tables",
    "Base",
    "UUIDString",
    "UUID",
]
