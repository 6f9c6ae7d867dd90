"""SQLAlchemy adapter package for claimstack."""

from __future__ import annotations

from .lifecycle import (
    StartupError,
    build_repositories,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from .mappings import create_all_tables, metadata
from .repositories import SqlAlchemyBrandLinkRepository, SqlAlchemyClaimRepository

__all__ = [
    "SqlAlchemyBrandLinkRepository",
    "SqlAlchemyClaimRepository",
    "StartupError",
    "build_repositories",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
