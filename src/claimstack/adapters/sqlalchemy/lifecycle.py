"""Engine and session factory lifecycle for the SQLAlchemy adapter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from claimstack.adapters.sqlalchemy.mappings import create_all_tables
from claimstack.adapters.sqlalchemy.repositories import (
    SqlAlchemyBrandLinkRepository,
    SqlAlchemyClaimRepository,
)
from claimstack.config.storage import get_database_config
from claimstack.domain.ports.persistence import ClaimsRepositories

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when SQLAlchemy repositories are requested before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call claimstack.adapters.sqlalchemy."
                "startup() before requesting repositories."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    create_schema: bool = False,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(
        database_uri or get_database_config().uri, future=True
    )
    if create_schema:
        create_all_tables(resolved_engine)

    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


def build_repositories() -> ClaimsRepositories:
    session_factory = _STATE.session_factory
    return ClaimsRepositories(
        claims=SqlAlchemyClaimRepository(session_factory),
        brand_links=SqlAlchemyBrandLinkRepository(session_factory),
    )
