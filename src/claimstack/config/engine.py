"""Resolution engine settings.

The builder and resolver receive these explicitly; nothing in the domain layer
reads the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum

from .env import optional_env_bool, optional_env_float
from .errors import ConfigurationError


class Backend(StrEnum):
    SQLALCHEMY = "sqlalchemy"
    SUPABASE = "supabase"


@dataclass(frozen=True, slots=True)
class EngineConfig:
    ingredient_claims_fatal: bool = True
    timeout_seconds: float | None = None
    report_type_conflicts: bool = True

    def __post_init__(self) -> None:
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ConfigurationError("Resolution timeout must be positive")


def get_engine_config() -> EngineConfig:
    return EngineConfig(
        ingredient_claims_fatal=optional_env_bool(
            "CLAIMS_INGREDIENT_FAILURE_FATAL", default=True
        ),
        timeout_seconds=optional_env_float("CLAIMS_RESOLUTION_TIMEOUT_SECONDS"),
    )


def get_backend() -> Backend:
    value = os.getenv("CLAIMSTACK_BACKEND")
    if value is None or not value.strip():
        return Backend.SQLALCHEMY
    try:
        return Backend(value.strip().lower())
    except ValueError as exc:
        raise ConfigurationError(f"Unsupported backend: {value!r}") from exc
