from __future__ import annotations

import os

import pytest

from claimstack.config import (
    Backend,
    ConfigurationError,
    EngineConfig,
    MissingConfigurationError,
    get_backend,
    get_engine_config,
    get_supabase_config,
    require_env_var,
    require_env_vars,
)
from claimstack.config.env import optional_env_bool, optional_env_float


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR"])

    assert "MISSING_VAR" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_require_env_vars_restores_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEMP_VAR", "123")

    assert os.getenv("TEMP_VAR") == "123"
    result = require_env_var("TEMP_VAR")
    assert result == "123"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("yes", True), (" On ", True), ("0", False), ("false", False), ("", True)],
)
def test_optional_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, *, expected: bool) -> None:
    monkeypatch.setenv("FLAG_VAR", raw)

    assert optional_env_bool("FLAG_VAR", default=True) is expected


def test_optional_env_bool_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLAG_VAR", "maybe")

    with pytest.raises(ConfigurationError, match="FLAG_VAR"):
        optional_env_bool("FLAG_VAR", default=False)


def test_optional_env_float(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NUMBER_VAR", raising=False)
    assert optional_env_float("NUMBER_VAR") is None

    monkeypatch.setenv("NUMBER_VAR", "2.5")
    assert optional_env_float("NUMBER_VAR") == 2.5

    monkeypatch.setenv("NUMBER_VAR", "soon")
    with pytest.raises(ConfigurationError):
        optional_env_float("NUMBER_VAR")


def test_engine_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CLAIMS_INGREDIENT_FAILURE_FATAL", raising=False)
    monkeypatch.delenv("CLAIMS_RESOLUTION_TIMEOUT_SECONDS", raising=False)

    assert get_engine_config() == EngineConfig()


def test_engine_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLAIMS_INGREDIENT_FAILURE_FATAL", "false")
    monkeypatch.setenv("CLAIMS_RESOLUTION_TIMEOUT_SECONDS", "1.5")

    config = get_engine_config()

    assert not config.ingredient_claims_fatal
    assert config.timeout_seconds == 1.5


def test_engine_config_rejects_non_positive_timeout() -> None:
    with pytest.raises(ConfigurationError, match="positive"):
        EngineConfig(timeout_seconds=0)


def test_backend_defaults_to_sqlalchemy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CLAIMSTACK_BACKEND", raising=False)

    assert get_backend() is Backend.SQLALCHEMY


def test_backend_is_case_insensitive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLAIMSTACK_BACKEND", " Supabase ")

    assert get_backend() is Backend.SUPABASE


def test_unknown_backend_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLAIMSTACK_BACKEND", "oracle")

    with pytest.raises(ConfigurationError, match="oracle"):
        get_backend()


def test_supabase_config_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        get_supabase_config()

    assert "SUPABASE_SERVICE_ROLE_KEY, SUPABASE_URL" in str(exc.value)


def test_supabase_config_builds_rest_client_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co/")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-key")

    config = get_supabase_config()

    assert config.resilience.base_url == "https://example.supabase.co/rest/v1/"
    assert config.resilience.default_headers is not None
    assert config.resilience.default_headers["Authorization"] == "Bearer service-key"
