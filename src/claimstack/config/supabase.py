"""Supabase (PostgREST) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

SUPABASE_REST_PATH = "/rest/v1/"
SUPABASE_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class SupabaseConfig:
    """Holds the service-role credentials for the managed Postgres REST API."""

    url: str
    service_role_key: str
    resilience: ResilienceConfig


def supabase_resilience(url: str, service_role_key: str) -> ResilienceConfig:
    return ResilienceConfig(
        name="supabase",
        base_url=url.rstrip("/") + SUPABASE_REST_PATH,
        timeout_seconds=SUPABASE_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=3),
        ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
        default_headers={
            "apikey": service_role_key,
            "Authorization": f"Bearer {service_role_key}",
            "Accept": "application/json",
        },
    )


def get_supabase_config(*, resilience: ResilienceConfig | None = None) -> SupabaseConfig:
    values = require_env_vars(("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"))
    url = values["SUPABASE_URL"].strip()
    key = values["SUPABASE_SERVICE_ROLE_KEY"].strip()
    return SupabaseConfig(
        url=url,
        service_role_key=key,
        resilience=resilience or supabase_resilience(url, key),
    )
