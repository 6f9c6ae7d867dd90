"""Thin PostgREST client for reading claims tables from Supabase."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import batched
from logging import getLogger
from typing import TYPE_CHECKING, cast

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from claimstack.adapters.http_resilience import ResilientClient
from claimstack.config.supabase import get_supabase_config
from claimstack.domain.errors import DataUnavailableError

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Mapping
    from types import TracebackType

    from claimstack.config.http_resilience import ResilienceConfig
    from claimstack.config.supabase import SupabaseConfig

log = getLogger(__name__)

IN_FILTER_BATCH_SIZE = 100


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def eq(value: object) -> str:
    return f"eq.{value}"


def in_list(values: Collection[object]) -> str:
    return f"in.({','.join(str(value) for value in values)})"


@dataclass(slots=True)
class PostgrestClient:
    """Opens one ``ResilientClient`` for its lifetime; use as an async context manager."""

    config: SupabaseConfig = field(default_factory=get_supabase_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False)

    async def __aenter__(self) -> PostgrestClient:
        self._client = self.client_factory(self.config.resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def select[TRow: BaseModel](
        self,
        table: str,
        row_type: type[TRow],
        *,
        filters: Mapping[str, str],
        order: str | None = None,
    ) -> list[TRow]:
        if self._client is None:
            raise RuntimeError("PostgrestClient used outside of its context")

        params: dict[str, str] = {"select": "*", **filters}
        if order is not None:
            params["order"] = order
        try:
            response = await self._client.get(table, params=httpx.QueryParams(params))
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            log.exception("Supabase request for %s failed", table)
            raise DataUnavailableError(f"Failed to read {table}", source="supabase") from exc
        except ValueError as exc:
            raise DataUnavailableError(
                f"Supabase returned invalid JSON for {table}", source="supabase"
            ) from exc

        if not isinstance(payload, list):
            raise DataUnavailableError(
                f"Unexpected Supabase payload for {table}", source="supabase"
            )
        try:
            return TypeAdapter(list[row_type]).validate_python(cast("list[object]", payload))
        except ValidationError as exc:
            log.exception("Supabase rows for %s failed validation", table)
            raise DataUnavailableError(
                f"Unexpected row shape in {table}", source="supabase"
            ) from exc

    async def select_in[TRow: BaseModel](
        self,
        table: str,
        row_type: type[TRow],
        *,
        column: str,
        values: Collection[object],
        filters: Mapping[str, str] | None = None,
        order: str | None = None,
    ) -> list[TRow]:
        """Select rows whose ``column`` is in ``values``, one request per batch."""

        rows: list[TRow] = []
        for batch in batched(sorted({str(value) for value in values}), IN_FILTER_BATCH_SIZE):
            rows.extend(
                await self.select(
                    table,
                    row_type,
                    filters={**(filters or {}), column: in_list(batch)},
                    order=order,
                )
            )
        return rows
