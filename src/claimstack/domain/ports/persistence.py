"""Ports for reading claims and the brand ownership chain.

All methods take *sets* of ids so adapters can answer with one query per call.
Implementations raise ``DataUnavailableError`` on any I/O failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection
    from uuid import UUID

    from claimstack.domain.model import (
        BrandPermission,
        Claim,
        ClaimLevel,
        Market,
        MarketClaimOverride,
        MasterClaimBrand,
        Product,
    )


@runtime_checkable
class ClaimRepository(Protocol):
    """Read access to claim rows and the data needed to stack them per product."""

    async def fetch_claims(
        self,
        level: ClaimLevel,
        owner_ids: Collection[UUID],
        market: Market | None,
    ) -> list[Claim]:
        """Return claims of ``level`` owned by ``owner_ids``.

        ``market=None`` returns global and every market-specific row; a market
        returns that market's rows plus global rows. ``owner_ids`` must not be empty.
        """
        ...

    async def fetch_ingredient_links(
        self, product_ids: Collection[UUID]
    ) -> dict[UUID, tuple[UUID, ...]]:
        """Linked ingredient ids per product; unlinked products map to ``()``."""
        ...

    async def fetch_market_overrides(
        self,
        product_ids: Collection[UUID],
        market: Market | None,
    ) -> list[MarketClaimOverride]: ...


@runtime_checkable
class BrandLinkRepository(Protocol):
    """Read access to the chain product -> master claim brand -> tenant brand -> user."""

    async def fetch_products(self, product_ids: Collection[UUID]) -> list[Product]: ...

    async def fetch_master_brands(
        self, master_brand_ids: Collection[UUID]
    ) -> list[MasterClaimBrand]: ...

    async def fetch_admin_permissions(
        self,
        user_id: UUID,
        tenant_brand_ids: Collection[UUID],
    ) -> list[BrandPermission]: ...


@dataclass(slots=True)
class ClaimsRepositories:
    """Repositories required to resolve claims and permissions."""

    claims: ClaimRepository
    brand_links: BrandLinkRepository


def require_ids(ids: Collection[UUID], *, what: str) -> None:
    if not ids:
        raise ValueError(f"{what} must not be empty")
