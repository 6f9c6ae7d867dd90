"""Claim and brand-link repositories reading Supabase through PostgREST."""

from __future__ import annotations

from typing import TYPE_CHECKING

from claimstack.adapters.claim_rows import GLOBAL_CODES
from claimstack.domain.model import BrandRole, ClaimLevel
from claimstack.domain.ports.persistence import require_ids

from .client import eq, in_list
from .schema import (
    ClaimRow,
    MarketClaimOverrideRow,
    MasterClaimBrandRow,
    ProductIngredientRow,
    ProductRow,
    UserBrandPermissionRow,
)
from .translator import (
    parse_claim,
    parse_master_brand,
    parse_override,
    parse_permission,
    parse_product,
)

if TYPE_CHECKING:
    from collections.abc import Collection
    from uuid import UUID

    from claimstack.domain.model import (
        BrandPermission,
        Claim,
        Market,
        MarketClaimOverride,
        MasterClaimBrand,
        Product,
    )

    from .client import PostgrestClient

CLAIMS_ORDER = "claim_text.asc,id.asc"

_OWNER_COLUMNS = {
    ClaimLevel.BRAND: "master_brand_id",
    ClaimLevel.PRODUCT: "product_id",
    ClaimLevel.INGREDIENT: "ingredient_id",
}


def _country_filter(column: str, market: Market | None) -> dict[str, str]:
    """Sentinels match exactly; the market code matches regardless of stored case."""

    if market is None:
        return {column: in_list(GLOBAL_CODES)}
    return {"or": f"({column}.in.({','.join(GLOBAL_CODES)}),{column}.ilike.{market.code})"}


class SupabaseClaimRepository:
    def __init__(self, client: PostgrestClient) -> None:
        self.client = client

    async def fetch_claims(
        self,
        level: ClaimLevel,
        owner_ids: Collection[UUID],
        market: Market | None,
    ) -> list[Claim]:
        require_ids(owner_ids, what="owner_ids")
        filters = {"level": eq(level.value)}
        if market is not None:
            filters.update(_country_filter("country_code", market))
        rows = await self.client.select_in(
            "claims",
            ClaimRow,
            column=_OWNER_COLUMNS[level],
            values=owner_ids,
            filters=filters,
            order=CLAIMS_ORDER,
        )
        claims = [parse_claim(row) for row in rows]
        return sorted(claims, key=lambda claim: (claim.text, str(claim.id)))

    async def fetch_ingredient_links(
        self, product_ids: Collection[UUID]
    ) -> dict[UUID, tuple[UUID, ...]]:
        require_ids(product_ids, what="product_ids")
        rows = await self.client.select_in(
            "product_ingredients",
            ProductIngredientRow,
            column="product_id",
            values=product_ids,
        )
        links: dict[UUID, list[UUID]] = {product_id: [] for product_id in product_ids}
        for row in rows:
            links.setdefault(row.product_id, []).append(row.ingredient_id)
        return {
            product_id: tuple(sorted(ingredient_ids, key=str))
            for product_id, ingredient_ids in links.items()
        }

    async def fetch_market_overrides(
        self,
        product_ids: Collection[UUID],
        market: Market | None,
    ) -> list[MarketClaimOverride]:
        require_ids(product_ids, what="product_ids")
        rows = await self.client.select_in(
            "market_claim_overrides",
            MarketClaimOverrideRow,
            column="target_product_id",
            values=product_ids,
            filters=_country_filter("market_country_code", market),
        )
        replacement_ids = {
            row.replacement_claim_id for row in rows if row.replacement_claim_id is not None
        }
        replacements: dict[UUID, Claim] = {}
        if replacement_ids:
            claim_rows = await self.client.select_in(
                "claims", ClaimRow, column="id", values=replacement_ids
            )
            replacements = {row.id: parse_claim(row) for row in claim_rows}

        overrides = [
            parse_override(
                row,
                replacements.get(row.replacement_claim_id)
                if row.replacement_claim_id is not None
                else None,
            )
            for row in rows
        ]
        return sorted(
            overrides,
            key=lambda override: (str(override.master_claim_id), str(override.id)),
        )


class SupabaseBrandLinkRepository:
    def __init__(self, client: PostgrestClient) -> None:
        self.client = client

    async def fetch_products(self, product_ids: Collection[UUID]) -> list[Product]:
        require_ids(product_ids, what="product_ids")
        rows = await self.client.select_in(
            "products", ProductRow, column="id", values=product_ids
        )
        return [parse_product(row) for row in rows]

    async def fetch_master_brands(
        self, master_brand_ids: Collection[UUID]
    ) -> list[MasterClaimBrand]:
        require_ids(master_brand_ids, what="master_brand_ids")
        rows = await self.client.select_in(
            "master_claim_brands", MasterClaimBrandRow, column="id", values=master_brand_ids
        )
        return [parse_master_brand(row) for row in rows]

    async def fetch_admin_permissions(
        self,
        user_id: UUID,
        tenant_brand_ids: Collection[UUID],
    ) -> list[BrandPermission]:
        require_ids(tenant_brand_ids, what="tenant_brand_ids")
        rows = await self.client.select_in(
            "user_brand_permissions",
            UserBrandPermissionRow,
            column="brand_id",
            values=tenant_brand_ids,
            filters={"user_id": eq(user_id), "role": eq(BrandRole.ADMIN.value)},
        )
        return [
            permission
            for permission in (parse_permission(row) for row in rows)
            if permission is not None
        ]
