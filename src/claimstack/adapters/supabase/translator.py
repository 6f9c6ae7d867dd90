"""Translate PostgREST rows into domain entities."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from claimstack.adapters.claim_rows import build_claim, parse_stored_country
from claimstack.domain.errors import ClaimIntegrityError
from claimstack.domain.model import (
    BrandPermission,
    BrandRole,
    MarketClaimOverride,
    MasterClaimBrand,
    Product,
)

if TYPE_CHECKING:
    from claimstack.domain.model import Claim

    from .schema import (
        ClaimRow,
        MarketClaimOverrideRow,
        MasterClaimBrandRow,
        ProductRow,
        UserBrandPermissionRow,
    )

log = getLogger(__name__)


def parse_claim(row: ClaimRow) -> Claim:
    return build_claim(
        claim_id=row.id,
        text=row.claim_text,
        claim_type=row.claim_type,
        level=row.level,
        master_brand_id=row.master_brand_id,
        product_id=row.product_id,
        ingredient_id=row.ingredient_id,
        country_code=row.country_code,
        description=row.description,
    )


def parse_override(row: MarketClaimOverrideRow, replacement: Claim | None) -> MarketClaimOverride:
    try:
        scope = parse_stored_country(row.market_country_code)
    except ValueError as exc:
        raise ClaimIntegrityError(
            f"Override {row.id}: {exc}", claim_id=row.master_claim_id
        ) from exc
    return MarketClaimOverride(
        id=row.id,
        master_claim_id=row.master_claim_id,
        target_product_id=row.target_product_id,
        scope=scope,
        is_blocked=row.is_blocked,
        replacement_claim_id=row.replacement_claim_id,
        replacement_claim=replacement,
    )


def parse_product(row: ProductRow) -> Product:
    return Product(id=row.id, name=row.name, master_brand_id=row.master_brand_id)


def parse_master_brand(row: MasterClaimBrandRow) -> MasterClaimBrand:
    return MasterClaimBrand(id=row.id, name=row.name, tenant_brand_id=row.tenant_brand_id)


def parse_permission(row: UserBrandPermissionRow) -> BrandPermission | None:
    try:
        role = BrandRole(row.role)
    except ValueError:
        log.warning("Ignoring unknown brand role %r for user %s", row.role, row.user_id)
        return None
    return BrandPermission(user_id=row.user_id, tenant_brand_id=row.brand_id, role=role)
