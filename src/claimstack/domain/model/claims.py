"""Claim aggregates consumed by the resolution engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .enums import ClaimLevel, ClaimType

if TYPE_CHECKING:
    from uuid import UUID

    from .country import Country


@dataclass(frozen=True, slots=True, kw_only=True)
class Claim:
    """A regulatory statement attached to exactly one brand, product or ingredient.

    ``owner_id`` is read through ``level``: a brand claim is owned by a master
    claim brand, a product claim by a product, an ingredient claim by an
    ingredient. Keeping a single owner field makes mixed ownership unrepresentable.
    """

    id: UUID
    text: str
    type: ClaimType
    level: ClaimLevel
    country: Country
    owner_id: UUID
    description: str | None = None

    @property
    def master_brand_id(self) -> UUID | None:
        return self.owner_id if self.level is ClaimLevel.BRAND else None

    @property
    def product_id(self) -> UUID | None:
        return self.owner_id if self.level is ClaimLevel.PRODUCT else None

    @property
    def ingredient_id(self) -> UUID | None:
        return self.owner_id if self.level is ClaimLevel.INGREDIENT else None

    @property
    def is_mandatory(self) -> bool:
        return self.type is ClaimType.MANDATORY

    @property
    def is_global(self) -> bool:
        return self.country.is_global


@dataclass(frozen=True, slots=True, kw_only=True)
class MarketClaimOverride:
    """Per-product rule that blocks or replaces a global (master) claim.

    ``scope`` is either one market or ``GLOBAL`` for every market.
    """

    id: UUID
    master_claim_id: UUID
    target_product_id: UUID
    scope: Country
    is_blocked: bool = False
    replacement_claim_id: UUID | None = None
    replacement_claim: Claim | None = None

    @property
    def is_market_specific(self) -> bool:
        return not self.scope.is_global
