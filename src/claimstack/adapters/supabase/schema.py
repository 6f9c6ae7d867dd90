"""PostgREST row schemas for the claims tables."""

from __future__ import annotations

import logging
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)


class SupabaseRow(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "Supabase %s: unmodeled columns: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class ClaimRow(SupabaseRow):
    id: UUID
    claim_text: str
    claim_type: str
    level: str
    master_brand_id: UUID | None = None
    product_id: UUID | None = None
    ingredient_id: UUID | None = None
    country_code: str
    description: str | None = None


class ProductRow(SupabaseRow):
    id: UUID
    name: str
    master_brand_id: UUID | None = None


class MasterClaimBrandRow(SupabaseRow):
    id: UUID
    name: str
    tenant_brand_id: UUID | None = Field(default=None, alias="mixerai_brand_id")


class ProductIngredientRow(SupabaseRow):
    product_id: UUID
    ingredient_id: UUID


class UserBrandPermissionRow(SupabaseRow):
    user_id: UUID
    brand_id: UUID
    role: str


class MarketClaimOverrideRow(SupabaseRow):
    id: UUID
    master_claim_id: UUID
    market_country_code: str
    target_product_id: UUID
    is_blocked: bool = False
    replacement_claim_id: UUID | None = None
