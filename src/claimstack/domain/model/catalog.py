"""Catalog entities on the ownership chain product -> master brand -> tenant brand."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .enums import BrandRole

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(frozen=True, slots=True, kw_only=True)
class MasterClaimBrand:
    """Claims-domain brand, optionally linked to one tenant brand.

    Unlinked master brands can only be managed by a platform administrator.
    """

    id: UUID
    name: str
    tenant_brand_id: UUID | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Product:
    id: UUID
    name: str
    master_brand_id: UUID | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Ingredient:
    id: UUID
    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class BrandPermission:
    user_id: UUID
    tenant_brand_id: UUID
    role: BrandRole

    @property
    def grants_claim_management(self) -> bool:
        return self.role is BrandRole.ADMIN
