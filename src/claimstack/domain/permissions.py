"""Brand-scoped authorization for claim management.

``PermissionResolver`` answers "may this user manage claims for *all* of these
products?" by walking product -> master claim brand -> tenant brand -> admin
permission in three batched reads. The answer is all-or-nothing: one
unreachable or unauthorized brand denies the whole request.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from claimstack.config.engine import EngineConfig
from claimstack.domain.errors import ResolutionCancelledError
from claimstack.domain.ports.persistence import require_ids

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from claimstack.domain.model import MasterClaimBrand, Product
    from claimstack.domain.ports.persistence import BrandLinkRepository

log = getLogger(__name__)


class PermissionFailureCode(StrEnum):
    PRODUCTS_NOT_FOUND = "products_not_found"
    PRODUCTS_MISSING_BRAND_LINK = "products_missing_brand_link"
    BRANDS_MISSING_TENANT_MAPPING = "brands_missing_tenant_mapping"
    INSUFFICIENT_BRAND_PERMISSIONS = "insufficient_brand_permissions"


def _ids(values: Iterable[UUID]) -> tuple[UUID, ...]:
    return tuple(sorted(set(values), key=str))


def _joined(values: Iterable[UUID]) -> str:
    return ", ".join(str(value) for value in values)


@dataclass(frozen=True, slots=True)
class ProductsNotFound:
    code: ClassVar[PermissionFailureCode] = PermissionFailureCode.PRODUCTS_NOT_FOUND
    product_ids: tuple[UUID, ...]

    @property
    def message(self) -> str:
        return f"Products not found: {_joined(self.product_ids)}"


@dataclass(frozen=True, slots=True)
class ProductsMissingBrandLink:
    code: ClassVar[PermissionFailureCode] = PermissionFailureCode.PRODUCTS_MISSING_BRAND_LINK
    product_ids: tuple[UUID, ...]

    @property
    def message(self) -> str:
        return f"Products without a master claim brand: {_joined(self.product_ids)}"


@dataclass(frozen=True, slots=True)
class BrandsMissingTenantMapping:
    code: ClassVar[PermissionFailureCode] = PermissionFailureCode.BRANDS_MISSING_TENANT_MAPPING
    master_brand_ids: tuple[UUID, ...]

    @property
    def message(self) -> str:
        return f"Master claim brands not linked to a tenant brand: {_joined(self.master_brand_ids)}"


@dataclass(frozen=True, slots=True)
class InsufficientBrandPermissions:
    code: ClassVar[PermissionFailureCode] = (
        PermissionFailureCode.INSUFFICIENT_BRAND_PERMISSIONS
    )
    tenant_brand_ids: tuple[UUID, ...]
    product_ids: tuple[UUID, ...]

    @property
    def message(self) -> str:
        return (
            f"No admin permission for tenant brands {_joined(self.tenant_brand_ids)} "
            f"(products {_joined(self.product_ids)})"
        )


type PermissionReason = (
    ProductsNotFound
    | ProductsMissingBrandLink
    | BrandsMissingTenantMapping
    | InsufficientBrandPermissions
)


@dataclass(frozen=True, slots=True)
class PermissionVerdict:
    granted: bool
    reasons: tuple[PermissionReason, ...] = ()

    @classmethod
    def grant(cls) -> PermissionVerdict:
        return cls(granted=True)

    @classmethod
    def deny(cls, *reasons: PermissionReason) -> PermissionVerdict:
        if not reasons:
            raise ValueError("A denied verdict needs at least one reason")
        return cls(granted=False, reasons=reasons)

    @property
    def codes(self) -> tuple[PermissionFailureCode, ...]:
        return tuple(reason.code for reason in self.reasons)

    def audit_record(self) -> dict[str, object]:
        return {
            "granted": self.granted,
            "reasons": [
                {"code": str(reason.code), "message": reason.message} for reason in self.reasons
            ],
        }


@dataclass(slots=True)
class PermissionResolver:
    brand_links: BrandLinkRepository
    config: EngineConfig = field(default_factory=EngineConfig)

    async def check_product_claims_permission(
        self,
        user_id: UUID,
        product_ids: Sequence[UUID],
        *,
        timeout_seconds: float | None = None,
    ) -> PermissionVerdict:
        require_ids(product_ids, what="product_ids")
        deadline = timeout_seconds if timeout_seconds is not None else self.config.timeout_seconds
        try:
            async with asyncio.timeout(deadline):
                verdict = await self._evaluate(user_id, tuple(dict.fromkeys(product_ids)))
        except TimeoutError as exc:
            raise ResolutionCancelledError(
                f"Permission check for user {user_id} exceeded {deadline}s"
            ) from exc

        if verdict.granted:
            log.debug("Granted claims permission: user=%s, products=%d", user_id, len(product_ids))
        else:
            log.info(
                "Denied claims permission: user=%s, reasons=%s",
                user_id,
                ",".join(verdict.codes),
            )
        return verdict

    async def _evaluate(self, user_id: UUID, product_ids: tuple[UUID, ...]) -> PermissionVerdict:
        products = await self.brand_links.fetch_products(product_ids)
        found = {product.id: product for product in products}
        missing = [product_id for product_id in product_ids if product_id not in found]
        if missing:
            return PermissionVerdict.deny(ProductsNotFound(_ids(missing)))

        reasons: list[PermissionReason] = []
        unlinked = [product.id for product in found.values() if product.master_brand_id is None]
        if unlinked:
            reasons.append(ProductsMissingBrandLink(_ids(unlinked)))

        products_by_master = _group_by_master_brand(found.values())
        tenant_by_master: dict[UUID, UUID] = {}
        if products_by_master:
            master_brands = await self.brand_links.fetch_master_brands(tuple(products_by_master))
            tenant_by_master, unmapped = _tenant_mapping(products_by_master, master_brands)
            if unmapped:
                reasons.append(BrandsMissingTenantMapping(_ids(unmapped)))

        if reasons:
            return PermissionVerdict.deny(*reasons)

        tenant_brand_ids = set(tenant_by_master.values())
        permissions = await self.brand_links.fetch_admin_permissions(
            user_id, _ids(tenant_brand_ids)
        )
        authorized = {
            permission.tenant_brand_id
            for permission in permissions
            if permission.user_id == user_id and permission.grants_claim_management
        }
        uncovered = tenant_brand_ids - authorized
        if uncovered:
            affected = [
                product_id
                for master_id, tenant_id in tenant_by_master.items()
                if tenant_id in uncovered
                for product_id in products_by_master[master_id]
            ]
            return PermissionVerdict.deny(
                InsufficientBrandPermissions(_ids(uncovered), _ids(affected))
            )
        return PermissionVerdict.grant()


def _group_by_master_brand(products: Iterable[Product]) -> dict[UUID, list[UUID]]:
    grouped: dict[UUID, list[UUID]] = {}
    for product in products:
        if product.master_brand_id is not None:
            grouped.setdefault(product.master_brand_id, []).append(product.id)
    return grouped


def _tenant_mapping(
    products_by_master: dict[UUID, list[UUID]],
    master_brands: Iterable[MasterClaimBrand],
) -> tuple[dict[UUID, UUID], list[UUID]]:
    tenant_by_master = {
        brand.id: brand.tenant_brand_id
        for brand in master_brands
        if brand.id in products_by_master and brand.tenant_brand_id is not None
    }
    unmapped = [master_id for master_id in products_by_master if master_id not in tenant_by_master]
    return tenant_by_master, unmapped
