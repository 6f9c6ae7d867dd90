"""Effective claim sets per product and market.

``ClaimsContextBuilder`` reads brand, product and ingredient claims plus market
overrides concurrently, stacks them (see ``stacking``) and orders the result
with the ``PrecedenceResolver``. It either returns a complete context or fails;
a partial claim set is never returned.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from claimstack.config.engine import EngineConfig
from claimstack.domain.errors import (
    DataUnavailableError,
    ProductNotFoundError,
    ResolutionCancelledError,
)
from claimstack.domain.model import ClaimLevel
from claimstack.domain.ports.persistence import require_ids
from claimstack.domain.precedence import PrecedenceResolver, TypeConflict
from claimstack.domain.stacking import (
    BlockedClaim,
    EffectiveClaim,
    apply_overrides,
    filter_visible,
    shadow_global_duplicates,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from claimstack.domain.model import Claim, Market, MarketClaimOverride, Product
    from claimstack.domain.ports.persistence import BrandLinkRepository, ClaimRepository

log = getLogger(__name__)


class NoClaimsReason(StrEnum):
    MISSING_MASTER_BRAND = "missing_master_brand"
    NO_APPLICABLE_CLAIMS = "no_applicable_claims"


@dataclass(frozen=True, slots=True, kw_only=True)
class NoClaimsForProduct:
    """The product legitimately has no claims in force; not an error."""

    product_id: UUID
    market: Market | None
    reason: NoClaimsReason


@dataclass(frozen=True, slots=True, kw_only=True)
class ClaimsContext:
    product: Product
    market: Market | None
    claims: tuple[EffectiveClaim, ...]
    blocked: tuple[BlockedClaim, ...] = ()
    conflicts: tuple[TypeConflict[EffectiveClaim], ...] = ()
    ingredient_claims_omitted: bool = False

    @property
    def product_id(self) -> UUID:
        return self.product.id

    def by_level(self, level: ClaimLevel) -> tuple[EffectiveClaim, ...]:
        return tuple(claim for claim in self.claims if claim.level is level)


type ClaimsResolution = ClaimsContext | NoClaimsForProduct


@dataclass(frozen=True, slots=True)
class _IngredientClaims:
    links: dict[UUID, tuple[UUID, ...]]
    claims: list[Claim]
    omitted: bool = False


@dataclass(frozen=True, slots=True)
class _FetchedClaims:
    brand: list[Claim]
    product: list[Claim]
    ingredient: _IngredientClaims
    overrides: list[MarketClaimOverride]


def _first_failure(group: BaseExceptionGroup[BaseException]) -> BaseException:
    unavailable = group.subgroup(DataUnavailableError)
    leaves = unavailable.exceptions if unavailable is not None else group.exceptions
    leaf = leaves[0]
    while isinstance(leaf, BaseExceptionGroup):
        leaf = leaf.exceptions[0]
    return leaf


@dataclass(slots=True)
class ClaimsContextBuilder:
    claims: ClaimRepository
    brand_links: BrandLinkRepository
    config: EngineConfig = field(default_factory=EngineConfig)
    precedence: PrecedenceResolver = field(init=False)

    def __post_init__(self) -> None:
        self.precedence = PrecedenceResolver(
            report_type_conflicts=self.config.report_type_conflicts
        )

    async def build(
        self,
        product_id: UUID,
        market: Market | None = None,
        *,
        timeout_seconds: float | None = None,
    ) -> ClaimsResolution:
        results = await self.build_many([product_id], market, timeout_seconds=timeout_seconds)
        return results[product_id]

    async def build_many(
        self,
        product_ids: Sequence[UUID],
        market: Market | None = None,
        *,
        timeout_seconds: float | None = None,
    ) -> dict[UUID, ClaimsResolution]:
        """Resolve several products with one batched call per repository method."""

        require_ids(product_ids, what="product_ids")
        requested = tuple(dict.fromkeys(product_ids))
        deadline = timeout_seconds if timeout_seconds is not None else self.config.timeout_seconds
        try:
            async with asyncio.timeout(deadline):
                return await self._build(requested, market)
        except TimeoutError as exc:
            raise ResolutionCancelledError(
                f"Claims resolution for {len(requested)} product(s) exceeded {deadline}s"
            ) from exc

    async def _build(
        self,
        product_ids: tuple[UUID, ...],
        market: Market | None,
    ) -> dict[UUID, ClaimsResolution]:
        products = await self.brand_links.fetch_products(product_ids)
        found = {product.id: product for product in products}
        missing = [product_id for product_id in product_ids if product_id not in found]
        if missing:
            raise ProductNotFoundError(missing)

        results: dict[UUID, ClaimsResolution] = {}
        linked: list[Product] = []
        for product_id in product_ids:
            product = found[product_id]
            if product.master_brand_id is None:
                log.debug("Product %s has no master claim brand", product_id)
                results[product_id] = NoClaimsForProduct(
                    product_id=product_id,
                    market=market,
                    reason=NoClaimsReason.MISSING_MASTER_BRAND,
                )
            else:
                linked.append(product)

        if linked:
            fetched = await self._fetch(linked, market)
            for product in linked:
                results[product.id] = self._stack(product, fetched, market)

        return {product_id: results[product_id] for product_id in product_ids}

    async def _fetch(self, products: list[Product], market: Market | None) -> _FetchedClaims:
        product_ids = [product.id for product in products]
        master_brand_ids = {
            product.master_brand_id for product in products if product.master_brand_id is not None
        }
        try:
            async with asyncio.TaskGroup() as group:
                brand_task = group.create_task(
                    self.claims.fetch_claims(ClaimLevel.BRAND, master_brand_ids, market)
                )
                product_task = group.create_task(
                    self.claims.fetch_claims(ClaimLevel.PRODUCT, product_ids, market)
                )
                ingredient_task = group.create_task(
                    self._fetch_ingredient_claims(product_ids, market)
                )
                override_task = group.create_task(
                    self.claims.fetch_market_overrides(product_ids, market)
                )
        except ExceptionGroup as failures:
            raise _first_failure(failures)  # noqa: B904

        fetched = _FetchedClaims(
            brand=brand_task.result(),
            product=product_task.result(),
            ingredient=ingredient_task.result(),
            overrides=override_task.result(),
        )
        log.debug(
            "Fetched claims: products=%d, brand=%d, product=%d, ingredient=%d, overrides=%d",
            len(products),
            len(fetched.brand),
            len(fetched.product),
            len(fetched.ingredient.claims),
            len(fetched.overrides),
        )
        return fetched

    async def _fetch_ingredient_claims(
        self,
        product_ids: list[UUID],
        market: Market | None,
    ) -> _IngredientClaims:
        try:
            links = await self.claims.fetch_ingredient_links(product_ids)
            ingredient_ids = {
                ingredient_id for linked in links.values() for ingredient_id in linked
            }
            if not ingredient_ids:
                return _IngredientClaims(links=links, claims=[])
            claims = await self.claims.fetch_claims(ClaimLevel.INGREDIENT, ingredient_ids, market)
        except DataUnavailableError:
            if self.config.ingredient_claims_fatal:
                raise
            log.warning("Ingredient claims unavailable; continuing without them", exc_info=True)
            return _IngredientClaims(links={}, claims=[], omitted=True)
        return _IngredientClaims(links=links, claims=claims)

    def _stack(
        self,
        product: Product,
        fetched: _FetchedClaims,
        market: Market | None,
    ) -> ClaimsResolution:
        ingredient_ids = set(fetched.ingredient.links.get(product.id, ()))
        owned = [
            *(claim for claim in fetched.brand if claim.owner_id == product.master_brand_id),
            *(claim for claim in fetched.product if claim.owner_id == product.id),
            *(claim for claim in fetched.ingredient.claims if claim.owner_id in ingredient_ids),
        ]
        overrides = [
            override for override in fetched.overrides if override.target_product_id == product.id
        ]

        outcome = apply_overrides(filter_visible(owned, market), overrides, market)
        effective = shadow_global_duplicates(outcome.effective, market)
        resolved = self.precedence.resolve_detailed(effective)

        if not resolved.claims and not outcome.blocked:
            return NoClaimsForProduct(
                product_id=product.id,
                market=market,
                reason=NoClaimsReason.NO_APPLICABLE_CLAIMS,
            )
        return ClaimsContext(
            product=product,
            market=market,
            claims=resolved.claims,
            blocked=tuple(outcome.blocked),
            conflicts=resolved.conflicts,
            ingredient_claims_omitted=fetched.ingredient.omitted,
        )
