"""Application orchestration entry points.

Each entry point opens the configured repositories, runs one resolution on a
fresh event loop and closes the repositories again.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from claimstack.adapters.sqlalchemy import build_repositories as build_sqlalchemy_repositories
from claimstack.adapters.sqlalchemy import is_started, startup
from claimstack.adapters.supabase import (
    PostgrestClient,
    SupabaseBrandLinkRepository,
    SupabaseClaimRepository,
)
from claimstack.config import Backend, EngineConfig, get_backend, get_engine_config
from claimstack.domain.context import ClaimsContext, ClaimsContextBuilder, ClaimsResolution
from claimstack.domain.model import Market, parse_market
from claimstack.domain.permissions import PermissionResolver, PermissionVerdict
from claimstack.domain.ports.persistence import ClaimsRepositories
from claimstack.domain.ports.styling import StylingRequest
from claimstack.domain.presentation import (
    ClaimGroups,
    PlainTextStyler,
    group_by_level,
    introductory_sentence,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Sequence
    from contextlib import AbstractAsyncContextManager
    from uuid import UUID

    from claimstack.domain.model import Product
    from claimstack.domain.ports.styling import ClaimStyler

type RepositoriesOpener = Callable[[], AbstractAsyncContextManager[ClaimsRepositories]]

log = getLogger(__name__)


@asynccontextmanager
async def open_repositories(backend: Backend | None = None) -> AsyncIterator[ClaimsRepositories]:
    """Yield repositories for ``backend`` (defaults to ``CLAIMSTACK_BACKEND``)."""

    selected = backend or get_backend()
    if selected is Backend.SUPABASE:
        async with PostgrestClient() as client:
            yield ClaimsRepositories(
                claims=SupabaseClaimRepository(client),
                brand_links=SupabaseBrandLinkRepository(client),
            )
        return

    if not is_started():
        startup()
    yield build_sqlalchemy_repositories()


def _market(country: str | Market | None) -> Market | None:
    if isinstance(country, Market):
        return country
    return parse_market(country)


def resolve_effective_claims(
    product_id: UUID,
    country: str | Market | None = None,
    *,
    repositories: RepositoriesOpener | None = None,
    config: EngineConfig | None = None,
) -> ClaimsResolution:
    """Effective, precedence-ordered claims for one product and market filter."""

    results = resolve_effective_claims_batch(
        [product_id], country, repositories=repositories, config=config
    )
    return results[product_id]


def resolve_effective_claims_batch(
    product_ids: Sequence[UUID],
    country: str | Market | None = None,
    *,
    repositories: RepositoriesOpener | None = None,
    config: EngineConfig | None = None,
) -> dict[UUID, ClaimsResolution]:
    market = _market(country)
    effective_config = config or get_engine_config()
    opener = repositories or open_repositories
    log.info("Resolving claims: products=%d, market=%s", len(product_ids), market)

    async def run() -> dict[UUID, ClaimsResolution]:
        async with opener() as repos:
            builder = ClaimsContextBuilder(repos.claims, repos.brand_links, effective_config)
            return await builder.build_many(product_ids, market)

    results = asyncio.run(run())
    log.info(
        "Resolved claims: products=%d, with_claims=%d",
        len(results),
        sum(isinstance(result, ClaimsContext) for result in results.values()),
    )
    return results


def check_product_claims_permission(
    user_id: UUID,
    product_ids: Sequence[UUID],
    *,
    repositories: RepositoriesOpener | None = None,
    config: EngineConfig | None = None,
) -> PermissionVerdict:
    effective_config = config or get_engine_config()
    opener = repositories or open_repositories

    async def run() -> PermissionVerdict:
        async with opener() as repos:
            resolver = PermissionResolver(repos.brand_links, effective_config)
            return await resolver.check_product_claims_permission(user_id, product_ids)

    return asyncio.run(run())


@dataclass(frozen=True, slots=True, kw_only=True)
class ProductClaimsContext:
    """Claims for one product prepared for a content generator prompt."""

    product_id: UUID
    product_name: str
    brand_name: str | None
    market: Market | None
    resolution: ClaimsResolution
    groups: ClaimGroups
    introduction: str
    styled_text: str

    @property
    def has_claims(self) -> bool:
        return isinstance(self.resolution, ClaimsContext) and bool(self.resolution.claims)


def prepare_product_context(
    product_id: UUID,
    country: str | Market | None,
    *,
    styler: ClaimStyler | None = None,
    repositories: RepositoriesOpener | None = None,
    config: EngineConfig | None = None,
) -> ProductClaimsContext:
    """Resolve, group and style the claims of one product for a market."""

    market = _market(country)
    effective_config = config or get_engine_config()
    effective_styler = styler or PlainTextStyler()
    opener = repositories or open_repositories

    async def run() -> ProductClaimsContext:
        async with opener() as repos:
            builder = ClaimsContextBuilder(repos.claims, repos.brand_links, effective_config)
            resolution = await builder.build(product_id, market)
            product, brand_name = await _names(repos, product_id)

        claims = resolution.claims if isinstance(resolution, ClaimsContext) else ()
        groups = group_by_level(claims)
        introduction = introductory_sentence(product.name, brand_name)
        styled = await effective_styler.style(
            StylingRequest(
                product_name=product.name,
                market=market,
                introduction=introduction,
                groups=groups,
            )
        )
        return ProductClaimsContext(
            product_id=product_id,
            product_name=product.name,
            brand_name=brand_name,
            market=market,
            resolution=resolution,
            groups=groups,
            introduction=introduction,
            styled_text=styled,
        )

    return asyncio.run(run())


async def _names(repos: ClaimsRepositories, product_id: UUID) -> tuple[Product, str | None]:
    (product,) = await repos.brand_links.fetch_products([product_id])
    if product.master_brand_id is None:
        return product, None
    brands = await repos.brand_links.fetch_master_brands([product.master_brand_id])
    return product, brands[0].name if brands else None
