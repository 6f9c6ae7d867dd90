"""Repository implementations backed by SQLAlchemy sessions.

Each call opens its own short-lived session in a worker thread, so calls issued
concurrently by the context builder do not share a connection.
"""

from __future__ import annotations

import asyncio
from itertools import batched
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from claimstack.adapters.claim_rows import (
    build_claim,
    parse_stored_country,
    stored_country_codes,
)
from claimstack.adapters.sqlalchemy.mappings import (
    claims_table,
    market_claim_overrides_table,
    master_claim_brands_table,
    product_ingredients_table,
    products_table,
    user_brand_permissions_table,
)
from claimstack.domain.errors import ClaimIntegrityError, DataUnavailableError
from claimstack.domain.model import (
    BrandPermission,
    BrandRole,
    ClaimLevel,
    MarketClaimOverride,
    MasterClaimBrand,
    Product,
)
from claimstack.domain.ports.persistence import require_ids

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterator
    from uuid import UUID

    from sqlalchemy import Row
    from sqlalchemy.orm import Session, sessionmaker

    from claimstack.domain.model import Claim, Market

log = getLogger(__name__)

IN_CLAUSE_BATCH_SIZE = 500

_OWNER_COLUMNS = {
    ClaimLevel.BRAND: claims_table.c.master_brand_id,
    ClaimLevel.PRODUCT: claims_table.c.product_id,
    ClaimLevel.INGREDIENT: claims_table.c.ingredient_id,
}


def _id_batches(ids: Collection[UUID]) -> Iterator[tuple[UUID, ...]]:
    return batched(sorted(set(ids), key=str), IN_CLAUSE_BATCH_SIZE)


def _claim_from_row(row: Row[tuple[object, ...]], prefix: str = "") -> Claim:
    values = row._mapping  # noqa: SLF001
    return build_claim(
        claim_id=values[f"{prefix}id"],
        text=values[f"{prefix}claim_text"],
        claim_type=values[f"{prefix}claim_type"],
        level=values[f"{prefix}level"],
        master_brand_id=values[f"{prefix}master_brand_id"],
        product_id=values[f"{prefix}product_id"],
        ingredient_id=values[f"{prefix}ingredient_id"],
        country_code=values[f"{prefix}country_code"],
        description=values[f"{prefix}description"],
    )


class _SessionRunner:
    """Runs one read in a fresh session on a worker thread.

    A caller deadline only abandons the await: ``asyncio.to_thread`` work cannot be
    interrupted, so the query keeps its connection until the database returns. Bound
    long statements on the database side (for example PostgreSQL's
    ``statement_timeout``) when that matters.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    async def _run[T](self, read: Callable[[Session], T], *, what: str) -> T:
        def work() -> T:
            with self.session_factory() as session:
                return read(session)

        try:
            return await asyncio.to_thread(work)
        except SQLAlchemyError as exc:
            log.exception("Failed to read %s", what)
            raise DataUnavailableError(f"Failed to read {what}", source="sqlalchemy") from exc


class SqlAlchemyClaimRepository(_SessionRunner):
    async def fetch_claims(
        self,
        level: ClaimLevel,
        owner_ids: Collection[UUID],
        market: Market | None,
    ) -> list[Claim]:
        require_ids(owner_ids, what="owner_ids")
        owner_column = _OWNER_COLUMNS[level]

        def read(session: Session) -> list[Claim]:
            claims: list[Claim] = []
            for batch in _id_batches(owner_ids):
                stmt = (
                    select(claims_table)
                    .where(claims_table.c.level == level.value)
                    .where(owner_column.in_(batch))
                )
                if market is not None:
                    stmt = stmt.where(
                        func.upper(claims_table.c.country_code).in_(stored_country_codes(market))
                    )
                claims.extend(_claim_from_row(row) for row in session.execute(stmt))
            return sorted(claims, key=lambda claim: (claim.text, str(claim.id)))

        return await self._run(read, what=f"{level} claims")

    async def fetch_ingredient_links(
        self, product_ids: Collection[UUID]
    ) -> dict[UUID, tuple[UUID, ...]]:
        require_ids(product_ids, what="product_ids")

        def read(session: Session) -> dict[UUID, tuple[UUID, ...]]:
            links: dict[UUID, list[UUID]] = {product_id: [] for product_id in product_ids}
            for batch in _id_batches(product_ids):
                stmt = select(
                    product_ingredients_table.c.product_id,
                    product_ingredients_table.c.ingredient_id,
                ).where(product_ingredients_table.c.product_id.in_(batch))
                for product_id, ingredient_id in session.execute(stmt).tuples():
                    links.setdefault(product_id, []).append(ingredient_id)
            return {
                product_id: tuple(sorted(ingredient_ids, key=str))
                for product_id, ingredient_ids in links.items()
            }

        return await self._run(read, what="product ingredients")

    async def fetch_market_overrides(
        self,
        product_ids: Collection[UUID],
        market: Market | None,
    ) -> list[MarketClaimOverride]:
        require_ids(product_ids, what="product_ids")
        overrides = market_claim_overrides_table
        replacement = claims_table.alias("replacement")
        replacement_columns = [
            column.label(f"replacement_{column.name}") for column in replacement.c
        ]

        def read(session: Session) -> list[MarketClaimOverride]:
            result: list[MarketClaimOverride] = []
            for batch in _id_batches(product_ids):
                stmt = (
                    select(overrides, *replacement_columns)
                    .outerjoin(replacement, replacement.c.id == overrides.c.replacement_claim_id)
                    .where(overrides.c.target_product_id.in_(batch))
                    .where(
                        func.upper(overrides.c.market_country_code).in_(
                            stored_country_codes(market)
                        )
                    )
                )
                result.extend(_override_from_row(row) for row in session.execute(stmt))
            return sorted(
                result,
                key=lambda override: (str(override.master_claim_id), str(override.id)),
            )

        return await self._run(read, what="market claim overrides")


def _override_from_row(row: Row[tuple[object, ...]]) -> MarketClaimOverride:
    values = row._mapping  # noqa: SLF001
    try:
        scope = parse_stored_country(values["market_country_code"])
    except ValueError as exc:
        raise ClaimIntegrityError(
            f"Override {values['id']}: {exc}", claim_id=values["master_claim_id"]
        ) from exc
    replacement = (
        _claim_from_row(row, prefix="replacement_")
        if values["replacement_id"] is not None
        else None
    )
    return MarketClaimOverride(
        id=values["id"],
        master_claim_id=values["master_claim_id"],
        target_product_id=values["target_product_id"],
        scope=scope,
        is_blocked=bool(values["is_blocked"]),
        replacement_claim_id=values["replacement_claim_id"],
        replacement_claim=replacement,
    )


class SqlAlchemyBrandLinkRepository(_SessionRunner):
    async def fetch_products(self, product_ids: Collection[UUID]) -> list[Product]:
        require_ids(product_ids, what="product_ids")

        def read(session: Session) -> list[Product]:
            products: list[Product] = []
            for batch in _id_batches(product_ids):
                stmt = select(products_table).where(products_table.c.id.in_(batch))
                products.extend(
                    Product(id=row.id, name=row.name, master_brand_id=row.master_brand_id)
                    for row in session.execute(stmt)
                )
            return products

        return await self._run(read, what="products")

    async def fetch_master_brands(
        self, master_brand_ids: Collection[UUID]
    ) -> list[MasterClaimBrand]:
        require_ids(master_brand_ids, what="master_brand_ids")

        def read(session: Session) -> list[MasterClaimBrand]:
            brands: list[MasterClaimBrand] = []
            for batch in _id_batches(master_brand_ids):
                stmt = select(master_claim_brands_table).where(
                    master_claim_brands_table.c.id.in_(batch)
                )
                brands.extend(
                    MasterClaimBrand(
                        id=row.id, name=row.name, tenant_brand_id=row.mixerai_brand_id
                    )
                    for row in session.execute(stmt)
                )
            return brands

        return await self._run(read, what="master claim brands")

    async def fetch_admin_permissions(
        self,
        user_id: UUID,
        tenant_brand_ids: Collection[UUID],
    ) -> list[BrandPermission]:
        require_ids(tenant_brand_ids, what="tenant_brand_ids")
        permissions = user_brand_permissions_table

        def read(session: Session) -> list[BrandPermission]:
            granted: list[BrandPermission] = []
            for batch in _id_batches(tenant_brand_ids):
                stmt = (
                    select(permissions)
                    .where(permissions.c.user_id == user_id)
                    .where(permissions.c.brand_id.in_(batch))
                    .where(permissions.c.role == BrandRole.ADMIN.value)
                )
                granted.extend(
                    BrandPermission(
                        user_id=row.user_id,
                        tenant_brand_id=row.brand_id,
                        role=BrandRole(row.role),
                    )
                    for row in session.execute(stmt)
                )
            return granted

        return await self._run(read, what="brand permissions")
