"""Row seeding helpers for SQLAlchemy adapter tests."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import insert

from claimstack.adapters.sqlalchemy.mappings import (
    claims_table,
    ingredients_table,
    market_claim_overrides_table,
    master_claim_brands_table,
    product_ingredients_table,
    products_table,
    user_brand_permissions_table,
)
from claimstack.domain.model import GLOBAL_COUNTRY_CODE, ClaimLevel, ClaimType

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


class CatalogSeeder:
    """Inserts catalog and claim rows with sensible defaults."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def _insert(self, table: object, **values: object) -> UUID:
        row_id = values.setdefault("id", uuid4())
        with self.engine.begin() as connection:
            connection.execute(insert(table), [values])  # type: ignore[arg-type]
        assert isinstance(row_id, UUID)
        return row_id

    def master_brand(
        self, name: str = "Master Brand", *, tenant_brand_id: UUID | None = None
    ) -> UUID:
        return self._insert(
            master_claim_brands_table, name=name, mixerai_brand_id=tenant_brand_id
        )

    def product(self, name: str = "Product", *, master_brand_id: UUID | None = None) -> UUID:
        return self._insert(products_table, name=name, master_brand_id=master_brand_id)

    def ingredient(self, *product_ids: UUID, name: str = "Ingredient") -> UUID:
        ingredient_id = self._insert(ingredients_table, name=name)
        with self.engine.begin() as connection:
            for product_id in product_ids:
                connection.execute(
                    insert(product_ingredients_table),
                    [{"product_id": product_id, "ingredient_id": ingredient_id}],
                )
        return ingredient_id

    def claim(  # noqa: PLR0913
        self,
        text: str,
        *,
        level: ClaimLevel,
        owner_id: UUID,
        claim_type: ClaimType = ClaimType.ALLOWED,
        country_code: str = GLOBAL_COUNTRY_CODE,
        extra_owners: dict[str, UUID] | None = None,
    ) -> UUID:
        owner_column = {
            ClaimLevel.BRAND: "master_brand_id",
            ClaimLevel.PRODUCT: "product_id",
            ClaimLevel.INGREDIENT: "ingredient_id",
        }[level]
        return self._insert(
            claims_table,
            claim_text=text,
            claim_type=claim_type.value,
            level=level.value,
            country_code=country_code,
            **{owner_column: owner_id},
            **(extra_owners or {}),
        )

    def override(
        self,
        master_claim_id: UUID,
        target_product_id: UUID,
        *,
        market_country_code: str,
        is_blocked: bool = False,
        replacement_claim_id: UUID | None = None,
    ) -> UUID:
        return self._insert(
            market_claim_overrides_table,
            master_claim_id=master_claim_id,
            target_product_id=target_product_id,
            market_country_code=market_country_code,
            is_blocked=is_blocked,
            replacement_claim_id=replacement_claim_id,
        )

    def permission(self, user_id: UUID, tenant_brand_id: UUID, role: str = "admin") -> None:
        with self.engine.begin() as connection:
            connection.execute(
                insert(user_brand_permissions_table),
                [{"user_id": user_id, "brand_id": tenant_brand_id, "role": role}],
            )
