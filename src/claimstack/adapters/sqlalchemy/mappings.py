"""SQLAlchemy Core tables for the claims schema."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    Uuid,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

# Catalog ---------------------------------------------------------------------

master_claim_brands_table = Table(
    "master_claim_brands",
    metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("mixerai_brand_id", UUIDColumnType, nullable=True),
)

products_table = Table(
    "products",
    metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column(
        "master_brand_id",
        UUIDColumnType,
        ForeignKey("master_claim_brands.id", ondelete="SET NULL"),
        nullable=True,
    ),
)

ingredients_table = Table(
    "ingredients",
    metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
)

product_ingredients_table = Table(
    "product_ingredients",
    metadata,
    Column(
        "product_id",
        UUIDColumnType,
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "ingredient_id",
        UUIDColumnType,
        ForeignKey("ingredients.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

user_brand_permissions_table = Table(
    "user_brand_permissions",
    metadata,
    Column("user_id", UUIDColumnType, primary_key=True),
    Column("brand_id", UUIDColumnType, primary_key=True),
    Column("role", String, nullable=False),
)

# Claims ----------------------------------------------------------------------

claims_table = Table(
    "claims",
    metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("claim_text", Text, nullable=False),
    Column("claim_type", String, nullable=False),
    Column("level", String, nullable=False),
    Column(
        "master_brand_id",
        UUIDColumnType,
        ForeignKey("master_claim_brands.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column(
        "product_id",
        UUIDColumnType,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column(
        "ingredient_id",
        UUIDColumnType,
        ForeignKey("ingredients.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column("country_code", String, nullable=False),
    Column("description", Text, nullable=True),
)

Index("ix_claims_level_country", claims_table.c.level, claims_table.c.country_code)

market_claim_overrides_table = Table(
    "market_claim_overrides",
    metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "master_claim_id",
        UUIDColumnType,
        ForeignKey("claims.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("market_country_code", String, nullable=False),
    Column(
        "target_product_id",
        UUIDColumnType,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("is_blocked", Boolean, nullable=False, default=False),
    Column(
        "replacement_claim_id",
        UUIDColumnType,
        ForeignKey("claims.id", ondelete="SET NULL"),
        nullable=True,
    ),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the claims schema."""

    log.info("Creating all tables")
    metadata.create_all(engine)
