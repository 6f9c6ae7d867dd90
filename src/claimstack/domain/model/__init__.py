"""Domain model for claims resolution."""

from __future__ import annotations

from .catalog import BrandPermission, Ingredient, MasterClaimBrand, Product
from .claims import Claim, MarketClaimOverride
from .country import (
    ALL_COUNTRIES_CODE,
    GLOBAL,
    GLOBAL_COUNTRY_CODE,
    Country,
    GlobalMarket,
    Market,
    parse_country,
    parse_market,
    visible_in,
)
from .enums import BrandRole, ClaimLevel, ClaimType

__all__ = [
    "ALL_COUNTRIES_CODE",
    "GLOBAL",
    "GLOBAL_COUNTRY_CODE",
    "BrandPermission",
    "BrandRole",
    "Claim",
    "ClaimLevel",
    "ClaimType",
    "Country",
    "GlobalMarket",
    "Ingredient",
    "Market",
    "MarketClaimOverride",
    "MasterClaimBrand",
    "Product",
    "parse_country",
    "parse_market",
    "visible_in",
]
