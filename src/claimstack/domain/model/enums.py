"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ClaimType(StrEnum):
    MANDATORY = "mandatory"
    ALLOWED = "allowed"
    DISALLOWED = "disallowed"
    CONDITIONAL = "conditional"


class ClaimLevel(StrEnum):
    """Entity a claim is attached to; closed set, dispatch on it exhaustively."""

    BRAND = "brand"
    PRODUCT = "product"
    INGREDIENT = "ingredient"


class BrandRole(StrEnum):
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"
