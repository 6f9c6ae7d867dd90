"""Public interface for the Supabase (PostgREST) adapter."""

from __future__ import annotations

from .client import PostgrestClient
from .repositories import SupabaseBrandLinkRepository, SupabaseClaimRepository
from .schema import (
    ClaimRow,
    MarketClaimOverrideRow,
    MasterClaimBrandRow,
    ProductIngredientRow,
    ProductRow,
    UserBrandPermissionRow,
)

__all__ = [
    "ClaimRow",
    "MarketClaimOverrideRow",
    "MasterClaimBrandRow",
    "PostgrestClient",
    "ProductIngredientRow",
    "ProductRow",
    "SupabaseBrandLinkRepository",
    "SupabaseClaimRepository",
    "UserBrandPermissionRow",
]
