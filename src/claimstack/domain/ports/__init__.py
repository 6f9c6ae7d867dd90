"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import BrandLinkRepository, ClaimRepository, ClaimsRepositories, require_ids
from .styling import ClaimStyler, StylingRequest

__all__ = [
    "BrandLinkRepository",
    "ClaimRepository",
    "ClaimStyler",
    "ClaimsRepositories",
    "StylingRequest",
    "require_ids",
]
