"""Failures raised by the claims engine.

Authorization failures are *not* here: they are returned as values on a
``PermissionVerdict``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID


class ClaimsEngineError(RuntimeError):
    """Base class for engine failures."""


class DataUnavailableError(ClaimsEngineError):
    """The underlying store failed; always fatal and never retried by the engine."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class ClaimIntegrityError(ClaimsEngineError):
    """A stored row violates the claim invariants (level vs. owner reference)."""

    def __init__(self, message: str, *, claim_id: object | None = None) -> None:
        super().__init__(message)
        self.claim_id = claim_id


class ProductNotFoundError(ClaimsEngineError, LookupError):
    """Claims were requested for product ids that do not exist."""

    def __init__(self, product_ids: Iterable[UUID]) -> None:
        self.product_ids = tuple(product_ids)
        joined = ", ".join(str(product_id) for product_id in self.product_ids)
        super().__init__(f"Unknown product(s): {joined}")


class ResolutionCancelledError(ClaimsEngineError):
    """The resolution deadline expired before all repository calls completed."""
