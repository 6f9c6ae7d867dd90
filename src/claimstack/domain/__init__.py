"""Claims precedence and permission resolution domain."""

from __future__ import annotations

from .context import (
    ClaimsContext,
    ClaimsContextBuilder,
    ClaimsResolution,
    NoClaimsForProduct,
    NoClaimsReason,
)
from .errors import (
    ClaimIntegrityError,
    ClaimsEngineError,
    DataUnavailableError,
    ProductNotFoundError,
    ResolutionCancelledError,
)
from .permissions import (
    BrandsMissingTenantMapping,
    InsufficientBrandPermissions,
    PermissionFailureCode,
    PermissionResolver,
    PermissionVerdict,
    ProductsMissingBrandLink,
    ProductsNotFound,
)
from .precedence import PrecedenceResolver, PrecedenceResult, TypeConflict
from .stacking import BlockedClaim, BlockReason, EffectiveClaim

__all__ = [
    "BlockReason",
    "BlockedClaim",
    "BrandsMissingTenantMapping",
    "ClaimIntegrityError",
    "ClaimsContext",
    "ClaimsContextBuilder",
    "ClaimsEngineError",
    "ClaimsResolution",
    "DataUnavailableError",
    "EffectiveClaim",
    "InsufficientBrandPermissions",
    "NoClaimsForProduct",
    "NoClaimsReason",
    "PermissionFailureCode",
    "PermissionResolver",
    "PermissionVerdict",
    "PrecedenceResolver",
    "PrecedenceResult",
    "ProductNotFoundError",
    "ProductsMissingBrandLink",
    "ProductsNotFound",
    "ResolutionCancelledError",
    "TypeConflict",
]
