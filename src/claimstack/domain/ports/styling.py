"""Port for the external claim styling service (one opaque text transform)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from claimstack.domain.model import Market
    from claimstack.domain.presentation import ClaimGroups


@dataclass(frozen=True, slots=True, kw_only=True)
class StylingRequest:
    product_name: str
    market: Market | None
    introduction: str
    groups: ClaimGroups


@runtime_checkable
class ClaimStyler(Protocol):
    async def style(self, request: StylingRequest) -> str: ...
