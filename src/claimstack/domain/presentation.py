"""Grouping of effective claims for copywriters and the styling hand-off."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from claimstack.domain.model import ClaimLevel, ClaimType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from claimstack.domain.ports.styling import StylingRequest
    from claimstack.domain.stacking import EffectiveClaim

DISPLAY_LEVELS: tuple[ClaimLevel, ...] = (
    ClaimLevel.PRODUCT,
    ClaimLevel.INGREDIENT,
    ClaimLevel.BRAND,
)


@dataclass(frozen=True, slots=True)
class LevelGroup:
    level: ClaimLevel
    texts_by_type: dict[ClaimType, tuple[str, ...]] = field(
        default_factory=dict["ClaimType", "tuple[str, ...]"]
    )

    def texts(self, claim_type: ClaimType) -> tuple[str, ...]:
        return self.texts_by_type.get(claim_type, ())

    @property
    def is_empty(self) -> bool:
        return not any(self.texts_by_type.values())


@dataclass(frozen=True, slots=True)
class ClaimGroups:
    groups: tuple[LevelGroup, ...]

    def for_level(self, level: ClaimLevel) -> LevelGroup:
        for group in self.groups:
            if group.level is level:
                return group
        return LevelGroup(level=level)

    @property
    def is_empty(self) -> bool:
        return all(group.is_empty for group in self.groups)


def group_by_level(claims: Iterable[EffectiveClaim]) -> ClaimGroups:
    """Group claims by level (product, ingredient, brand), keeping precedence order."""

    buckets: dict[ClaimLevel, dict[ClaimType, list[str]]] = {
        level: {} for level in DISPLAY_LEVELS
    }
    for claim in claims:
        buckets[claim.level].setdefault(claim.type, []).append(claim.text.strip())
    return ClaimGroups(
        groups=tuple(
            LevelGroup(
                level=level,
                texts_by_type={
                    claim_type: tuple(texts) for claim_type, texts in buckets[level].items()
                },
            )
            for level in DISPLAY_LEVELS
        )
    )


def introductory_sentence(product_name: str | None, brand_name: str | None = None) -> str:
    if product_name and brand_name:
        return f"Approved claims for {product_name} by {brand_name}."
    if product_name:
        return f"Approved claims for {product_name}."
    if brand_name:
        return f"Approved claims for {brand_name} products."
    return "Approved claims for this product."


class PlainTextStyler:
    """Renders grouped claims verbatim; used when no external styling service is wired."""

    async def style(self, request: StylingRequest) -> str:
        return render_plain_text(request.introduction, request.groups)


def render_plain_text(introduction: str, groups: ClaimGroups) -> str:
    lines = [introduction]
    for group in groups.groups:
        if group.is_empty:
            continue
        lines.append("")
        lines.append(f"{group.level.value.capitalize()} claims:")
        for claim_type in ClaimType:
            lines.extend(f"- [{claim_type}] {text}" for text in group.texts(claim_type))
    return "\n".join(lines)
