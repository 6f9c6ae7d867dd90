"""Stacking of raw claims into the effective set for one product and market.

Stages, applied in this order by the context builder:

1. ``filter_visible`` drops claims scoped to other markets.
2. ``apply_overrides`` blocks or replaces global (master) claims per product.
3. ``shadow_global_duplicates`` drops a global claim when the requested market
   has a claim with the identical text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from claimstack.domain.model import visible_in

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from claimstack.domain.model import (
        Claim,
        ClaimLevel,
        ClaimType,
        Country,
        Market,
        MarketClaimOverride,
    )
    from claimstack.domain.precedence import RankedClaim

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class EffectiveClaim:
    """A claim in force for one product, with enough provenance to group and audit it."""

    claim: Claim
    override_id: UUID | None = None
    replaced_claim_id: UUID | None = None

    @property
    def text(self) -> str:
        return self.claim.text

    @property
    def type(self) -> ClaimType:
        return self.claim.type

    @property
    def level(self) -> ClaimLevel:
        return self.claim.level

    @property
    def country(self) -> Country:
        return self.claim.country

    @property
    def source_claim_id(self) -> UUID:
        return self.claim.id

    @property
    def source_entity_id(self) -> UUID:
        return self.claim.owner_id

    @property
    def is_replacement(self) -> bool:
        return self.override_id is not None


class BlockReason(StrEnum):
    BLOCKED = "blocked"
    MISSING_REPLACEMENT = "missing_replacement"


@dataclass(frozen=True, slots=True, kw_only=True)
class BlockedClaim:
    """A master claim suppressed by an override; ``claim`` is None if it was not fetched."""

    override_id: UUID
    master_claim_id: UUID
    scope: Country
    reason: BlockReason
    claim: Claim | None = None


@dataclass(slots=True)
class OverrideOutcome:
    effective: list[EffectiveClaim] = field(default_factory=list["EffectiveClaim"])
    blocked: list[BlockedClaim] = field(default_factory=list["BlockedClaim"])


def filter_visible(claims: Iterable[Claim], market: Market | None) -> list[Claim]:
    return [claim for claim in claims if visible_in(claim.country, market)]


def select_overrides(
    overrides: Iterable[MarketClaimOverride],
    market: Market | None,
) -> dict[UUID, MarketClaimOverride]:
    """Pick one override per master claim; a market-scoped rule beats an all-markets rule.

    Without a market filter only all-markets overrides apply.
    """

    selected: dict[UUID, MarketClaimOverride] = {}
    for override in overrides:
        if market is None and override.is_market_specific:
            continue
        if not visible_in(override.scope, market):
            continue
        current = selected.get(override.master_claim_id)
        if current is None:
            selected[override.master_claim_id] = override
        elif override.is_market_specific and not current.is_market_specific:
            log.debug(
                "Override %s shadows all-markets override %s for claim %s",
                override.id,
                current.id,
                override.master_claim_id,
            )
            selected[override.master_claim_id] = override
    return selected


def apply_overrides(
    claims: Sequence[Claim],
    overrides: Iterable[MarketClaimOverride],
    market: Market | None,
) -> OverrideOutcome:
    selected = select_overrides(overrides, market)
    outcome = OverrideOutcome()
    if not selected:
        outcome.effective.extend(EffectiveClaim(claim=claim) for claim in claims)
        return outcome

    known_claim_ids = {claim.id for claim in claims}
    for claim in claims:
        override = selected.get(claim.id) if claim.is_global else None
        if override is None:
            outcome.effective.append(EffectiveClaim(claim=claim))
            continue
        _apply_override(override, claim, outcome)

    for master_claim_id, override in selected.items():
        if master_claim_id in known_claim_ids:
            continue
        _apply_override(override, None, outcome)

    return outcome


def _apply_override(
    override: MarketClaimOverride,
    claim: Claim | None,
    outcome: OverrideOutcome,
) -> None:
    if override.replacement_claim_id is not None:
        if override.replacement_claim is not None:
            outcome.effective.append(
                EffectiveClaim(
                    claim=override.replacement_claim,
                    override_id=override.id,
                    replaced_claim_id=override.master_claim_id,
                )
            )
            return
        log.error(
            "Override %s names replacement claim %s but it was not returned; treating as blocked",
            override.id,
            override.replacement_claim_id,
        )
        outcome.blocked.append(_blocked(override, claim, BlockReason.MISSING_REPLACEMENT))
        return

    if override.is_blocked:
        outcome.blocked.append(_blocked(override, claim, BlockReason.BLOCKED))
        return

    if claim is not None:
        outcome.effective.append(EffectiveClaim(claim=claim))


def _blocked(
    override: MarketClaimOverride,
    claim: Claim | None,
    reason: BlockReason,
) -> BlockedClaim:
    return BlockedClaim(
        override_id=override.id,
        master_claim_id=override.master_claim_id,
        scope=override.scope,
        reason=reason,
        claim=claim,
    )


def shadow_global_duplicates[T: RankedClaim](claims: Sequence[T], market: Market | None) -> list[T]:
    """Drop global claims whose text also exists as a claim for ``market``."""

    if market is None:
        return list(claims)
    market_texts = {claim.text for claim in claims if claim.country == market}
    kept = [
        claim
        for claim in claims
        if not (claim.country.is_global and claim.text in market_texts)
    ]
    if len(kept) != len(claims):
        log.debug("Dropped %d global claim(s) overridden in %s", len(claims) - len(kept), market)
    return kept
