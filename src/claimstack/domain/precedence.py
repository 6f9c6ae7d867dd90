"""Precedence ordering and display deduplication for merged claim sets.

Ordering (stable, so ties keep input order):

1. mandatory claims before every other type
2. level: product, then ingredient, then brand
3. a concrete market before the global scope

Deduplication then keeps the first claim for each exact ``text``. It is a
display dedup, not a legal merge: when the dropped duplicate has a different
``type`` than the survivor the pair is reported as a ``TypeConflict`` but the
survivor is not changed.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Protocol, assert_never

from claimstack.domain.model import ClaimLevel, ClaimType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from claimstack.domain.model import Country

log = getLogger(__name__)


class RankedClaim(Protocol):
    """Anything carrying the fields precedence is computed from."""

    @property
    def text(self) -> str: ...

    @property
    def type(self) -> ClaimType: ...

    @property
    def level(self) -> ClaimLevel: ...

    @property
    def country(self) -> Country: ...


type PrecedenceKey = tuple[int, int, int]


def level_rank(level: ClaimLevel) -> int:
    match level:
        case ClaimLevel.PRODUCT:
            return 1
        case ClaimLevel.INGREDIENT:
            return 2
        case ClaimLevel.BRAND:
            return 3
        case _:
            assert_never(level)


def precedence_key(claim: RankedClaim) -> PrecedenceKey:
    mandatory_rank = 0 if claim.type is ClaimType.MANDATORY else 1
    country_rank = 1 if claim.country.is_global else 0
    return (mandatory_rank, level_rank(claim.level), country_rank)


@dataclass(frozen=True, slots=True)
class TypeConflict[T: RankedClaim]:
    """Two claims share text but disagree on type; ``kept`` won by precedence."""

    text: str
    kept: T
    dropped: T


@dataclass(frozen=True, slots=True)
class PrecedenceResult[T: RankedClaim]:
    claims: tuple[T, ...]
    conflicts: tuple[TypeConflict[T], ...] = ()


@dataclass(frozen=True, slots=True)
class PrecedenceResolver:
    report_type_conflicts: bool = True

    def resolve[T: RankedClaim](self, claims: Iterable[T]) -> list[T]:
        return list(self.resolve_detailed(claims).claims)

    def resolve_detailed[T: RankedClaim](self, claims: Iterable[T]) -> PrecedenceResult[T]:
        ordered = sorted(claims, key=precedence_key)
        kept_by_text: dict[str, T] = {}
        result: list[T] = []
        conflicts: list[TypeConflict[T]] = []

        for claim in ordered:
            survivor = kept_by_text.get(claim.text)
            if survivor is None:
                kept_by_text[claim.text] = claim
                result.append(claim)
                continue
            if survivor.type is not claim.type:
                conflicts.append(TypeConflict(text=claim.text, kept=survivor, dropped=claim))

        if conflicts and self.report_type_conflicts:
            for conflict in conflicts:
                log.warning(
                    "Claim text %r appears as %s and %s; keeping %s by precedence",
                    conflict.text,
                    conflict.kept.type,
                    conflict.dropped.type,
                    conflict.kept.type,
                )

        return PrecedenceResult(claims=tuple(result), conflicts=tuple(conflicts))
