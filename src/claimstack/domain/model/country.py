"""Market scoping for claims.

A claim is either global or bound to one market. Queries take a *market filter*
(``Market | None``) where ``None`` means "no filter"; the global value is never
used as a filter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

GLOBAL_COUNTRY_CODE: Final[str] = "__GLOBAL__"
ALL_COUNTRIES_CODE: Final[str] = "__ALL_COUNTRIES__"


@dataclass(frozen=True, slots=True)
class GlobalMarket:
    """Applies everywhere unless a market-specific claim with the same text exists."""

    @property
    def is_global(self) -> bool:
        return True

    def __str__(self) -> str:
        return GLOBAL_COUNTRY_CODE


@dataclass(frozen=True, slots=True)
class Market:
    code: str

    def __post_init__(self) -> None:
        if len(self.code) != 2 or not self.code.isascii() or not self.code.isalpha():
            raise ValueError(f"Invalid market code: {self.code!r}")
        if not self.code.isupper():
            raise ValueError(f"Market code must be upper-case: {self.code!r}")

    @property
    def is_global(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.code


GLOBAL: Final[GlobalMarket] = GlobalMarket()

type Country = GlobalMarket | Market


def parse_country(value: str) -> Country:
    """Parse a country code leniently, recognising the global sentinels."""

    normalized = value.strip().upper()
    if normalized in {GLOBAL_COUNTRY_CODE, ALL_COUNTRIES_CODE}:
        return GLOBAL
    return Market(normalized)


def parse_market(value: str | None) -> Market | None:
    """Parse a caller-supplied market filter; the global sentinel is rejected."""

    if value is None or not value.strip():
        return None
    country = parse_country(value)
    if isinstance(country, GlobalMarket):
        raise ValueError("The global sentinel is not a market filter; pass None instead")
    return country


def visible_in(country: Country, market: Market | None) -> bool:
    """Whether a claim scoped to ``country`` is in force for the ``market`` filter."""

    if market is None:
        return True
    return isinstance(country, GlobalMarket) or country == market
