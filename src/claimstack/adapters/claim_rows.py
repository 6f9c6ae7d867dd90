"""Translate stored claim rows (three nullable owner columns) into ``Claim`` values."""

from __future__ import annotations

from typing import TYPE_CHECKING

from claimstack.domain.errors import ClaimIntegrityError
from claimstack.domain.model import (
    ALL_COUNTRIES_CODE,
    GLOBAL,
    GLOBAL_COUNTRY_CODE,
    Claim,
    ClaimLevel,
    ClaimType,
    Market,
)

if TYPE_CHECKING:
    from uuid import UUID

    from claimstack.domain.model import Country

GLOBAL_CODES: tuple[str, ...] = (GLOBAL_COUNTRY_CODE, ALL_COUNTRIES_CODE)


def stored_country_codes(market: Market | None) -> tuple[str, ...]:
    """Country codes that are in force for ``market``: the global sentinels plus the market."""

    if market is None:
        return GLOBAL_CODES
    return (*GLOBAL_CODES, market.code)


def parse_stored_country(code: str) -> Country:
    """Parse a country code exactly as stored.

    Anything other than the sentinels or a canonical upper-case code is rejected
    rather than normalised, so a bad row fails the same way under every market filter.
    """

    if code in GLOBAL_CODES:
        return GLOBAL
    return Market(code)


def build_claim(  # noqa: PLR0913
    *,
    claim_id: UUID,
    text: str,
    claim_type: str,
    level: str,
    master_brand_id: UUID | None,
    product_id: UUID | None,
    ingredient_id: UUID | None,
    country_code: str,
    description: str | None = None,
) -> Claim:
    """Build a claim, rejecting rows whose owner column does not match ``level``."""

    try:
        parsed_level = ClaimLevel(level)
        parsed_type = ClaimType(claim_type)
        country = parse_stored_country(country_code)
    except ValueError as exc:
        raise ClaimIntegrityError(f"Claim {claim_id}: {exc}", claim_id=claim_id) from exc

    owners = {
        ClaimLevel.BRAND: master_brand_id,
        ClaimLevel.PRODUCT: product_id,
        ClaimLevel.INGREDIENT: ingredient_id,
    }
    populated = [owner_level for owner_level, owner in owners.items() if owner is not None]
    owner_id = owners[parsed_level]
    if owner_id is None or len(populated) != 1:
        raise ClaimIntegrityError(
            f"Claim {claim_id} has level {parsed_level} but owner columns "
            f"{', '.join(populated) or 'none'}",
            claim_id=claim_id,
        )
    return Claim(
        id=claim_id,
        text=text,
        type=parsed_type,
        level=parsed_level,
        country=country,
        owner_id=owner_id,
        description=description,
    )
