from __future__ import annotations

import asyncio
from uuid import uuid4

from claimstack.domain.model import ClaimLevel, ClaimType, Market
from claimstack.domain.ports.styling import ClaimStyler, StylingRequest
from claimstack.domain.presentation import (
    PlainTextStyler,
    group_by_level,
    introductory_sentence,
)
from claimstack.domain.stacking import EffectiveClaim
from tests.helpers.claims import make_claim


def _effective(text: str, level: ClaimLevel, claim_type: ClaimType) -> EffectiveClaim:
    return EffectiveClaim(
        claim=make_claim(text, owner_id=uuid4(), level=level, claim_type=claim_type)
    )


def test_group_by_level_orders_product_ingredient_brand() -> None:
    claims = [
        _effective("Contains oats", ClaimLevel.BRAND, ClaimType.MANDATORY),
        _effective("High protein ", ClaimLevel.PRODUCT, ClaimType.ALLOWED),
        _effective("Source of fibre", ClaimLevel.INGREDIENT, ClaimType.ALLOWED),
        _effective("Cures colds", ClaimLevel.PRODUCT, ClaimType.DISALLOWED),
    ]

    groups = group_by_level(claims)

    assert [group.level for group in groups.groups] == [
        ClaimLevel.PRODUCT,
        ClaimLevel.INGREDIENT,
        ClaimLevel.BRAND,
    ]
    product = groups.for_level(ClaimLevel.PRODUCT)
    assert product.texts(ClaimType.ALLOWED) == ("High protein",)
    assert product.texts(ClaimType.DISALLOWED) == ("Cures colds",)
    assert product.texts(ClaimType.MANDATORY) == ()
    assert groups.for_level(ClaimLevel.BRAND).texts(ClaimType.MANDATORY) == ("Contains oats",)


def test_group_by_level_of_nothing_is_empty() -> None:
    groups = group_by_level([])

    assert groups.is_empty
    assert all(group.is_empty for group in groups.groups)


def test_introductory_sentence_variants() -> None:
    assert introductory_sentence("Oat Bar", "Acme") == "Approved claims for Oat Bar by Acme."
    assert introductory_sentence("Oat Bar") == "Approved claims for Oat Bar."
    assert introductory_sentence(None, "Acme") == "Approved claims for Acme products."
    assert introductory_sentence(None) == "Approved claims for this product."


def test_plain_text_styler_renders_non_empty_groups() -> None:
    groups = group_by_level(
        [
            _effective("Contains oats", ClaimLevel.BRAND, ClaimType.MANDATORY),
            _effective("High protein", ClaimLevel.PRODUCT, ClaimType.ALLOWED),
        ]
    )
    styler = PlainTextStyler()
    request = StylingRequest(
        product_name="Oat Bar",
        market=Market("US"),
        introduction="Approved claims for Oat Bar by Acme.",
        groups=groups,
    )

    text = asyncio.run(styler.style(request))

    assert isinstance(styler, ClaimStyler)
    assert text.splitlines() == [
        "Approved claims for Oat Bar by Acme.",
        "",
        "Product claims:",
        "- [allowed] High protein",
        "",
        "Brand claims:",
        "- [mandatory] Contains oats",
    ]
