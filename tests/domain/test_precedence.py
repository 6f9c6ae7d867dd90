from __future__ import annotations

import logging
from itertools import permutations
from uuid import uuid4

import pytest

from claimstack.domain.model import GLOBAL, ClaimLevel, ClaimType, Market
from claimstack.domain.precedence import PrecedenceResolver, precedence_key
from tests.helpers.claims import make_claim

US = Market("US")


def test_mandatory_claims_come_first_regardless_of_level() -> None:
    product = make_claim("Great taste", owner_id=uuid4(), level=ClaimLevel.PRODUCT)
    brand_mandatory = make_claim(
        "Contains caffeine",
        owner_id=uuid4(),
        level=ClaimLevel.BRAND,
        claim_type=ClaimType.MANDATORY,
    )

    resolved = PrecedenceResolver().resolve([product, brand_mandatory])

    assert [claim.text for claim in resolved] == ["Contains caffeine", "Great taste"]


def test_levels_order_product_ingredient_brand() -> None:
    brand = make_claim("Brand", owner_id=uuid4(), level=ClaimLevel.BRAND)
    ingredient = make_claim("Ingredient", owner_id=uuid4(), level=ClaimLevel.INGREDIENT)
    product = make_claim("Product", owner_id=uuid4(), level=ClaimLevel.PRODUCT)

    resolved = PrecedenceResolver().resolve([brand, ingredient, product])

    assert [claim.level for claim in resolved] == [
        ClaimLevel.PRODUCT,
        ClaimLevel.INGREDIENT,
        ClaimLevel.BRAND,
    ]


def test_market_claim_precedes_global_claim_at_same_level() -> None:
    global_claim = make_claim("Global", owner_id=uuid4(), country=GLOBAL)
    market_claim = make_claim("Market", owner_id=uuid4(), country=US)

    resolved = PrecedenceResolver().resolve([global_claim, market_claim])

    assert resolved == [market_claim, global_claim]


def test_dedup_keeps_highest_precedence_claim_for_identical_text() -> None:
    owner = uuid4()
    brand = make_claim("Low fat", owner_id=owner, level=ClaimLevel.BRAND)
    product = make_claim("Low fat", owner_id=owner, level=ClaimLevel.PRODUCT)

    resolved = PrecedenceResolver().resolve([brand, product])

    assert resolved == [product]


def test_dedup_is_exact_text_match() -> None:
    first = make_claim("Low fat", owner_id=uuid4())
    second = make_claim("low fat", owner_id=uuid4())

    resolved = PrecedenceResolver().resolve([first, second])

    assert len(resolved) == 2


def test_ties_keep_input_order() -> None:
    owner = uuid4()
    claims = [make_claim(f"Claim {index}", owner_id=owner) for index in range(5)]

    assert PrecedenceResolver().resolve(claims) == claims


def test_resolution_is_total_and_idempotent() -> None:
    owner = uuid4()
    claims = [
        make_claim("A", owner_id=owner, level=ClaimLevel.BRAND, claim_type=ClaimType.MANDATORY),
        make_claim("B", owner_id=owner, level=ClaimLevel.INGREDIENT, country=US),
        make_claim("C", owner_id=owner, level=ClaimLevel.PRODUCT),
        make_claim("A", owner_id=owner, level=ClaimLevel.PRODUCT),
    ]
    resolver = PrecedenceResolver()

    for ordering in permutations(claims):
        resolved = resolver.resolve(ordering)
        keys = [precedence_key(claim) for claim in resolved]
        assert keys == sorted(keys)
        assert len({claim.text for claim in resolved}) == len(resolved)
        assert resolver.resolve(resolved) == resolved


def test_type_conflict_is_reported_and_survivor_unchanged(
    caplog: pytest.LogCaptureFixture,
) -> None:
    owner = uuid4()
    mandatory = make_claim(
        "Contains nuts",
        owner_id=owner,
        level=ClaimLevel.BRAND,
        claim_type=ClaimType.MANDATORY,
    )
    disallowed = make_claim(
        "Contains nuts",
        owner_id=owner,
        level=ClaimLevel.PRODUCT,
        claim_type=ClaimType.DISALLOWED,
    )

    with caplog.at_level(logging.WARNING, logger="claimstack.domain.precedence"):
        result = PrecedenceResolver().resolve_detailed([disallowed, mandatory])

    assert result.claims == (mandatory,)
    assert len(result.conflicts) == 1
    conflict = result.conflicts[0]
    assert conflict.kept is mandatory
    assert conflict.dropped is disallowed
    assert "Contains nuts" in caplog.text


def test_type_conflict_logging_can_be_disabled(caplog: pytest.LogCaptureFixture) -> None:
    owner = uuid4()
    claims = [
        make_claim("Vegan", owner_id=owner, claim_type=ClaimType.ALLOWED),
        make_claim(
            "Vegan", owner_id=owner, level=ClaimLevel.BRAND, claim_type=ClaimType.DISALLOWED
        ),
    ]

    with caplog.at_level(logging.WARNING, logger="claimstack.domain.precedence"):
        result = PrecedenceResolver(report_type_conflicts=False).resolve_detailed(claims)

    assert len(result.conflicts) == 1
    assert caplog.text == ""


def test_empty_input_yields_empty_result() -> None:
    assert PrecedenceResolver().resolve([]) == []
