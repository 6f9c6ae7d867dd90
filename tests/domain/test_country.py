from __future__ import annotations

import pytest

from claimstack.domain.model import (
    ALL_COUNTRIES_CODE,
    GLOBAL,
    GLOBAL_COUNTRY_CODE,
    Market,
    parse_country,
    parse_market,
    visible_in,
)


@pytest.mark.parametrize("value", ["__GLOBAL__", " __global__ ", ALL_COUNTRIES_CODE])
def test_parse_country_recognises_global_sentinels(value: str) -> None:
    assert parse_country(value) is GLOBAL


def test_parse_country_normalises_market_codes() -> None:
    assert parse_country(" us ") == Market("US")


@pytest.mark.parametrize("value", ["USA", "U", "1A", "ÜS", ""])
def test_parse_country_rejects_invalid_codes(value: str) -> None:
    with pytest.raises(ValueError, match="Invalid market code"):
        parse_country(value)


def test_market_requires_upper_case() -> None:
    with pytest.raises(ValueError, match="upper-case"):
        Market("us")


def test_parse_market_treats_blank_as_no_filter() -> None:
    assert parse_market(None) is None
    assert parse_market("  ") is None


def test_parse_market_rejects_global_sentinel() -> None:
    with pytest.raises(ValueError, match="not a market filter"):
        parse_market(GLOBAL_COUNTRY_CODE)


def test_global_serialises_to_sentinel() -> None:
    assert str(GLOBAL) == GLOBAL_COUNTRY_CODE
    assert GLOBAL.is_global
    assert not Market("GB").is_global


def test_visible_in_market_filter() -> None:
    us = Market("US")
    gb = Market("GB")

    assert visible_in(GLOBAL, us)
    assert visible_in(us, us)
    assert not visible_in(gb, us)
    assert visible_in(gb, None)
    assert visible_in(GLOBAL, None)
