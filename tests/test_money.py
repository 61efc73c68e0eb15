"""Tests for kronor/öre conversions."""

import pytest

from forvaltaren.core.money import format_sek, kr_to_ore, ore_to_kr


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("8500", 850000),
        ("8 500", 850000),
        ("8 500,50", 850050),
        ("12.34", 1234),
        ("0,005", 1),
        (8500, 850000),
    ],
)
def test_kr_to_ore(raw, expected):
    assert kr_to_ore(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "NaN", "1,2,3"])
def test_kr_to_ore_rejects_garbage(raw):
    with pytest.raises(ValueError):
        kr_to_ore(raw)


def test_ore_to_kr():
    assert str(ore_to_kr(850050)) == "8500.50"


def test_format_sek():
    assert format_sek(123450) == "1\u00a0234,50 kr"
    assert format_sek(850000) == "8\u00a0500,00 kr"
    assert format_sek(5) == "0,05 kr"
    assert format_sek(123456789) == "1\u00a0234\u00a0567,89 kr"
    assert format_sek(-123450) == "-1\u00a0234,50 kr"


def test_formatted_amount_parses_back():
    assert kr_to_ore(format_sek(850050).removesuffix(" kr")) == 850050
