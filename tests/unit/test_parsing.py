"""Unit tests for number, rate and range parsing"""

import pytest
from savings_gateway.domain.parsing import (
    Range,
    parse_amount_input,
    parse_number,
    parse_range,
    parse_rate,
    strip_markup,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1.000.000,50", 1_000_000.5),
        ("1,000,000.50", 1_000_000.5),
        ("50.000", 50_000),
        ("49,999.99", 49_999.99),
        ("45,50", 45.5),
        ("45.5", 45.5),
        ("1,000,000", 1_000_000),
        ("250.000 TL", 250_000),
        (12.5, 12.5),
    ],
)
def test_parse_number_separators(text, expected):
    """Both Turkish and English notations are understood"""
    assert parse_number(text) == pytest.approx(expected)


def test_parse_number_unreadable_is_zero():
    """Missing or non-numeric input never raises"""
    assert parse_number(None) == 0.0
    assert parse_number("") == 0.0
    assert parse_number("yok") == 0.0
    assert parse_number(True) == 0.0


def test_parse_rate_strips_percent_and_markup():
    assert parse_rate("%45,50") == pytest.approx(45.5)
    assert parse_rate("<b>47.00</b> %") == pytest.approx(47.0)
    assert parse_rate(None) == 0.0
    assert parse_rate(40) == 40.0


def test_strip_markup_decodes_entities():
    assert strip_markup("<td>%&nbsp;45</td>") == "%\xa045"


def test_parse_range_closed():
    assert parse_range("0 - 50.000 TL") == Range(0, 50_000)
    assert parse_range("50.001–250.000") == Range(50_001, 250_000)
    assert parse_range("0.00 - 49,999.99") == Range(0, pytest.approx(49_999.99))


def test_parse_range_open_ended():
    """'ve üzeri' and trailing plus both mean unbounded"""
    assert parse_range("1.000.000 TL ve üzeri") == Range(1_000_000, None)
    assert parse_range("500.000 - üzeri") == Range(500_000, None)
    assert parse_range("50,000.00 +") == Range(50_000, None)
    assert parse_range("250.000₺+") == Range(250_000, None)


def test_parse_range_unreadable():
    assert parse_range(None) is None
    assert parse_range("") is None
    assert parse_range("Tutar") is None


def test_parse_amount_input_turkish_notation():
    """Periods in typed input always group thousands"""
    assert parse_amount_input("100.000") == 100_000
    assert parse_amount_input("2.500,75 ₺") == pytest.approx(2500.75)
    assert parse_amount_input("") == 0.0
    assert parse_amount_input("abc") == 0.0
