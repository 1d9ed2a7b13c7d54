import pytest

from src.core.utils.currency_normalizer import CURRENCY_RULES, detect_currency


@pytest.mark.parametrize(
    "text,expected",
    [
        ("€ 19,99", "EUR"),
        ("19.99 eur", "EUR"),
        ("$19.99", "USD"),
        ("USD 5", "USD"),
        ("£3.50", "GBP"),
        ("gbp 3.50", "GBP"),
        ("19.99", None),
        ("", None),
        (None, None),
    ],
)
def test_detect_currency(text, expected):
    assert detect_currency(text) == expected


def test_euro_wins_regardless_of_order():
    assert detect_currency("$ 10 / 9 EUR") == "EUR"
    assert detect_currency("£5 or $6") == "USD"


def test_rules_are_checked_in_declared_order():
    assert [code for _, code in CURRENCY_RULES] == ["EUR", "USD", "GBP"]
