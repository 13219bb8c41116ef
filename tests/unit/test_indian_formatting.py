from decimal import Decimal

import pytest

from fabdocs.utils.indian_format import format_amount, format_indian_number, format_inr, to_indian_words


def test_indian_number_basic_groups():
    cases = [
        (0, '0'),
        (12, '12'),
        (123, '123'),
        (1234, '1,234'),
        (12345, '12,345'),
        (123456, '1,23,456'),
        (1234567, '12,34,567'),
        (12345678, '1,23,45,678'),
        (123456789, '12,34,56,789'),
    ]
    for value, expected in cases:
        assert format_indian_number(value) == expected


def test_indian_number_negative_and_fraction():
    assert format_indian_number(-1234567.89) == '-12,34,567.89'


def test_format_inr_rounding_half_up():
    assert format_inr(1.005) == '₹1.01'
    assert format_inr(1.004) == '₹1.00'


def test_format_inr_symbol_toggle():
    assert format_inr(1234.5, symbol=False) == '1,234.50'


def test_format_amount_table_cells():
    assert format_amount(Decimal('250000')) == '2,50,000.00'
    assert format_amount('63075') == '63,075.00'


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "Zero Rupees Only"),
        (1, "One Rupees Only"),
        (100000, "One Lakh Rupees Only"),
        (10000000, "One Crore Rupees Only"),
        (Decimal("1234.50"), "One Thousand Two Hundred Thirty Four Rupees and Fifty Paise Only"),
        (Decimal("0.50"), "Zero Rupees and Fifty Paise Only"),
        (Decimal("12345678"), "One Crore Twenty Three Lakh Forty Five Thousand Six Hundred Seventy Eight Rupees Only"),
        (Decimal("369649.78"),
         "Three Lakh Sixty Nine Thousand Six Hundred Forty Nine Rupees and Seventy Eight Paise Only"),
    ],
)
def test_words_known_values(amount, expected):
    assert to_indian_words(amount) == expected


def test_words_large_crore_count_is_grouped_again():
    assert to_indian_words(Decimal("10000000000")) == "One Thousand Crore Rupees Only"
    assert to_indian_words(Decimal("1500000000")) == "One Hundred Fifty Crore Rupees Only"


def test_words_paise_rounding_carries_into_rupees():
    assert to_indian_words(Decimal("9.995")) == "Ten Rupees Only"
    assert to_indian_words(Decimal("1.005")) == "One Rupees and One Paise Only"


def test_words_omit_zero_paise_clause():
    assert "Paise" not in to_indian_words(Decimal("500.00"))


def test_words_reject_negative_amounts():
    with pytest.raises(ValueError):
        to_indian_words(Decimal("-1"))
