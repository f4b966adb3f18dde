"""Unit tests for money arithmetic and status derivation (pure logic, no DB)."""

from decimal import Decimal

import pytest

from app.core.exceptions import ValidationError
from app.models.enums import BillStatus
from app.services.pricing import (
    bill_total,
    derive_status,
    format_money,
    line_total,
    parse_count,
    parse_money,
    round_money,
    to_decimal,
)


def test_line_total_is_price_times_quantity():
    assert line_total("100.00", 25) == Decimal("2500.00")
    assert line_total(Decimal("19.99"), 3) == Decimal("59.97")


def test_line_total_rounds_half_up():
    assert line_total("0.125", 1) == Decimal("0.13")
    assert line_total("33.335", 3) == Decimal("100.01")


def test_to_decimal_avoids_float_artefacts():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(None) == Decimal("0")


def test_bill_total_is_sum_of_line_totals():
    totals = [line_total("100.00", 25), line_total("250.50", 2), line_total("0.10", 3)]
    assert bill_total(totals) == Decimal("3001.30")


def test_bill_total_empty():
    assert bill_total([]) == Decimal("0.00")


def test_round_money_quantizes_to_cents():
    assert round_money("1000") == Decimal("1000.00")
    assert str(round_money(2.675)) == "2.68"


def test_derive_status_pending_when_nothing_paid():
    assert derive_status("2500", "2500") == BillStatus.PENDING


def test_derive_status_partially_paid():
    assert derive_status("2500", "1500") == BillStatus.PARTIALLY_PAID
    assert derive_status("2500", "0.01") == BillStatus.PARTIALLY_PAID


def test_derive_status_paid():
    assert derive_status("2500", "0") == BillStatus.PAID


def test_derive_status_closed_overrides_balance():
    assert derive_status("2500", "2500", is_closed=True) == BillStatus.CLOSED
    assert derive_status("2500", "0", is_closed=True) == BillStatus.CLOSED



def test_format_money():
    assert format_money("2500") == "2,500.00"
    assert format_money("1500.5", "Rs.") == "Rs.1,500.50"


def test_parse_money_accepts_typed_amounts():
    assert parse_money("1500") == Decimal("1500.00")
    assert parse_money(" 99.5 ") == Decimal("99.50")
    assert parse_money(Decimal("0.125")) == Decimal("0.13")


@pytest.mark.parametrize("value", ["abc", "1,000", "", "NaN", "Infinity", object()])
def test_parse_money_rejects_non_numbers(value):
    with pytest.raises(ValidationError, match="Please enter a valid amount"):
        parse_money(value)


def test_parse_money_custom_message():
    with pytest.raises(ValidationError, match="Please enter a valid price"):
        parse_money("ten", "Please enter a valid price")


def test_parse_count():
    assert parse_count("25", "bad quantity") == 25
    assert parse_count(3, "bad quantity") == 3
    assert parse_count(4.0, "bad quantity") == 4


@pytest.mark.parametrize("value", ["two", "2.5", 2.5, "", None, True])
def test_parse_count_rejects_non_integers(value):
    with pytest.raises(ValidationError, match="bad quantity"):
        parse_count(value, "bad quantity")
