from decimal import Decimal

import pytest

from badgeshop.services.pricing import (
    PricingException,
    compute_totals,
    is_free_shipping,
    shipping_cost,
    zone_multiplier,
)


def test_three_standard_badges_at_cart_rate():
    t = compute_totals([{"price": 12.99, "quantity": 3}], 0.07, "standard")
    assert t.subtotal == Decimal("38.97")
    assert t.tax == Decimal("2.73")
    assert t.shipping == Decimal("5.99")
    assert t.total == Decimal("47.69")
    assert t.free_shipping is False


def test_subtotal_is_sum_of_price_times_quantity():
    lines = [{"price": "8.99", "quantity": 2}, {"price": "6.99", "quantity": 1}, {"price": 12.99, "quantity": 4}]
    t = compute_totals(lines, 0, "express")
    assert t.subtotal == Decimal("8.99") * 2 + Decimal("6.99") + Decimal("12.99") * 4
    assert t.total == t.subtotal + t.shipping


def test_malformed_lines_are_coalesced():
    t = compute_totals([{"price": "abc", "quantity": 2}, {"price": 5, "quantity": 0}, {"price": 5}], 0)
    assert t.subtotal == Decimal("10.00")


@pytest.mark.parametrize(
    "subtotal,method,free",
    [
        ("100.00", "standard", False),
        ("100.01", "standard", True),
        ("250.00", "express", False),
        ("250.00", "overnight", False),
    ],
)
def test_free_shipping_only_for_standard_above_threshold(subtotal, method, free):
    assert is_free_shipping(Decimal(subtotal), method) is free
    cost = shipping_cost(Decimal(subtotal), method)
    assert (cost == 0) is free


def test_empty_cart_ships_free_of_charge():
    t = compute_totals([], 0.07, "overnight")
    assert t.shipping == Decimal("0")
    assert t.total == Decimal("0.00")
    assert t.free_shipping is False


def test_unknown_shipping_method_rejected():
    with pytest.raises(PricingException):
        compute_totals([{"price": 1, "quantity": 1}], 0.07, "drone")


def test_zip_zones():
    assert zone_multiplier("10001") == Decimal("1.0")
    assert zone_multiplier("60601") == Decimal("1.1")
    assert zone_multiplier("94105") == Decimal("1.2")
    with pytest.raises(PricingException, match="valid ZIP"):
        zone_multiplier("123")


def test_zone_applies_to_shipping_rate():
    t = compute_totals([{"price": 10, "quantity": 1}], 0, "express", postal_code="94105")
    assert t.shipping == Decimal("15.59")


def test_amount_beyond_cent_precision_rejected():
    with pytest.raises(PricingException, match="too large"):
        compute_totals([{"price": 12.99, "quantity": 10**27}], 0.07)
