from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, Iterable, Optional

from badgeshop.config import settings

CENTS = Decimal("0.01")


class PricingException(Exception):
    pass


@dataclass(frozen=True)
class ShippingOption:
    code: str
    name: str
    rate: Decimal


SHIPPING_OPTIONS: Dict[str, ShippingOption] = {
    "standard": ShippingOption("standard", "Standard Shipping (3-5 days)", Decimal("5.99")),
    "express": ShippingOption("express", "Express Shipping (2 days)", Decimal("12.99")),
    "overnight": ShippingOption("overnight", "Overnight Shipping (1 day)", Decimal("24.99")),
}


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    tax_rate: Decimal
    shipping: Decimal
    shipping_method: str
    free_shipping: bool
    total: Decimal

    def as_dict(self) -> Dict:
        return {
            "subtotal": float(self.subtotal),
            "tax": float(self.tax),
            "taxRate": float(self.tax_rate),
            "shipping": float(self.shipping),
            "shippingMethod": self.shipping_method,
            "shippingName": SHIPPING_OPTIONS[self.shipping_method].name,
            "freeShipping": self.free_shipping,
            "total": float(self.total),
        }


def round_amount(value: Decimal) -> Decimal:
    try:
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # more digits than the decimal context can hold at cent precision
        raise PricingException("Amount is too large to price")


def to_decimal(value, default: Decimal = Decimal("0")) -> Decimal:
    if value is None or isinstance(value, bool):
        return default
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default
    return d if d.is_finite() else default


def coerce_quantity(value) -> int:
    """Missing, unparsable or non-positive quantities count as 1."""
    try:
        q = int(value)
    except (TypeError, ValueError):
        return 1
    return q if q >= 1 else 1


def subtotal_of(lines: Iterable[Dict]) -> Decimal:
    total = Decimal("0")
    for line in lines:
        total += to_decimal(line.get("price")) * coerce_quantity(line.get("quantity"))
    return total


def zone_multiplier(postal_code: str) -> Decimal:
    """
    Regional surcharge keyed on the first ZIP digit:
    0-3 east coast 1.0, 4-6 central 1.1, 7-9 west coast 1.2.
    """
    if not postal_code or len(postal_code.strip()) < 5:
        raise PricingException("Please enter a valid ZIP code")
    first = postal_code.strip()[0]
    if not first.isdigit():
        return Decimal("1.0")
    digit = int(first)
    if digit <= 3:
        return Decimal("1.0")
    if digit <= 6:
        return Decimal("1.1")
    return Decimal("1.2")


def shipping_cost(
    subtotal: Decimal,
    method: str = "standard",
    postal_code: Optional[str] = None,
    has_items: bool = True,
) -> Decimal:
    option = SHIPPING_OPTIONS.get(method)
    if option is None:
        raise PricingException(f"Unknown shipping method: {method}")
    if not has_items:
        return Decimal("0")
    if is_free_shipping(subtotal, method):
        return Decimal("0")
    rate = option.rate
    if postal_code is not None:
        rate = rate * zone_multiplier(postal_code)
    return rate


def is_free_shipping(subtotal: Decimal, method: str) -> bool:
    return method == "standard" and subtotal > Decimal(str(settings.FREE_SHIPPING_THRESHOLD))


def compute_totals(
    lines: Iterable[Dict],
    tax_rate,
    shipping_method: str = "standard",
    postal_code: Optional[str] = None,
) -> Totals:
    lines = list(lines)
    rate = to_decimal(tax_rate)
    raw_subtotal = subtotal_of(lines)
    subtotal = round_amount(raw_subtotal)
    tax = round_amount(raw_subtotal * rate)
    shipping = round_amount(
        shipping_cost(raw_subtotal, shipping_method, postal_code, has_items=bool(lines))
    )
    return Totals(
        subtotal=subtotal,
        tax=tax,
        tax_rate=rate,
        shipping=shipping,
        shipping_method=shipping_method,
        free_shipping=bool(lines) and is_free_shipping(raw_subtotal, shipping_method),
        # sum of the rounded parts so the receipt always adds up
        total=subtotal + tax + shipping,
    )
