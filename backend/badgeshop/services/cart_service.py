from typing import Dict, List, Optional

from badgeshop.config import settings
from badgeshop.services.pricing import Totals, coerce_quantity, compute_totals, round_amount, to_decimal


def normalize_line(raw: Dict, position: int = 0) -> Dict:
    """
    Coalesce a stored cart entry into a complete line.
    Entries saved by older configurator builds keep the quantity under `customizations`.
    """
    raw = raw or {}
    customizations = raw.get("customizations") or {}
    quantity = raw.get("quantity") or customizations.get("quantity") or 1
    line_id = raw.get("id")
    if line_id is None:
        line_id = raw.get("productId", position)
    return {
        "id": str(line_id),
        "product_id": raw.get("productId") or raw.get("product_id") or raw.get("id"),
        "name": raw.get("name") or "Product",
        "price": round_amount(to_decimal(raw.get("price"))),
        "quantity": coerce_quantity(quantity),
        "image_url": raw.get("imageUrl") or raw.get("image"),
        "badge_type": raw.get("badgeType"),
        "size": raw.get("size"),
    }


class Cart:
    """The browser-held cart as an ordered list of lines; never persisted here."""

    def __init__(self, items: Optional[List[Dict]] = None):
        self.lines = [normalize_line(it, i) for i, it in enumerate(items or [])]

    def __len__(self):
        return len(self.lines)

    def is_empty(self) -> bool:
        return not self.lines

    def _find(self, line_id) -> Optional[Dict]:
        return next((l for l in self.lines if l["id"] == str(line_id)), None)

    def update_quantity(self, line_id, quantity: int) -> bool:
        if quantity < 1:
            return False
        line = self._find(line_id)
        if line is None:
            return False
        line["quantity"] = int(quantity)
        return True

    def remove(self, line_id) -> bool:
        before = len(self.lines)
        self.lines = [l for l in self.lines if l["id"] != str(line_id)]
        return len(self.lines) != before

    def clear(self):
        self.lines = []

    def quantity_count(self) -> int:
        return sum(l["quantity"] for l in self.lines)

    def totals(self, tax_rate=None, shipping_method: str = "standard", postal_code: Optional[str] = None) -> Totals:
        if tax_rate is None:
            tax_rate = settings.CART_TAX_RATE
        return compute_totals(self.lines, tax_rate, shipping_method, postal_code)

    def to_wire(self) -> List[Dict]:
        return [
            {
                "id": l["id"],
                "productId": l["product_id"],
                "name": l["name"],
                "price": float(l["price"]),
                "quantity": l["quantity"],
                "lineTotal": float(round_amount(l["price"] * l["quantity"])),
                "imageUrl": l["image_url"],
                "badgeType": l["badge_type"],
                "size": l["size"],
            }
            for l in self.lines
        ]


class CartService:
    def quote(
        self,
        items: List[Dict],
        shipping_method: str = "standard",
        postal_code: Optional[str] = None,
    ) -> Dict:
        cart = Cart(items)
        totals = cart.totals(settings.CART_TAX_RATE, shipping_method, postal_code)
        return {
            "items": cart.to_wire(),
            "itemCount": cart.quantity_count(),
            **totals.as_dict(),
        }
