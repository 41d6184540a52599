import random
import string
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from badgeshop.config import settings
from badgeshop.models.order import Order
from badgeshop.repositories.order_repo import OrderRepository
from badgeshop.repositories.user_repo import UserRepository
from badgeshop.services.cart_service import Cart
from badgeshop.services.pricing import PricingException
from badgeshop.utils.log import get_logger
from badgeshop.utils.transactions import smart_transaction

log = get_logger("orders")

REQUIRED_CUSTOMER_FIELDS = ("email", "address", "city", "postal_code", "country")

_BASE36 = string.digits + string.ascii_lowercase


class OrderServiceException(Exception):
    pass


class CheckoutPersistenceError(Exception):
    """The order transaction failed and was rolled back."""


class OrderService:
    def __init__(self, db: Session):
        self.db = db
        self.orders = OrderRepository(db)
        self.users = UserRepository(db)

    def _gen_order_ref(self) -> str:
        suffix = "".join(random.choices(_BASE36, k=5))
        return f"ORD-{int(time.time() * 1000)}-{suffix}"

    def create_order(
        self,
        user_id: Optional[int],
        customer: Dict,
        items: List[Dict],
        shipping_method: str = "standard",
        status: str = "pending",
        payment_method: Optional[str] = None,
    ) -> Dict:
        """
        customer: snake_case address fields plus name/first_name/last_name and email
        items: raw cart lines as sent by the browser
        Returns the API response for a created order.
        """
        try:
            cart = Cart(items)
        except PricingException as e:
            raise OrderServiceException(str(e))
        if cart.is_empty():
            raise OrderServiceException("Your cart is empty")

        missing = [f for f in REQUIRED_CUSTOMER_FIELDS if not str(customer.get(f) or "").strip()]
        if missing:
            raise OrderServiceException(f"Missing required fields: {', '.join(missing)}")

        try:
            totals = cart.totals(settings.CHECKOUT_TAX_RATE, shipping_method)
        except PricingException as e:
            raise OrderServiceException(str(e))

        name = customer.get("name") or " ".join(
            p for p in (customer.get("first_name"), customer.get("last_name")) if p
        )
        order_ref = self._gen_order_ref()

        try:
            with smart_transaction(self.db):
                user = self.users.get(user_id) if user_id is not None else None
                order = self.orders.add_order(
                    order_ref=order_ref,
                    user_id=user.id if user else None,
                    customer_name=name.strip() or None,
                    email=customer["email"],
                    address=customer["address"],
                    city=customer["city"],
                    state=customer.get("state"),
                    postal_code=customer["postal_code"],
                    country=customer["country"],
                    subtotal=totals.subtotal,
                    tax=totals.tax,
                    shipping=totals.shipping,
                    shipping_method=totals.shipping_method,
                    total=totals.total,
                    status=status or "pending",
                    payment_method=payment_method,
                    order_date=datetime.now(timezone.utc),
                )
                for line in cart.lines:
                    log.debug(f"Inserting item {line['name']!r} with ID {line['product_id']} for order {order.id}")
                    self.orders.add_item(order, line)
                if user:
                    self.users.update_checkout_info(
                        user,
                        customer["address"],
                        customer["city"],
                        customer["postal_code"],
                        customer["country"],
                    )
                order_id = order.id
            if self.db.in_transaction():
                # the block ran as a savepoint inside the caller's transaction
                self.db.commit()
        except Exception as e:
            log.exception("Checkout transaction rolled back")
            raise CheckoutPersistenceError(str(e)) from e

        log.info(f"Created order {order_ref} (id={order_id}) with {len(cart)} item(s), total={totals.total}")
        return {
            "success": True,
            "orderId": order_id,
            "orderReference": order_ref,
            "message": "Order placed successfully",
            "timestamp": int(time.time() * 1000),
            "totals": totals.as_dict(),
        }

    def list_orders(self, user_id: int) -> List[Dict]:
        orders = self.orders.list_for_user(user_id)
        log.info(f"Found {len(orders)} orders for user {user_id}")
        return [order_to_dict(o) for o in orders]


def _format_date(order: Order, out: Dict):
    d = order.order_date
    if d is None:
        out["formattedDate"] = "Date not available"
        out["dateStatus"] = "missing"
        return
    if d.tzinfo is None:
        d = d.replace(tzinfo=timezone.utc)
    out["formattedDate"] = f"{d:%B} {d.day}, {d.year}"
    out["isoDate"] = d.isoformat()
    out["timestamp"] = int(d.timestamp() * 1000)


def order_to_dict(order: Order) -> Dict:
    items = [
        {
            "id": it.id,
            "order_id": it.order_id,
            "product_id": it.product_id,
            "name": it.name,
            "product_name": it.name or "Product",
            "price": float(it.price),
            "quantity": it.quantity or 1,
            "image_url": it.image_url,
            "badge_type": it.badge_type,
            "size": it.size,
        }
        for it in order.items
    ]
    out = {
        "id": order.id,
        "orderId": order.order_ref,
        "orderNumber": order.order_ref or f"Order #{order.id}",
        "userId": order.user_id,
        "first_name": order.user.first_name if order.user else order.customer_name,
        "last_name": order.user.last_name if order.user else None,
        "email": order.email,
        "address": order.address,
        "city": order.city,
        "postal_code": order.postal_code,
        "country": order.country,
        "subtotal": float(order.subtotal),
        "tax": float(order.tax),
        "shipping": float(order.shipping or 0),
        "shippingMethod": order.shipping_method,
        "total": float(order.total),
        "status": order.status,
        "paymentMethod": order.payment_method,
        "items": items,
    }
    _format_date(order, out)
    if items:
        out["description"] = f"{len(items)} item(s): " + ", ".join(
            f"{it['quantity']} × {it['name'] or 'Unknown product'}" for it in items
        )
    else:
        out["description"] = "No items available"
    return out
