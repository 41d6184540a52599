from typing import Dict, List

from sqlalchemy.orm import Session, selectinload

from badgeshop.models.order import Order, OrderItem


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, **fields) -> Order:
        order = Order(**fields)
        self.db.add(order)
        # flush so the autoincrement id is available for the item rows
        self.db.flush()
        return order

    def add_item(self, order: Order, line: Dict) -> OrderItem:
        item = OrderItem(
            order_id=order.id,
            product_id=line.get("product_id"),
            name=line["name"],
            price=line["price"],
            quantity=line["quantity"],
            image_url=line.get("image_url"),
            badge_type=line.get("badge_type"),
            size=line.get("size"),
        )
        self.db.add(item)
        self.db.flush()
        return item

    def list_for_user(self, user_id: int) -> List[Order]:
        return (
            self.db.query(Order)
            .options(selectinload(Order.items), selectinload(Order.user))
            .filter(Order.user_id == user_id)
            .order_by(Order.order_date.desc(), Order.id.desc())
            .all()
        )
