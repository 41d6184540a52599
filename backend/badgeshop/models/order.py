from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship

from badgeshop.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Order(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True, autoincrement=True)
    order_ref = Column("orderId", String(40), unique=True, nullable=False, index=True)
    user_id = Column("userId", Integer, ForeignKey("users.id"), nullable=True, index=True)
    customer_name = Column("first_name", String(200), nullable=True)
    email = Column(String(255), nullable=False)
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    tax = Column(Numeric(10, 2), nullable=False, default=0)
    shipping = Column(Numeric(10, 2), nullable=False, default=0)
    shipping_method = Column(String(32), nullable=True)
    total = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String(32), nullable=False, default="pending")
    payment_method = Column(String(32), nullable=True)
    order_date = Column("orderDate", DateTime, default=_utcnow, nullable=True)

    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id"
    )
    user = relationship("User", back_populates="orders")


class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String(64), nullable=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=True, default=1)
    image_url = Column(String(1024), nullable=True)
    badge_type = Column(String(64), nullable=True)
    size = Column(String(64), nullable=True)

    order = relationship("Order", back_populates="items")
