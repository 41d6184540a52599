from decimal import Decimal
from typing import List, Optional, Tuple

from badgeshop.models.product import Product
from sqlalchemy import func
from sqlalchemy.orm import Session


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: str) -> Optional[Product]:
        return self.db.get(Product, str(product_id))

    def list(
        self, q: Optional[str] = None, page: int = 1, size: int = 20
    ) -> Tuple[List[Product], int]:
        query = self.db.query(Product)
        if q:
            like = f"%{q}%"
            query = query.filter(
                (Product.name.ilike(like)) | (Product.description.ilike(like))
            )
        total = query.with_entities(func.count()).scalar() or 0
        items = query.order_by(Product.id).offset((page - 1) * size).limit(size).all()
        return items, total

    def create_or_update(
        self,
        id: str,
        name: str,
        price,
        description: str = None,
        image: str = None,
        colors: list = None,
        sizes: list = None,
        rating: float = None,
        badge_type: str = None,
    ):
        p = self.get(id)
        if p is None:
            p = Product(id=str(id))
            self.db.add(p)
        p.name = name
        p.price = Decimal(str(price))
        p.description = description
        p.image = image
        p.colors = colors or []
        p.sizes = sizes or []
        p.rating = rating
        p.badge_type = badge_type
        self.db.flush()
        return p
