from sqlalchemy import JSON, Column, Float, Numeric, String, Text
from badgeshop.db import Base

class Product(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True)
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    image = Column(String(512), nullable=True)
    colors = Column(JSON, nullable=True)
    sizes = Column(JSON, nullable=True)
    rating = Column(Float, nullable=True)
    badge_type = Column(String(64), nullable=True)

    def __repr__(self):
        return f"<Product id={self.id} name={self.name}>"
