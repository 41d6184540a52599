from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)
    id: str
    name: str
    description: Optional[str] = None
    price: float
    image: Optional[str] = None
    colors: List[str] = []
    sizes: List[str] = []
    rating: Optional[float] = None
    badge_type: Optional[str] = None
