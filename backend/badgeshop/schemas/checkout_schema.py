from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from badgeshop.schemas.auth_schema import CamelModel


class CustomerIn(CamelModel):
    user_id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class OrderInfoIn(CamelModel):
    shipping_method: str = "standard"
    status: str = "pending"
    payment_method: Optional[str] = None


class CheckoutIn(CamelModel):
    customer: CustomerIn = Field(default_factory=CustomerIn)
    order_info: OrderInfoIn = Field(default_factory=OrderInfoIn)
    # raw browser cart lines, normalized by the cart service
    items: List[Dict[str, Any]] = []


class CartQuoteIn(CamelModel):
    items: List[Dict[str, Any]] = []
    shipping_method: str = "standard"
    postal_code: Optional[str] = None
