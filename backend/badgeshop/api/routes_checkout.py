from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from badgeshop.api.deps import user_id_from_request
from badgeshop.db import get_db
from badgeshop.schemas.checkout_schema import CartQuoteIn, CheckoutIn
from badgeshop.services.cart_service import CartService
from badgeshop.services.order_service import CheckoutPersistenceError, OrderService, OrderServiceException
from badgeshop.services.pricing import PricingException

router = APIRouter(tags=["checkout"])


@router.post("/checkout", status_code=status.HTTP_201_CREATED, summary="Place an order from the cart")
def checkout(payload: CheckoutIn, request: Request, db: Session = Depends(get_db)):
    user_id = user_id_from_request(request, payload.customer.user_id)
    svc = OrderService(db)
    try:
        resp = svc.create_order(
            user_id,
            payload.customer.model_dump(),
            payload.items,
            shipping_method=payload.order_info.shipping_method,
            status=payload.order_info.status,
            payment_method=payload.order_info.payment_method,
        )
    except OrderServiceException as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CheckoutPersistenceError as e:
        raise HTTPException(status_code=500, detail=f"Database error: {e}")
    return resp


@router.post("/cart/quote", summary="Price a cart without placing an order")
def quote_cart(payload: CartQuoteIn):
    try:
        return CartService().quote(payload.items, payload.shipping_method, payload.postal_code)
    except PricingException as e:
        raise HTTPException(status_code=400, detail=str(e))
