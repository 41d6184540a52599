from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from badgeshop.db import get_db
from badgeshop.services.order_service import OrderService

router = APIRouter(tags=["orders"])


@router.get("/orders", summary="Orders of a user, newest first")
def list_orders(userId: Optional[str] = Query(None), db: Session = Depends(get_db)):
    if not userId:
        raise HTTPException(status_code=400, detail="User ID is required")
    try:
        user_id = int(userId)
    except ValueError:
        raise HTTPException(status_code=400, detail="User ID must be a number")
    return OrderService(db).list_orders(user_id)
