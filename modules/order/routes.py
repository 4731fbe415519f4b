"""
Order Routes
==============
Checkout from the basket and the last-order lookup for the thank-you page.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from common.exceptions import ContactValidationError, EmptyBasketError, raise_http
from modules.basket.deps import get_order_service
from modules.order.service import OrderService, order_to_dict
from modules.order.models import ContactInfo

router = APIRouter(tags=["order"])


class CheckoutRequest(BaseModel):
    full_name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    notes: str = ""


@router.post("/api/checkout", status_code=status.HTTP_201_CREATED)
async def checkout(body: CheckoutRequest, orders: OrderService = Depends(get_order_service)):
    contact = ContactInfo(
        full_name=body.full_name,
        phone=body.phone,
        email=body.email,
        address=body.address,
        notes=body.notes,
    )
    try:
        order = orders.checkout(contact)
    except EmptyBasketError as e:
        raise_http(e, 400)
    except ContactValidationError as e:
        raise_http(e, 422)
    return order_to_dict(order)


@router.get("/api/orders/last")
async def last_order(orders: OrderService = Depends(get_order_service)):
    order = orders.get_last_order()
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="לא נמצאה הזמנה")
    return order_to_dict(order)
