"""
Basket Module - Dependencies
=============================
FastAPI dependencies handing out the application's basket store and order
service. Both are created once in the app lifespan and kept on app.state.
"""

from fastapi import Request, HTTPException, status

from modules.basket.service import BasketStore
from modules.order.service import OrderService


def get_basket_store(request: Request) -> BasketStore:
    store = getattr(request.app.state, "basket_store", None)
    if store is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="basket_unavailable")
    return store


def get_order_service(request: Request) -> OrderService:
    service = getattr(request.app.state, "order_service", None)
    if service is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="orders_unavailable")
    return service
