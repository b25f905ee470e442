"""
Order and deposit endpoints.

``POST /order`` buys engagement, ``POST /deposit`` tops up a wallet and
``GET /orders`` lists the order history.  Handlers are plain functions
so FastAPI runs them in its thread pool; the wallet's write lock, not
the event loop, is what serializes balance changes.  Failures are
rendered by the application's error handlers as
``{"success": false, "error": ...}``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Request

from fameflow_api.app.api.deps import client_ip, get_order_service
from fameflow_api.app.schemas.order import DepositCreate, OrderCreate, OrderRead, OrderReceipt
from fameflow_api.app.services.order_service import OrderService


router = APIRouter()


@router.post("/order", response_model=OrderReceipt)
def place_order(
    order: OrderCreate,
    request: Request,
    service: OrderService = Depends(get_order_service),
) -> OrderReceipt:
    """Place a purchase order.

    The body carries the service ``type``, either ``amount`` (quantity)
    or ``budget``, the target handle or link and optionally ``userId``.
    With a user the price is debited from the wallet; a wallet that
    cannot cover it rejects the order with ``INSUFFICIENT_FUNDS`` and
    nothing is recorded.  Without a user the order is a guest checkout.
    """
    return service.place_order(order, ip_address=client_ip(request))


@router.post("/deposit", response_model=OrderReceipt)
def deposit(
    body: DepositCreate,
    request: Request,
    service: OrderService = Depends(get_order_service),
) -> OrderReceipt:
    """Record a deposit and credit the user's wallet.

    Payment is confirmed manually by the customer in the storefront;
    there is no gateway callback.
    """
    return service.deposit(body, ip_address=client_ip(request))


@router.get("/orders", response_model=List[OrderRead])
def list_orders(
    user_id: Optional[int] = Query(None, alias="userId", description="Only orders of this user"),
    service: OrderService = Depends(get_order_service),
) -> List[OrderRead]:
    """List orders, newest first."""
    return service.list_orders(user_id)


@router.get("/orders/{order_id}", response_model=OrderRead)
def get_order(
    order_id: str = Path(..., description="Order id, e.g. ORD-3F2A9C0D11B24E7A"),
    service: OrderService = Depends(get_order_service),
) -> OrderRead:
    return service.get_order(order_id)
