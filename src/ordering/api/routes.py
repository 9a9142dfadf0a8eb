"""FastAPI routes for the Ordering domain: cart and orders."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddToCartRequest,
    CartResponse,
    CashOnDeliveryResponse,
    CancelOrderRequest,
    CheckoutRequest,
    CheckoutResponse,
    ExpirePendingOrdersRequest,
    ExpirePendingOrdersResponse,
    OrderIdResponse,
    SyncCartRequest,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
    VerifyPaymentRequest,
)
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartItem
from ordering.cart.management import ClearCart, SyncGuestCart, cart_view
from ordering.order.cancellation import CancelOrder
from ordering.order.checkout import InitiateCheckout, PlaceCashOnDeliveryOrder
from ordering.order.expiry import ExpirePendingOrders
from ordering.order.fulfillment import UpdateOrderStatus
from ordering.order.payment import verify_payment
from ordering.order.queries import all_orders, order_for, order_stats, orders_for_customer, track_order
from shared.identity import Actor, current_actor, require_admin

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(actor: Actor = Depends(current_actor)) -> CartResponse:
    return CartResponse(**cart_view(actor.user_id))


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: AddToCartRequest, actor: Actor = Depends(current_actor)) -> CartResponse:
    command = AddToCart(
        customer_id=actor.user_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return CartResponse(**cart_view(actor.user_id))


@cart_router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str, body: UpdateCartItemRequest, actor: Actor = Depends(current_actor)
) -> CartResponse:
    command = UpdateCartItem(
        customer_id=actor.user_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return CartResponse(**cart_view(actor.user_id))


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(product_id: str, actor: Actor = Depends(current_actor)) -> CartResponse:
    command = RemoveFromCart(
        customer_id=actor.user_id,
        product_id=product_id,
    )
    current_domain.process(command, asynchronous=False)
    return CartResponse(**cart_view(actor.user_id))


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(actor: Actor = Depends(current_actor)) -> CartResponse:
    current_domain.process(ClearCart(customer_id=actor.user_id), asynchronous=False)
    return CartResponse(**cart_view(actor.user_id))


@cart_router.post("/sync", response_model=CartResponse)
async def sync_cart(body: SyncCartRequest, actor: Actor = Depends(current_actor)) -> CartResponse:
    command = SyncGuestCart(
        customer_id=actor.user_id,
        items=json.dumps([item.model_dump() for item in body.items]),
    )
    current_domain.process(command, asynchronous=False)
    return CartResponse(**cart_view(actor.user_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("/checkout", status_code=201, response_model=CheckoutResponse)
async def checkout(body: CheckoutRequest, actor: Actor = Depends(current_actor)) -> CheckoutResponse:
    command = InitiateCheckout(
        customer_id=actor.user_id,
        shipping_address=body.shipping_address.model_dump_json(),
    )
    result = current_domain.process(command, asynchronous=False)
    return CheckoutResponse(**result)


@order_router.post("/cod", status_code=201, response_model=CashOnDeliveryResponse)
async def place_cod_order(body: CheckoutRequest, actor: Actor = Depends(current_actor)) -> CashOnDeliveryResponse:
    command = PlaceCashOnDeliveryOrder(
        customer_id=actor.user_id,
        shipping_address=body.shipping_address.model_dump_json(),
    )
    result = current_domain.process(command, asynchronous=False)
    return CashOnDeliveryResponse(**result)


@order_router.get("/mine")
async def my_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    actor: Actor = Depends(current_actor),
) -> dict:
    return orders_for_customer(actor.user_id, page=page, limit=limit)


@order_router.get("/track/{order_number}")
async def track(order_number: str) -> dict:
    """Public tracking lookup: status timeline only, no pricing or address."""
    return track_order(order_number)


@order_router.get("/admin/all")
async def list_all_orders(
    status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    admin: Actor = Depends(require_admin),  # noqa: ARG001
) -> dict:
    return all_orders(status=status, page=page, limit=limit)


@order_router.get("/admin/stats")
async def stats(admin: Actor = Depends(require_admin)) -> dict:  # noqa: ARG001
    return order_stats()


@order_router.put("/admin/{order_id}/status", response_model=OrderIdResponse)
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, admin: Actor = Depends(require_admin)
) -> OrderIdResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        note=body.note,
        updated_by=admin.user_id,
        tracking_number=body.tracking_number,
        carrier=body.carrier,
    )
    current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=order_id)


@order_router.post("/admin/maintenance/expire-pending", response_model=ExpirePendingOrdersResponse)
async def expire_pending_orders(
    body: ExpirePendingOrdersRequest | None = None,
    admin: Actor = Depends(require_admin),  # noqa: ARG001
) -> ExpirePendingOrdersResponse:
    body = body or ExpirePendingOrdersRequest()
    command = ExpirePendingOrders(ttl_minutes=body.ttl_minutes, as_of=body.as_of)
    expired_count = current_domain.process(command, asynchronous=False)
    return ExpirePendingOrdersResponse(expired_count=expired_count)


@order_router.post("/{order_id}/verify-payment")
async def verify_order_payment(
    order_id: str, body: VerifyPaymentRequest, actor: Actor = Depends(current_actor)
) -> dict:
    order = verify_payment(
        order_id=order_id,
        customer_id=actor.user_id,
        razorpay_order_id=body.razorpay_order_id,
        razorpay_payment_id=body.razorpay_payment_id,
        razorpay_signature=body.razorpay_signature,
    )
    return order.to_dict_view()


@order_router.get("/{order_id}")
async def get_order(order_id: str, actor: Actor = Depends(current_actor)) -> dict:
    return order_for(order_id, actor).to_dict_view()


@order_router.put("/{order_id}/cancel", response_model=OrderIdResponse)
async def cancel_order(
    order_id: str, body: CancelOrderRequest | None = None, actor: Actor = Depends(current_actor)
) -> OrderIdResponse:
    command = CancelOrder(
        order_id=order_id,
        requested_by=actor.user_id,
        by_admin=actor.is_admin,
        reason=body.reason if body else None,
    )
    current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=order_id)
