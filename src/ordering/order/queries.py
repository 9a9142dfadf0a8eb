"""Read-side queries over orders: buyer history, tracking and admin views."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.order.order import Order, OrderStatus, PaymentStatus
from shared.errors import NotFound, Unauthorized
from shared.pagination import paginate

RECENT_ORDERS_LIMIT = 10


def orders_for_customer(customer_id, page=1, limit=10) -> dict:
    orders = current_domain.repository_for(Order).for_customer(customer_id)
    result = paginate(orders, page, limit)
    result["items"] = [order.to_dict_view() for order in result["items"]]
    return result


def order_for(order_id, actor) -> Order:
    """An order readable by ``actor``: its owner or an admin."""
    try:
        order = current_domain.repository_for(Order).get(str(order_id))
    except ObjectNotFoundError as exc:
        raise NotFound("Order not found") from exc

    if not actor.can_act_for(order.customer_id):
        raise Unauthorized("Not authorized to access this order")
    return order


def track_order(order_number) -> dict:
    order = current_domain.repository_for(Order).find_by_order_number(order_number)
    if order is None:
        raise NotFound("Order not found")
    return order.tracking_view()


def all_orders(status=None, page=1, limit=20) -> dict:
    orders = current_domain.repository_for(Order).all_orders(status=status)
    result = paginate(orders, page, limit)
    result["items"] = [order.to_dict_view() for order in result["items"]]
    return result


def order_stats() -> dict:
    """Counts per status, revenue from completed payments and the latest orders."""
    orders = current_domain.repository_for(Order).all_orders()

    by_status = {status.value: 0 for status in OrderStatus}
    revenue = 0.0
    for order in orders:
        by_status[order.status] = by_status.get(order.status, 0) + 1
        if order.payment and order.payment.status == PaymentStatus.COMPLETED.value:
            revenue += order.pricing.total or 0.0

    return {
        "total_orders": len(orders),
        "by_status": by_status,
        "total_revenue": round(revenue, 2),
        "recent_orders": [
            {
                "order_id": str(order.id),
                "order_number": order.order_number,
                "customer_id": str(order.customer_id),
                "status": order.status,
                "total": order.pricing.total,
                "created_at": order.created_at,
            }
            for order in orders[:RECENT_ORDERS_LIMIT]
        ],
    }
