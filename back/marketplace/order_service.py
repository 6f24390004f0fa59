"""
Order Service

Business logic for orders:
- Transactional creation with point-in-time price snapshots
- Customer cancellation (pending orders only)
- Establishment-side status progression
- Listing, newest first
"""

import logging

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from .errors import InvalidInput, InvalidItem, InvalidTransition, NotFound
from .events import publish_order_update
from .models import Order, OrderItem, OrderItemCreate, OrderStatus, Product, utcnow
from .permissions import ensure_owner, get_owned_establishment
from .settings import settings
from .transactions import run_in_transaction

logger = logging.getLogger(__name__)

# Establishment-side progression; cancellation is handled separately
NEXT_STATUS = {
    OrderStatus.pending: OrderStatus.in_preparation,
    OrderStatus.in_preparation: OrderStatus.completed,
}

MAX_QUANTITY = 10_000


def _order_event(event_type: str, order: Order) -> dict:
    return {
        "type": event_type,
        "order_id": order.id,
        "establishment_id": order.establishment_id,
        "status": order.status.value,
        "total_cents": order.total_cents,
        "created_at": order.created_at.isoformat(),
    }


def _load_order(session: Session, order_id: int) -> Order:
    statement = (
        select(Order)
        .where(Order.id == order_id)
        .options(selectinload(Order.items), selectinload(Order.establishment))
    )
    order = session.exec(statement).first()
    if not order:
        raise NotFound("Order not found")
    return order


def create_order(
    session: Session,
    customer_id: int,
    establishment_id: int,
    items: list[OrderItemCreate],
) -> Order:
    """
    Create an order and its items in a single transaction.

    Each line captures the product's current price; the order total is the
    sum of those snapshots. Any invalid line aborts the whole order.
    """
    if not items:
        raise InvalidInput("Order must have at least one item")
    for item in items:
        if item.quantity <= 0:
            raise InvalidInput(f"Quantity for product {item.product_id} must be positive")
        if item.quantity > MAX_QUANTITY:
            raise InvalidInput(f"Quantity for product {item.product_id} must not exceed {MAX_QUANTITY}")

    def work() -> Order:
        total_cents = 0
        lines: list[OrderItem] = []

        for item in items:
            product = session.get(Product, item.product_id)
            if not product or product.establishment_id != establishment_id:
                raise InvalidItem(item.product_id)

            total_cents += product.price_cents * item.quantity
            lines.append(
                OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=item.quantity,
                    unit_price_cents=product.price_cents,
                )
            )

        order = Order(
            customer_id=customer_id,
            establishment_id=establishment_id,
            total_cents=total_cents,
            status=OrderStatus.pending,
        )
        session.add(order)
        session.flush()  # Flush to get the ID

        for line in lines:
            line.order_id = order.id
            session.add(line)
        return order

    order = run_in_transaction(
        session, work, isolation_level=settings.order_isolation_level
    )
    session.refresh(order)
    logger.info(
        f"Order #{order.id} created by customer {customer_id} "
        f"at establishment {establishment_id}: {len(items)} items, total {order.total_cents}"
    )

    publish_order_update(establishment_id, customer_id, _order_event("order_created", order))
    return order


def cancel_order(session: Session, order_id: int, customer_id: int) -> Order:
    """Cancel a pending order on behalf of the customer who placed it."""
    order = _load_order(session, order_id)

    ensure_owner(
        customer_id, order.customer_id,
        "Permission denied. You can only cancel your own orders.",
    )

    if order.status != OrderStatus.pending:
        raise InvalidTransition(
            "Cannot cancel an order that is already in preparation, completed or cancelled.",
            current_status=order.status.value,
        )

    order.status = OrderStatus.cancelled
    order.cancelled_at = utcnow()
    session.add(order)
    session.commit()
    session.refresh(order)
    logger.info(f"Order #{order.id} cancelled by customer {customer_id}")

    publish_order_update(order.establishment_id, order.customer_id, _order_event("order_cancelled", order))
    return order


def advance_order(session: Session, order_id: int, owner_id: int) -> Order:
    """Move an order one step along pending -> in_preparation -> completed."""
    order = _load_order(session, order_id)

    ensure_owner(
        owner_id, order.establishment.owner_id,
        "Permission denied. Only the establishment owner can update this order.",
    )

    next_status = NEXT_STATUS.get(order.status)
    if next_status is None:
        raise InvalidTransition(
            f"Order in status '{order.status.value}' cannot be advanced.",
            current_status=order.status.value,
        )

    previous = order.status
    order.status = next_status
    session.add(order)
    session.commit()
    session.refresh(order)
    logger.info(f"Order #{order.id} moved from {previous.value} to {next_status.value}")

    publish_order_update(order.establishment_id, order.customer_id, _order_event("order_status_changed", order))
    return order


def list_orders(
    session: Session,
    establishment_id: int | None = None,
    customer_id: int | None = None,
) -> list[Order]:
    statement = (
        select(Order)
        .options(selectinload(Order.items), selectinload(Order.establishment))
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    if establishment_id is not None:
        statement = statement.where(Order.establishment_id == establishment_id)
    if customer_id is not None:
        statement = statement.where(Order.customer_id == customer_id)
    return list(session.exec(statement).all())


def list_establishment_orders(
    session: Session,
    establishment_id: int,
    owner_id: int,
) -> list[Order]:
    get_owned_establishment(
        session, establishment_id, owner_id,
        "Permission denied. Only the owner can list this establishment's orders.",
    )
    return list_orders(session, establishment_id=establishment_id)
