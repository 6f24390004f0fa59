from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from . import models, order_service, security
from .db import get_session

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=models.OrderRead, status_code=status.HTTP_201_CREATED)
def create_order(
    order_data: models.OrderCreate,
    current_user: Annotated[models.CurrentUser, Depends(security.get_current_user)],
    session: Session = Depends(get_session),
):
    order = order_service.create_order(
        session, current_user.id, order_data.establishment_id, order_data.items
    )
    return models.OrderRead.from_order(order)


@router.get("", response_model=list[models.OrderRead])
def list_my_orders(
    current_user: Annotated[models.CurrentUser, Depends(security.get_current_user)],
    session: Session = Depends(get_session),
):
    """Orders placed by the current user, newest first."""
    orders = order_service.list_orders(session, customer_id=current_user.id)
    return [models.OrderRead.from_order(order) for order in orders]


@router.patch("/{order_id}/cancel", response_model=models.OrderRead)
def cancel_order(
    order_id: int,
    current_user: Annotated[models.CurrentUser, Depends(security.get_current_user)],
    session: Session = Depends(get_session),
):
    order = order_service.cancel_order(session, order_id, current_user.id)
    return models.OrderRead.from_order(order)


@router.patch("/{order_id}/advance", response_model=models.OrderRead)
def advance_order(
    order_id: int,
    current_user: Annotated[models.CurrentUser, Depends(security.get_current_user)],
    session: Session = Depends(get_session),
):
    """Establishment owner moves the order to its next preparation state."""
    order = order_service.advance_order(session, order_id, current_user.id)
    return models.OrderRead.from_order(order)
