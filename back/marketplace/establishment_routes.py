from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from . import establishment_service, models, order_service, security
from .db import get_session

router = APIRouter(prefix="/establishments", tags=["establishments"])


# ============ PUBLIC ============

@router.get("", response_model=list[models.EstablishmentRead])
def list_establishments(session: Session = Depends(get_session)):
    """List active establishments."""
    return establishment_service.list_establishments(session)


@router.get("/{establishment_id}", response_model=models.EstablishmentReadWithProducts)
def get_establishment(establishment_id: int, session: Session = Depends(get_session)):
    establishment = establishment_service.get_establishment(session, establishment_id)
    if not establishment:
        raise HTTPException(status_code=404, detail="Establishment not found")
    return models.EstablishmentReadWithProducts.model_validate(establishment, from_attributes=True)


# ============ OWNER (Protected) ============

@router.post("", response_model=models.EstablishmentRead, status_code=status.HTTP_201_CREATED)
def create_establishment(
    data: models.EstablishmentCreate,
    current_user: Annotated[models.CurrentUser, Depends(security.get_current_user)],
    session: Session = Depends(get_session),
):
    return establishment_service.create_establishment(session, current_user.id, data)


@router.put("/{establishment_id}", response_model=models.EstablishmentRead)
def update_establishment(
    establishment_id: int,
    data: models.EstablishmentUpdate,
    current_user: Annotated[models.CurrentUser, Depends(security.get_current_user)],
    session: Session = Depends(get_session),
):
    return establishment_service.update_establishment(session, establishment_id, current_user.id, data)


@router.delete("/{establishment_id}", response_model=models.EstablishmentRead)
def deactivate_establishment(
    establishment_id: int,
    current_user: Annotated[models.CurrentUser, Depends(security.get_current_user)],
    session: Session = Depends(get_session),
):
    """Soft delete: the establishment stays readable by id but leaves the listing."""
    return establishment_service.deactivate_establishment(session, establishment_id, current_user.id)


@router.get("/{establishment_id}/orders", response_model=list[models.OrderRead])
def list_establishment_orders(
    establishment_id: int,
    current_user: Annotated[models.CurrentUser, Depends(security.get_current_user)],
    session: Session = Depends(get_session),
):
    orders = order_service.list_establishment_orders(session, establishment_id, current_user.id)
    return [models.OrderRead.from_order(order) for order in orders]
