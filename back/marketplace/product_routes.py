from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlmodel import Session

from . import models, product_service, security
from .db import get_session

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[models.ProductRead])
def list_products(
    establishment_id: int | None = Query(None, description="Establishment whose products to list"),
    session: Session = Depends(get_session),
):
    if establishment_id is None:
        raise HTTPException(status_code=400, detail="establishment_id is required")
    return product_service.list_products_by_establishment(session, establishment_id)


@router.get("/{product_id}", response_model=models.ProductReadWithEstablishment)
def get_product(product_id: int, session: Session = Depends(get_session)):
    product = product_service.get_product(session, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return models.ProductReadWithEstablishment.from_product(product)


@router.post("", response_model=models.ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(
    data: models.ProductCreate,
    current_user: Annotated[models.CurrentUser, Depends(security.get_current_user)],
    session: Session = Depends(get_session),
):
    return product_service.create_product(session, data, current_user.id)


@router.put("/{product_id}", response_model=models.ProductRead)
def update_product(
    product_id: int,
    data: models.ProductUpdate,
    current_user: Annotated[models.CurrentUser, Depends(security.get_current_user)],
    session: Session = Depends(get_session),
):
    return product_service.update_product(session, product_id, current_user.id, data)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    current_user: Annotated[models.CurrentUser, Depends(security.get_current_user)],
    session: Session = Depends(get_session),
) -> Response:
    product_service.delete_product(session, product_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
