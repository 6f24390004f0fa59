"""
Establishment Service

Business logic for establishments:
- Creation by any authenticated user
- Owner-only updates
- Soft deactivation (products and orders are kept)
"""

import logging

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from .errors import InvalidInput
from .models import Establishment, EstablishmentCreate, EstablishmentUpdate, utcnow
from .permissions import get_owned_establishment

logger = logging.getLogger(__name__)


def _require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise InvalidInput(f"{field} is required")
    return value.strip()


def create_establishment(
    session: Session,
    owner_id: int,
    data: EstablishmentCreate,
) -> Establishment:
    establishment = Establishment(
        owner_id=owner_id,
        name=_require_text(data.name, "name"),
        address=_require_text(data.address, "address"),
    )
    session.add(establishment)
    session.commit()
    session.refresh(establishment)
    logger.info(f"Establishment #{establishment.id} created by user {owner_id}")
    return establishment


def update_establishment(
    session: Session,
    establishment_id: int,
    owner_id: int,
    data: EstablishmentUpdate,
) -> Establishment:
    """Merge the provided fields into an establishment owned by `owner_id`."""
    establishment = get_owned_establishment(
        session, establishment_id, owner_id,
        "Permission denied. You are not the owner of this establishment.",
    )

    if data.name is not None:
        establishment.name = _require_text(data.name, "name")
    if data.address is not None:
        establishment.address = _require_text(data.address, "address")
    establishment.updated_at = utcnow()

    session.add(establishment)
    session.commit()
    session.refresh(establishment)
    return establishment


def deactivate_establishment(
    session: Session,
    establishment_id: int,
    owner_id: int,
) -> Establishment:
    establishment = get_owned_establishment(
        session, establishment_id, owner_id,
        "Permission denied. Only the owner can deactivate this establishment.",
    )

    establishment.active = False
    establishment.updated_at = utcnow()
    session.add(establishment)
    session.commit()
    session.refresh(establishment)
    logger.info(f"Establishment #{establishment.id} deactivated by user {owner_id}")
    return establishment


def get_establishment(session: Session, establishment_id: int) -> Establishment | None:
    """Return the establishment with its products, active or not."""
    statement = (
        select(Establishment)
        .where(Establishment.id == establishment_id)
        .options(selectinload(Establishment.products))
    )
    return session.exec(statement).first()


def list_establishments(session: Session) -> list[Establishment]:
    statement = (
        select(Establishment)
        .where(Establishment.active == True)  # noqa: E712
        .order_by(Establishment.id)
    )
    return list(session.exec(statement).all())
