from sqlmodel import Session

from .errors import NotFound, PermissionDenied
from .models import Establishment


def ensure_owner(actor_id: int, owner_id: int, message: str = "Permission denied") -> None:
    """Raise PermissionDenied unless the acting user is the recorded owner."""
    if actor_id != owner_id:
        raise PermissionDenied(message)


def get_owned_establishment(
    session: Session,
    establishment_id: int,
    actor_id: int,
    message: str = "Permission denied. You are not the owner of this establishment.",
) -> Establishment:
    """Load an establishment and check the actor owns it."""
    establishment = session.get(Establishment, establishment_id)
    if not establishment:
        raise NotFound("Establishment not found")
    ensure_owner(actor_id, establishment.owner_id, message)
    return establishment
