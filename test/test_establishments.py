"""
Establishment service: ownership-gated updates and soft deactivation.
"""

import pytest

from marketplace import establishment_service
from marketplace.errors import InvalidInput, NotFound, PermissionDenied
from marketplace.models import EstablishmentCreate, EstablishmentUpdate

from conftest import OWNER_A, OWNER_B


def test_create_establishment_is_active(session):
    establishment = establishment_service.create_establishment(
        session, OWNER_A, EstablishmentCreate(name="Cafe Central", address="Main St 1")
    )

    assert establishment.id is not None
    assert establishment.owner_id == OWNER_A
    assert establishment.active is True


def test_create_establishment_requires_name(session):
    with pytest.raises(InvalidInput):
        establishment_service.create_establishment(
            session, OWNER_A, EstablishmentCreate(name="  ", address="Main St 1")
        )


def test_owner_can_update_establishment(session, make_establishment):
    establishment = make_establishment(OWNER_A)

    updated = establishment_service.update_establishment(
        session, establishment.id, OWNER_A, EstablishmentUpdate(name="Cafe Nuevo")
    )

    assert updated.name == "Cafe Nuevo"
    assert updated.address == "Main St 1"  # untouched


def test_non_owner_update_is_denied_and_record_unchanged(session, make_establishment):
    establishment = make_establishment(OWNER_A)

    with pytest.raises(PermissionDenied):
        establishment_service.update_establishment(
            session, establishment.id, OWNER_B, EstablishmentUpdate(name="Hijacked")
        )

    session.expire_all()
    reloaded = establishment_service.get_establishment(session, establishment.id)
    assert reloaded.name == "Cafe Central"


def test_update_missing_establishment(session):
    with pytest.raises(NotFound):
        establishment_service.update_establishment(
            session, 999, OWNER_A, EstablishmentUpdate(name="Nothing")
        )


def test_non_owner_cannot_deactivate(session, make_establishment):
    establishment = make_establishment(OWNER_A)

    with pytest.raises(PermissionDenied):
        establishment_service.deactivate_establishment(session, establishment.id, OWNER_B)

    session.expire_all()
    assert establishment_service.get_establishment(session, establishment.id).active is True


def test_deactivate_hides_from_listing_but_keeps_products(session, make_establishment, make_product):
    establishment = make_establishment(OWNER_A)
    other = make_establishment(OWNER_B, name="Other Place")
    make_product(establishment, "Coffee")
    make_product(establishment, "Tea", 500)

    establishment_service.deactivate_establishment(session, establishment.id, OWNER_A)

    listed_ids = {e.id for e in establishment_service.list_establishments(session)}
    assert listed_ids == {other.id}

    found = establishment_service.get_establishment(session, establishment.id)
    assert found is not None
    assert found.active is False
    assert sorted(p.name for p in found.products) == ["Coffee", "Tea"]


def test_get_missing_establishment_returns_none(session):
    assert establishment_service.get_establishment(session, 42) is None
