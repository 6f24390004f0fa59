"""
Product service: ownership resolved through the parent establishment.
"""

import pytest

from marketplace import product_service
from marketplace.errors import InvalidInput, NotFound, PermissionDenied
from marketplace.models import ProductCreate, ProductUpdate

from conftest import OWNER_A, OWNER_B


def test_owner_creates_product(session, make_establishment):
    establishment = make_establishment(OWNER_A)

    product = product_service.create_product(
        session,
        ProductCreate(name="Coffee", price_cents=1000, establishment_id=establishment.id),
        OWNER_A,
    )

    assert product.id is not None
    assert product.price_cents == 1000
    assert product.establishment_id == establishment.id


def test_create_product_checks_establishment_ownership(session, make_establishment):
    establishment = make_establishment(OWNER_A)

    with pytest.raises(PermissionDenied):
        product_service.create_product(
            session,
            ProductCreate(name="Coffee", price_cents=1000, establishment_id=establishment.id),
            OWNER_B,
        )
    assert product_service.list_products_by_establishment(session, establishment.id) == []


def test_create_product_in_missing_establishment(session):
    with pytest.raises(NotFound):
        product_service.create_product(
            session, ProductCreate(name="Coffee", price_cents=1000, establishment_id=77), OWNER_A
        )


@pytest.mark.parametrize(
    "data",
    [
        ProductCreate(price_cents=1000, establishment_id=1),
        ProductCreate(name="Coffee", establishment_id=1),
        ProductCreate(name="Coffee", price_cents=1000),
        ProductCreate(name="Coffee", price_cents=-1, establishment_id=1),
        ProductCreate(name="Coffee", price_cents=product_service.MAX_PRICE_CENTS + 1, establishment_id=1),
    ],
)
def test_create_product_validates_required_fields(session, make_establishment, data):
    make_establishment(OWNER_A)

    with pytest.raises(InvalidInput):
        product_service.create_product(session, data, OWNER_A)


def test_update_product_partial(session, make_establishment, make_product):
    product = make_product(make_establishment(OWNER_A), "Coffee", 1000)

    updated = product_service.update_product(
        session, product.id, OWNER_A, ProductUpdate(price_cents=1200)
    )

    assert updated.price_cents == 1200
    assert updated.name == "Coffee"


def test_update_product_clears_description_on_explicit_null(session, make_establishment, make_product):
    product = make_product(make_establishment(OWNER_A), "Coffee", 1000)
    product_service.update_product(
        session, product.id, OWNER_A, ProductUpdate(description="Single origin")
    )

    kept = product_service.update_product(session, product.id, OWNER_A, ProductUpdate(name="Espresso"))
    assert kept.description == "Single origin"

    cleared = product_service.update_product(session, product.id, OWNER_A, ProductUpdate(description=None))
    assert cleared.description is None
    assert cleared.name == "Espresso"
    assert cleared.price_cents == 1000


@pytest.mark.parametrize(
    "data",
    [
        ProductUpdate(price_cents=None),
        ProductUpdate(name=None),
        ProductUpdate(name="  "),
        ProductUpdate(price_cents=product_service.MAX_PRICE_CENTS + 1),
    ],
)
def test_update_product_rejects_invalid_values(session, make_establishment, make_product, data):
    product = make_product(make_establishment(OWNER_A), "Coffee", 1000)

    with pytest.raises(InvalidInput):
        product_service.update_product(session, product.id, OWNER_A, data)

    session.expire_all()
    assert product_service.get_product(session, product.id).price_cents == 1000


def test_update_product_by_non_owner_is_denied(session, make_establishment, make_product):
    product = make_product(make_establishment(OWNER_A), "Coffee", 1000)

    with pytest.raises(PermissionDenied):
        product_service.update_product(session, product.id, OWNER_B, ProductUpdate(price_cents=1))

    session.expire_all()
    assert product_service.get_product(session, product.id).price_cents == 1000


def test_update_missing_product(session):
    with pytest.raises(NotFound):
        product_service.update_product(session, 5, OWNER_A, ProductUpdate(name="x"))


def test_ownership_follows_establishment_owner(session, make_establishment, make_product):
    establishment = make_establishment(OWNER_A)
    product = make_product(establishment, "Coffee", 1000)

    establishment.owner_id = OWNER_B
    session.add(establishment)
    session.commit()

    with pytest.raises(PermissionDenied):
        product_service.update_product(session, product.id, OWNER_A, ProductUpdate(name="Mine"))

    updated = product_service.update_product(session, product.id, OWNER_B, ProductUpdate(name="Ours"))
    assert updated.name == "Ours"


def test_delete_product(session, make_establishment, make_product):
    product = make_product(make_establishment(OWNER_A))

    with pytest.raises(PermissionDenied):
        product_service.delete_product(session, product.id, OWNER_B)

    product_service.delete_product(session, product.id, OWNER_A)

    assert product_service.get_product(session, product.id) is None
    with pytest.raises(NotFound):
        product_service.delete_product(session, product.id, OWNER_A)


def test_get_product_includes_establishment_name(session, make_establishment, make_product):
    product = make_product(make_establishment(OWNER_A, name="Cafe Central"))

    found = product_service.get_product(session, product.id)

    assert found.establishment.name == "Cafe Central"


def test_list_products_ignores_active_flag(session, make_establishment, make_product):
    establishment = make_establishment(OWNER_A)
    make_product(establishment, "Coffee")
    make_product(establishment, "Tea")
    make_product(make_establishment(OWNER_B, name="Elsewhere"), "Juice")

    establishment.active = False
    session.add(establishment)
    session.commit()

    names = [p.name for p in product_service.list_products_by_establishment(session, establishment.id)]
    assert names == ["Coffee", "Tea"]
