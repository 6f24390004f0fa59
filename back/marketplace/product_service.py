import logging

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from .errors import InvalidInput, NotFound
from .models import Product, ProductCreate, ProductUpdate, utcnow
from .permissions import ensure_owner, get_owned_establishment

logger = logging.getLogger(__name__)

# price_cents is a 32-bit INTEGER column
MAX_PRICE_CENTS = 2**31 - 1


def _check_price(price_cents: int) -> int:
    if price_cents < 0:
        raise InvalidInput("price_cents must not be negative")
    if price_cents > MAX_PRICE_CENTS:
        raise InvalidInput(f"price_cents must not exceed {MAX_PRICE_CENTS}")
    return price_cents


def _get_product_with_owner(session: Session, product_id: int) -> Product:
    statement = (
        select(Product)
        .where(Product.id == product_id)
        .options(selectinload(Product.establishment))
    )
    product = session.exec(statement).first()
    if not product:
        raise NotFound("Product not found")
    return product


def create_product(session: Session, data: ProductCreate, owner_id: int) -> Product:
    """Create a product in an establishment owned by `owner_id`."""
    if not data.name or not data.name.strip() or data.price_cents is None or data.establishment_id is None:
        raise InvalidInput("name, price_cents and establishment_id are required")
    _check_price(data.price_cents)

    get_owned_establishment(session, data.establishment_id, owner_id)

    product = Product(
        name=data.name.strip(),
        description=data.description,
        price_cents=data.price_cents,
        establishment_id=data.establishment_id,
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def update_product(
    session: Session,
    product_id: int,
    owner_id: int,
    data: ProductUpdate,
) -> Product:
    product = _get_product_with_owner(session, product_id)
    ensure_owner(
        owner_id, product.establishment.owner_id,
        "Permission denied. Only the owner can edit this product.",
    )

    # Only fields present in the request; an explicit null clears description
    changes = data.model_dump(exclude_unset=True)
    if "name" in changes:
        if not changes["name"] or not changes["name"].strip():
            raise InvalidInput("name must not be empty")
        product.name = changes["name"].strip()
    if "description" in changes:
        product.description = changes["description"]
    if "price_cents" in changes:
        if changes["price_cents"] is None:
            raise InvalidInput("price_cents must not be null")
        product.price_cents = _check_price(changes["price_cents"])
    product.updated_at = utcnow()

    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def delete_product(session: Session, product_id: int, owner_id: int) -> None:
    product = _get_product_with_owner(session, product_id)
    ensure_owner(
        owner_id, product.establishment.owner_id,
        "Permission denied. Only the owner can delete this product.",
    )

    session.delete(product)
    session.commit()
    logger.info(f"Product #{product_id} deleted by user {owner_id}")


def get_product(session: Session, product_id: int) -> Product | None:
    statement = (
        select(Product)
        .where(Product.id == product_id)
        .options(selectinload(Product.establishment))
    )
    return session.exec(statement).first()


def list_products_by_establishment(session: Session, establishment_id: int) -> list[Product]:
    statement = (
        select(Product)
        .where(Product.establishment_id == establishment_id)
        .order_by(Product.id)
    )
    return list(session.exec(statement).all())
