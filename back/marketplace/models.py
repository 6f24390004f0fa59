from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import BigInteger
from sqlmodel import Field, Relationship, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    pending = "pending"
    in_preparation = "in_preparation"
    completed = "completed"
    cancelled = "cancelled"


class Establishment(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    owner_id: int = Field(index=True)  # User id from the identity token
    name: str
    address: str
    active: bool = Field(default=True, index=True)  # Soft delete flag
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    products: list["Product"] = Relationship(back_populates="establishment")
    orders: list["Order"] = Relationship(back_populates="establishment")


class Product(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    name: str
    description: str | None = None
    price_cents: int
    establishment_id: int = Field(foreign_key="establishment.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    establishment: Establishment = Relationship(back_populates="products")


class Order(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    customer_id: int = Field(index=True)
    establishment_id: int = Field(foreign_key="establishment.id", index=True)
    total_cents: int = Field(default=0, sa_type=BigInteger)
    status: OrderStatus = Field(default=OrderStatus.pending, index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    cancelled_at: datetime | None = None

    establishment: Establishment = Relationship(back_populates="orders")
    items: list["OrderItem"] = Relationship(back_populates="order")


class OrderItem(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    # Kept for traceability only; the product may be deleted later
    product_id: int | None = Field(default=None, foreign_key="product.id", ondelete="SET NULL")
    product_name: str  # Snapshot of product name at order time
    quantity: int
    unit_price_cents: int  # Snapshot of price at order time

    order: Order = Relationship(back_populates="items")


# Request/Response Models
class CurrentUser(SQLModel):
    id: int
    email: str | None = None


class EstablishmentCreate(SQLModel):
    name: str
    address: str


class EstablishmentUpdate(SQLModel):
    name: str | None = None
    address: str | None = None


class ProductCreate(SQLModel):
    # Optional here so missing fields reach the service and fail as InvalidInput
    name: str | None = None
    description: str | None = None
    price_cents: int | None = None
    establishment_id: int | None = None


class ProductUpdate(SQLModel):
    name: str | None = None
    description: str | None = None
    price_cents: int | None = None


class OrderItemCreate(SQLModel):
    product_id: int
    quantity: int


class OrderCreate(SQLModel):
    establishment_id: int
    items: list[OrderItemCreate]


class ProductRead(SQLModel):
    id: int
    name: str
    description: str | None = None
    price_cents: int
    establishment_id: int
    created_at: datetime
    updated_at: datetime


class ProductReadWithEstablishment(ProductRead):
    establishment_name: str | None = None

    @classmethod
    def from_product(cls, product: Product) -> "ProductReadWithEstablishment":
        return cls(
            **product.model_dump(),
            establishment_name=product.establishment.name if product.establishment else None,
        )


class EstablishmentRead(SQLModel):
    id: int
    owner_id: int
    name: str
    address: str
    active: bool
    created_at: datetime
    updated_at: datetime


class EstablishmentReadWithProducts(EstablishmentRead):
    products: list[ProductRead] = []


class OrderItemRead(SQLModel):
    id: int
    product_id: int | None = None
    product_name: str
    quantity: int
    unit_price_cents: int


class OrderRead(SQLModel):
    id: int
    customer_id: int
    establishment_id: int
    establishment_name: str | None = None
    total_cents: int
    status: OrderStatus
    created_at: datetime
    cancelled_at: datetime | None = None
    items: list[OrderItemRead] = []

    @classmethod
    def from_order(cls, order: Order) -> "OrderRead":
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            establishment_id=order.establishment_id,
            establishment_name=order.establishment.name if order.establishment else None,
            total_cents=order.total_cents,
            status=order.status,
            created_at=order.created_at,
            cancelled_at=order.cancelled_at,
            items=[OrderItemRead.model_validate(item, from_attributes=True) for item in order.items],
        )
