import os

# Must be set before the app modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from marketplace.db import get_session
from marketplace.main import app
from marketplace.models import Establishment, Product
from marketplace.security import create_access_token

OWNER_A = 1
OWNER_B = 2
CUSTOMER_C = 3
CUSTOMER_D = 4


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite ignores foreign keys unless asked, PostgreSQL always enforces them
    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client(engine):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user_id: int, email: str | None = None) -> dict:
    token = create_access_token({"sub": user_id, "email": email or f"user{user_id}@example.com"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_establishment(session):
    def _make(owner_id: int = OWNER_A, name: str = "Cafe Central", address: str = "Main St 1") -> Establishment:
        establishment = Establishment(owner_id=owner_id, name=name, address=address)
        session.add(establishment)
        session.commit()
        session.refresh(establishment)
        return establishment

    return _make


@pytest.fixture()
def make_product(session):
    def _make(establishment: Establishment, name: str = "Coffee", price_cents: int = 1000) -> Product:
        product = Product(name=name, price_cents=price_cents, establishment_id=establishment.id)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make
