from decimal import Decimal
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront import crud, legacy, models, schemas  # noqa: F401
from storefront.db import Base, enable_sqlite_foreign_keys


@pytest.fixture(scope="function")
def db_session() -> Generator:
    # Use in-memory SQLite with a single connection
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    enable_sqlite_foreign_keys(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def address():
    return schemas.ShippingAddress(
        full_name="Ada Lovelace",
        street_address="12 Analytical St",
        city="London",
        postal_code="N1 9GU",
        country="UK",
    )


@pytest.fixture
def user(db_session):
    return crud.create_user(db_session, schemas.UserCreate(name="Alice", email="a@example.com", password="secret123"))


@pytest.fixture
def product(db_session):
    return crud.create_product(
        db_session,
        schemas.ProductCreate(
            name="Widget",
            slug="widget",
            category="Gadgets",
            images=["/images/widget-1.jpg", "/images/widget-2.jpg"],
            brand="Acme",
            description="A very useful widget",
            stock=10,
            price=Decimal("19.99"),
        ),
    )
