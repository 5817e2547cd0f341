from decimal import Decimal
from typing import Callable
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from innkeeper.config.settings import Settings
from innkeeper.db.session import configure_sqlite_savepoints
from innkeeper.models import Base, Guest, Property, Room, Tenant


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite_savepoints(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Session:
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings() -> Settings:
    return Settings(DATABASE_URL="sqlite://", TIMEZONE="UTC")


@pytest.fixture
def tenant(db_session) -> Tenant:
    tenant = Tenant(name="Seaside Hospitality", subscription_plan="pro")
    db_session.add(tenant)
    db_session.commit()
    return tenant


@pytest.fixture
def other_tenant(db_session) -> Tenant:
    tenant = Tenant(name="Mountain Lodges")
    db_session.add(tenant)
    db_session.commit()
    return tenant


@pytest.fixture
def property_factory(db_session, tenant) -> Callable[..., Property]:
    def make(**overrides) -> Property:
        values = {"tenant_id": tenant.id, "name": "Harbour View", "currency": "USD"}
        values.update(overrides)
        prop = Property(**values)
        db_session.add(prop)
        db_session.commit()
        return prop

    return make


@pytest.fixture
def hotel(property_factory) -> Property:
    return property_factory()


@pytest.fixture
def room_factory(db_session, tenant, hotel) -> Callable[..., Room]:
    def make(**overrides) -> Room:
        values = {
            "tenant_id": tenant.id,
            "property_id": hotel.id,
            "name_or_number": f"R{uuid4().hex[:6]}",
            "capacity_adults": 2,
            "capacity_children": 0,
            "base_price": Decimal("100.00"),
            "extra_adult_price": Decimal("20.00"),
            "currency": "USD",
        }
        values.update(overrides)
        room = Room(**values)
        db_session.add(room)
        db_session.commit()
        return room

    return make


@pytest.fixture
def room(room_factory) -> Room:
    return room_factory(name_or_number="101")


@pytest.fixture
def guest_factory(db_session, tenant) -> Callable[..., Guest]:
    def make(**overrides) -> Guest:
        values = {"tenant_id": tenant.id, "first_name": "Ada", "last_name": "Lovelace", "email": "Ada@Example.com"}
        values.update(overrides)
        guest = Guest(**values)
        db_session.add(guest)
        db_session.commit()
        return guest

    return make


@pytest.fixture
def guest(guest_factory) -> Guest:
    return guest_factory()
