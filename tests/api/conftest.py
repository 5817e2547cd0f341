from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from innkeeper.api.deps import get_current_identity
from innkeeper.config.settings import get_settings
from innkeeper.db.session import get_db
from innkeeper.main import app
from innkeeper.services.common import (
    CAN_MANAGE_PAYMENTS,
    CAN_MANAGE_RESERVATIONS,
    CAN_MANAGE_ROOMS,
    CallerIdentity,
)
from tests.helpers import days_ahead

ALL_PERMISSIONS = (CAN_MANAGE_RESERVATIONS, CAN_MANAGE_PAYMENTS, CAN_MANAGE_ROOMS)


@pytest.fixture
def identity(tenant) -> CallerIdentity:
    return CallerIdentity.build(user_id=uuid4(), tenant_id=tenant.id, role="manager", permissions=ALL_PERMISSIONS)


@pytest.fixture
def anonymous_client(db_session, settings):
    """Client with the test database but real token handling."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(anonymous_client, identity):
    app.dependency_overrides[get_current_identity] = lambda: identity
    return anonymous_client


@pytest.fixture
def reservation_payload(hotel, room, guest):
    def make(start: int = 10, end: int = 12, **overrides):
        body = {
            "propertyId": str(hotel.id),
            "roomId": str(room.id),
            "guestId": str(guest.id),
            "dates": {"checkInDate": days_ahead(start).isoformat(), "checkOutDate": days_ahead(end).isoformat()},
            "guests": {"adults": 2, "children": 0},
        }
        body.update(overrides)
        return body

    return make
