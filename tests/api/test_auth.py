from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from innkeeper.services.common import CAN_MANAGE_RESERVATIONS

URL = "/api/v1/reservations"


@pytest.fixture
def token(settings):
    def make(tenant_id, expires_in=timedelta(minutes=5), **claims):
        payload = {
            "sub": str(uuid4()),
            "tenant_id": str(tenant_id),
            "role": "manager",
            "permissions": [CAN_MANAGE_RESERVATIONS],
            "exp": datetime.now(timezone.utc) + expires_in,
        }
        payload.update(claims)
        return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    return make


def auth(value):
    return {"Authorization": f"Bearer {value}"}


def test_valid_token_is_accepted(anonymous_client, token, tenant):
    response = anonymous_client.get(URL, headers=auth(token(tenant.id)))

    assert response.status_code == 200
    assert response.json()["data"] == []


def test_missing_token(anonymous_client):
    response = anonymous_client.get(URL)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTHENTICATION_FAILED"


def test_expired_token(anonymous_client, token, tenant):
    response = anonymous_client.get(URL, headers=auth(token(tenant.id, expires_in=timedelta(minutes=-1))))

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Token has expired"


def test_tampered_token(anonymous_client, token, tenant):
    response = anonymous_client.get(URL, headers=auth(token(tenant.id) + "x"))

    assert response.status_code == 401


def test_unknown_tenant(anonymous_client, token):
    response = anonymous_client.get(URL, headers=auth(token(uuid4())))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "TENANT_INACTIVE"


def test_lapsed_subscription(anonymous_client, token, db_session, tenant):
    tenant.subscription_end_date = datetime.now(timezone.utc).date() - timedelta(days=1)
    db_session.commit()

    response = anonymous_client.get(URL, headers=auth(token(tenant.id)))

    assert response.status_code == 403


def test_token_without_permission(anonymous_client, token, tenant):
    response = anonymous_client.get(URL, headers=auth(token(tenant.id, permissions=[])))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "INSUFFICIENT_PERMISSIONS"


def test_health(anonymous_client):
    assert anonymous_client.get("/health").json()["status"] == "ok"
