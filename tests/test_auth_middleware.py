import pytest
from uuid6 import uuid7
from marketplace.auth.utils import create_access_token
from marketplace.schema.full_schema import Users
from tests.factories import make_seller

url_prefix = "/api/v1"


@pytest.mark.asyncio
async def test_health_is_public(ac_client):
    r = await ac_client.get(f"{url_prefix}/health")
    assert r.status_code == 200
    assert r.json() == {"status": "healthy"}


@pytest.mark.asyncio
@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": "Bearer not-a-jwt"},
    {"Authorization": "Basic dXNlcjpwYXNz"},
])
async def test_seller_routes_need_a_valid_token(ac_client, db_session, headers):
    await make_seller(db_session)
    r = await ac_client.get(f"{url_prefix}/seller/orders", headers=headers)
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "INVALID_AUTH"


@pytest.mark.asyncio
async def test_expired_token_is_rejected(ac_client, db_session):
    seller = await make_seller(db_session)
    user = await db_session.get(Users, seller.user_id)
    token = create_access_token(user.public_id, expires_dur=-1)

    r = await ac_client.get(f"{url_prefix}/seller/dashboard/stats", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_token_for_unknown_user_is_rejected(ac_client):
    token = create_access_token(uuid7())
    r = await ac_client.post(f"{url_prefix}/seller/apply", json={"business_name": "Ghost Shop"},
                             headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_request_id_is_echoed(ac_client):
    r = await ac_client.get(f"{url_prefix}/health", headers={"X-Request-ID": "req-abc-123"})
    assert r.headers["X-Request-ID"] == "req-abc-123"
