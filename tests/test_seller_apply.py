import asyncio
import pytest
from sqlalchemy import func, select
from marketplace.common.custom_exceptions import NotFound
from marketplace.schema.full_schema import Role, SellerProfile, UserRole, Users
from marketplace.seller.repository import SellerProfileStore
from marketplace.seller.services import SellerApplicationService
from marketplace.user.repository import UserStore
from tests.factories import auth_headers, make_seller, make_user

url_prefix = "/api/v1"


async def _role_names(session_maker, user_id):
    async with session_maker() as session:
        res = await session.execute(
            select(Role.name).join(UserRole, UserRole.role_id == Role.id).where(UserRole.user_id == user_id)
        )
        return set(res.scalars().all())


@pytest.mark.asyncio
async def test_apply_creates_pending_profile_and_promotes_user(ac_client, db_session, session_maker):
    user = await make_user(db_session, email="asha@example.com")

    payload = {
        "business_name": "  Asha's Pickles  ",
        "description": "small batch pickles",
        "business_address": {"city": "Pune", "country": "IN"},
    }
    r = await ac_client.post(f"{url_prefix}/seller/apply", json=payload, headers=auth_headers(user))
    assert r.status_code == 201, r.text

    body = r.json()
    assert body["status"] == "ok"
    profile = body["data"]["seller_profile"]
    assert profile["business_name"] == "Asha's Pickles"
    assert profile["business_type"] == "individual"
    assert profile["business_email"] == "asha@example.com"
    assert profile["kyc_status"] == "pending"
    assert profile["commission_rate_bps"] == 1000
    assert profile["business_address"]["city"] == "Pune"
    assert profile["settings"]["auto_accept_orders"] is True
    assert r.headers.get("X-Request-ID") == body["request_id"]

    assert "seller" in await _role_names(session_maker, user.id)
    async with session_maker() as session:
        role_version = (await session.execute(select(Users.role_version).where(Users.id == user.id))).scalar_one()
    assert role_version == user.role_version + 1


@pytest.mark.asyncio
async def test_second_application_conflicts(ac_client, db_session, session_maker):
    user = await make_user(db_session)
    headers = auth_headers(user)

    first = await ac_client.post(f"{url_prefix}/seller/apply", json={"business_name": "First Shop"}, headers=headers)
    assert first.status_code == 201

    second = await ac_client.post(f"{url_prefix}/seller/apply", json={"business_name": "Second Shop"}, headers=headers)
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "CONFLICT"

    async with session_maker() as session:
        count = (await session.execute(
            select(func.count(SellerProfile.id)).where(SellerProfile.user_id == user.id)
        )).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_application_losing_the_race_conflicts(ac_client, app, db_session, session_maker, monkeypatch):
    user = await make_user(db_session)
    await make_seller(db_session, user=user, business_name="Won The Race")

    # the existence check misses the concurrent insert ,the unique constraint catches it
    async def not_yet_visible(session, user_id):
        return None

    monkeypatch.setattr(app.state.services.profile_store, "get_by_user_id", not_yet_visible)

    r = await ac_client.post(f"{url_prefix}/seller/apply", json={"business_name": "Lost The Race"},
                             headers=auth_headers(user))
    assert r.status_code == 409

    async with session_maker() as session:
        names = (await session.execute(
            select(SellerProfile.business_name).where(SellerProfile.user_id == user.id)
        )).scalars().all()
    assert names == ["Won The Race"]
    # no promotion from the losing request
    assert "seller" not in await _role_names(session_maker, user.id)


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {},
    {"business_name": "x"},
    {"business_name": "   a   "},
    {"business_name": "Good Name", "business_type": "conglomerate"},
    {"business_name": "Good Name", "business_email": "not-an-email"},
    {"business_name": "Good Name", "is_verified": True},
])
async def test_apply_rejects_invalid_fields(ac_client, db_session, payload):
    user = await make_user(db_session)
    r = await ac_client.post(f"{url_prefix}/seller/apply", json=payload, headers=auth_headers(user))
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_profile_roundtrip_with_stats(ac_client, db_session):
    seller = await make_seller(db_session)
    user = await db_session.get(Users, seller.user_id)
    headers = auth_headers(user)

    r = await ac_client.put(f"{url_prefix}/seller/profile",
                            json={"description": "now shipping nationwide", "business_phone": "+91-9000000000"},
                            headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["seller_profile"]["description"] == "now shipping nationwide"

    r = await ac_client.get(f"{url_prefix}/seller/profile", headers=headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["seller_profile"]["business_phone"] == "+91-9000000000"
    assert data["stats"] == {
        "total_orders": 0,
        "total_revenue_cents": 0,
        "pending_orders": 0,
        "total_products": 0,
        "active_products": 0,
    }


@pytest.mark.asyncio
async def test_profile_of_non_seller_is_not_found(ac_client, db_session):
    user = await make_user(db_session)
    r = await ac_client.get(f"{url_prefix}/seller/profile", headers=auth_headers(user))
    assert r.status_code == 404
    assert r.json()["error"]["details"]["message"] == "Seller profile not found"


@pytest.mark.asyncio
async def test_concurrent_applications_yield_one_profile(ac_client, db_session, session_maker):
    user = await make_user(db_session)
    headers = auth_headers(user)

    responses = await asyncio.gather(*[
        ac_client.post(f"{url_prefix}/seller/apply", json={"business_name": name}, headers=headers)
        for name in ("Morning Bakes", "Evening Bakes")
    ])
    assert sorted(r.status_code for r in responses) == [201, 409]

    async with session_maker() as session:
        count = (await session.execute(
            select(func.count(SellerProfile.id)).where(SellerProfile.user_id == user.id)
        )).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_get_profile_resolves_seller_by_user(db_session):
    seller = await make_seller(db_session, business_name="Lookup Shop")
    stranger = await make_user(db_session)
    applications = SellerApplicationService(SellerProfileStore(), UserStore())

    found = await applications.get_profile(db_session, seller.user_id)
    assert found.id == seller.id
    assert found.business_name == "Lookup Shop"

    with pytest.raises(NotFound):
        await applications.get_profile(db_session, stranger.id)
