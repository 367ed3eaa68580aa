from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.api.services import Services
from marketplace.common.custom_exceptions import storage_errors
from marketplace.common.money import format_cents
from marketplace.common.utils import page_meta, success_response
from marketplace.db.dependencies import get_session, get_snapshot_session
from marketplace.orders.models import OrderFilter, OrderOut, OrderStatusUpdateIn, parse_order_status
from marketplace.schema.full_schema import SellerProfile
from marketplace.seller.dependencies import current_user_id, get_current_seller, get_services
from marketplace.seller.models import SellerApplyIn, SellerProfileOut, SellerProfileUpdateIn


seller_router=APIRouter()


def _profile_out(profile: SellerProfile) -> dict:
    return SellerProfileOut.model_validate(profile).model_dump()


@seller_router.post("/apply")
async def apply_for_seller(payload: SellerApplyIn,
    user_id: int = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),
    services: Services = Depends(get_services)):

    profile = await services.applications.apply(session, user_id, payload)

    return success_response({
        "message": "Seller application submitted successfully",
        "seller_profile": _profile_out(profile),
    }, status.HTTP_201_CREATED)


@seller_router.get("/profile")
async def get_seller_profile(seller: SellerProfile = Depends(get_current_seller),
    session: AsyncSession = Depends(get_session),
    services: Services = Depends(get_services)):

    stats = await services.stats.stats(session, seller.id)
    return success_response({"seller_profile": _profile_out(seller), "stats": stats.model_dump()})


@seller_router.put("/profile")
async def update_seller_profile(payload: SellerProfileUpdateIn,
    seller: SellerProfile = Depends(get_current_seller),
    session: AsyncSession = Depends(get_session),
    services: Services = Depends(get_services)):

    updated = await services.applications.update_profile(session, seller, payload)
    return success_response({
        "message": "Seller profile updated successfully",
        "seller_profile": _profile_out(updated),
    })


@seller_router.get("/orders")
async def list_seller_orders(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    seller: SellerProfile = Depends(get_current_seller),
    session: AsyncSession = Depends(get_session),
    services: Services = Depends(get_services)):

    # validated before touching the db
    flt = OrderFilter.build(status=status_filter, limit=limit, offset=offset)

    with storage_errors("orders.list", seller_id=seller.id):
        orders, total = await services.order_store.list_by_seller(session, seller.id, flt)

    return success_response({"orders": orders, "total": total, **page_meta(total, flt.limit, flt.offset)})


@seller_router.get("/orders/{order_id}")
async def get_seller_order(order_id: int,
    seller: SellerProfile = Depends(get_current_seller),
    session: AsyncSession = Depends(get_session),
    services: Services = Depends(get_services)):

    with storage_errors("orders.get", seller_id=seller.id, order_id=order_id):
        order = await services.order_store.get_by_seller_and_id(session, seller.id, order_id)
    return success_response({"order": OrderOut.model_validate(order).model_dump()})


@seller_router.patch("/orders/{order_id}/status")
async def update_order_status(order_id: int, payload: OrderStatusUpdateIn,
    seller: SellerProfile = Depends(get_current_seller),
    session: AsyncSession = Depends(get_session),
    services: Services = Depends(get_services)):

    # a bad status is rejected before the order row is even read
    parse_order_status(payload.status)

    with storage_errors("orders.status.update", seller_id=seller.id, order_id=order_id):
        order = await services.order_store.get_by_seller_and_id(session, seller.id, order_id, for_update=True)
        order = await services.status_machine.transition(
            session, order, payload.status,
            tracking_number=payload.tracking_number,
            seller_notes=payload.seller_notes,
        )
        await session.commit()

    return success_response({
        "message": "Order status updated successfully",
        "order": OrderOut.model_validate(order).model_dump(),
    })


@seller_router.get("/dashboard/stats")
async def get_dashboard_stats(
    seller: SellerProfile = Depends(get_current_seller),
    snapshot: AsyncSession = Depends(get_snapshot_session),
    services: Services = Depends(get_services)):

    # stats and balance are read inside one snapshot transaction
    stats = await services.stats.stats(snapshot, seller.id)
    pending_cents = await services.payouts.pending_payout_cents(snapshot, seller.id)

    return success_response({
        **stats.model_dump(),
        "pending_payout_cents": pending_cents,
        "pending_payout_display": format_cents(pending_cents),
    })


@seller_router.get("/payouts/pending")
async def get_pending_payout(
    seller: SellerProfile = Depends(get_current_seller),
    snapshot: AsyncSession = Depends(get_snapshot_session),
    services: Services = Depends(get_services)):

    payout = await services.payouts.summary(snapshot, seller.id)
    return success_response(payout.model_dump())
