from typing import List
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.payouts.constants import CLAIMING_PAYOUT_STATUSES, SETTLED_PAYMENT_STATUS
from marketplace.schema.full_schema import Orders, Payment, Payout, PayoutOrder


def claimed_order_ids(seller_id: int):
    """Order ids already covered by a processing or paid payout of the seller."""
    return (
        select(PayoutOrder.order_id)
        .join(Payout, Payout.id == PayoutOrder.payout_id)
        .where(Payout.seller_id == seller_id, Payout.status.in_(CLAIMING_PAYOUT_STATUSES))
    )


def _eligible_predicates(seller_id: int) -> list:
    return [
        Orders.seller_id == seller_id,
        Payment.status == SETTLED_PAYMENT_STATUS,
        Orders.id.not_in(claimed_order_ids(seller_id)),
    ]


async def sum_pending_payout_cents(session: AsyncSession, seller_id: int) -> int:
    settled = Orders.total_cents - Payment.platform_fee_cents
    stmt = (
        select(func.coalesce(func.sum(settled), 0))
        .select_from(Orders)
        .join(Payment, Payment.order_id == Orders.id)
        .where(*_eligible_predicates(seller_id))
    )
    res = await session.execute(stmt)
    return int(res.scalar_one())


async def pending_payout_rows(session: AsyncSession, seller_id: int) -> List[tuple]:
    """(order_id, total_cents, platform_fee_cents) of every order still owed to the seller."""
    stmt = (
        select(Orders.id, Orders.total_cents, Payment.platform_fee_cents)
        .join(Payment, Payment.order_id == Orders.id)
        .where(*_eligible_predicates(seller_id))
        .order_by(Orders.id)
    )
    res = await session.execute(stmt)
    return [tuple(r) for r in res.all()]


async def claimed_orders(session: AsyncSession, seller_id: int) -> List[int]:
    res = await session.execute(claimed_order_ids(seller_id).distinct().order_by(PayoutOrder.order_id))
    return list(res.scalars().all())
