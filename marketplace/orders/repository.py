from typing import Any, Dict, List, Tuple
from sqlalchemy import DateTime, case, func, literal, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.common.custom_exceptions import NotFound
from marketplace.common.utils import now
from marketplace.orders.constants import OPEN_STATUSES, logger
from marketplace.orders.models import OrderFilter, OrderPatch, SellerOrderOut
from marketplace.schema.full_schema import Orders, Payment, PaymentStatus, Users


def _ts(value):
    return literal(value, type_=DateTime(timezone=True))


def _seller_predicates(seller_id: int, flt: OrderFilter) -> list:
    conds = [Orders.seller_id == seller_id]
    if flt.status is not None:
        conds.append(Orders.status == flt.status.value)
    return conds


class OrderStore:
    """Persistence boundary for orders. Callers own the transaction (commit / rollback)."""

    async def list_by_seller(self, session: AsyncSession, seller_id: int,
                             flt: OrderFilter) -> Tuple[List[Dict[str, Any]], int]:
        conds = _seller_predicates(seller_id, flt)

        stmt = (
            select(Orders, Users.name.label("buyer_name"), Users.email.label("buyer_email"))
            .join(Users, Users.id == Orders.buyer_id)
            .where(*conds)
            .order_by(Orders.created_at.desc(), Orders.id.desc())
            .limit(flt.limit)
            .offset(flt.offset)
        )
        res = await session.execute(stmt)
        orders = [
            SellerOrderOut.model_validate(order).model_copy(
                update={"buyer_name": buyer_name, "buyer_email": buyer_email}
            ).model_dump()
            for order, buyer_name, buyer_email in res.all()
        ]

        count_stmt = select(func.count(Orders.id)).where(*conds)
        total = (await session.execute(count_stmt)).scalar_one()

        return orders, int(total)

    async def get_by_seller_and_id(self, session: AsyncSession, seller_id: int, order_id: int,
                                   for_update: bool = False) -> Orders:
        stmt = select(Orders).where(Orders.id == order_id, Orders.seller_id == seller_id)
        if for_update:
            # serialises concurrent transitions of the same order until commit
            stmt = stmt.with_for_update()
        stmt = stmt.execution_options(populate_existing=True)

        res = await session.execute(stmt)
        order = res.scalar_one_or_none()
        if order is None:
            logger.info("orders.lookup.not_found", extra={"seller_id": seller_id, "order_id": order_id})
            raise NotFound("Order not found")
        return order

    async def update(self, session: AsyncSession, order_id: int, patch: OrderPatch) -> Orders:
        """Apply `patch` in one UPDATE statement and return the stored row."""
        values: Dict[str, Any] = patch.plain_values()
        # set-once audit timestamps ,an already recorded value always wins
        if patch.shipped_at is not None:
            values["shipped_at"] = func.coalesce(Orders.shipped_at, _ts(patch.shipped_at))
        if patch.delivered_at is not None:
            values["delivered_at"] = func.coalesce(Orders.delivered_at, _ts(patch.delivered_at))
        values["updated_at"] = now()

        stmt = (
            update(Orders)
            .where(Orders.id == order_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        res = await session.execute(stmt)
        if res.rowcount == 0:
            raise NotFound("Order not found")

        stmt = select(Orders).where(Orders.id == order_id).execution_options(populate_existing=True)
        res = await session.execute(stmt)
        return res.scalar_one()

    async def counts_for_seller(self, session: AsyncSession, seller_id: int) -> Tuple[int, int]:
        """(total_orders, open_orders) of a seller."""
        open_values = [s.value for s in OPEN_STATUSES]
        open_orders = func.coalesce(func.sum(case((Orders.status.in_(open_values), 1), else_=0)), 0)
        stmt = select(func.count(Orders.id), open_orders).where(Orders.seller_id == seller_id)
        res = await session.execute(stmt)
        total, open_count = res.one()
        return int(total), int(open_count)

    async def settled_revenue_cents(self, session: AsyncSession, seller_id: int) -> int:
        """Gross total of the seller's orders that have a succeeded payment."""
        stmt = (
            select(func.coalesce(func.sum(Orders.total_cents), 0))
            .select_from(Orders)
            .join(Payment, Payment.order_id == Orders.id)
            .where(Orders.seller_id == seller_id, Payment.status == PaymentStatus.SUCCEEDED.value)
        )
        res = await session.execute(stmt)
        return int(res.scalar_one())
