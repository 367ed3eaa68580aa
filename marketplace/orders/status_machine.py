"""Order status transitions for sellers.

The default policy is permissive: any recognised status may be set from any
other, which keeps manual corrections possible (e.g. moving an order back to
``processing`` after a mistaken ``shipped``). With ``strict=True`` an order
can only move forward along the fulfillment path, or to ``cancelled`` from a
non terminal status, and terminal orders cannot move at all.

``shipped_at`` and ``delivered_at`` are recorded the first time an order
enters the matching status and never overwritten afterwards.
"""
from typing import FrozenSet, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.common.custom_exceptions import InvalidInput
from marketplace.common.utils import now
from marketplace.orders.constants import FULFILLMENT_PATH, TERMINAL_STATUSES, logger
from marketplace.orders.models import OrderPatch, parse_order_status
from marketplace.orders.repository import OrderStore
from marketplace.schema.full_schema import OrderStatus, Orders


def allowed_next(current: OrderStatus) -> FrozenSet[OrderStatus]:
    """Statuses reachable from `current` under the strict policy (re-issuing the same status included)."""
    if current in TERMINAL_STATUSES:
        return frozenset({current})
    idx = FULFILLMENT_PATH.index(current)
    return frozenset(FULFILLMENT_PATH[idx:]) | {OrderStatus.CANCELLED}


class OrderStatusMachine:

    def __init__(self, order_store: OrderStore, strict: bool = False):
        self.order_store = order_store
        self.strict = strict

    def build_patch(self, order: Orders, requested: OrderStatus,
                    tracking_number: Optional[str] = None,
                    seller_notes: Optional[str] = None) -> OrderPatch:
        current = OrderStatus(order.status)
        if self.strict and requested not in allowed_next(current):
            raise InvalidInput(f"Cannot move order from {current.value} to {requested.value}")

        ts = now()
        return OrderPatch(
            status=requested,
            # empty values mean leave unchanged ,never clear
            tracking_number=tracking_number or None,
            seller_notes=seller_notes or None,
            shipped_at=ts if requested == OrderStatus.SHIPPED and order.shipped_at is None else None,
            delivered_at=ts if requested == OrderStatus.DELIVERED and order.delivered_at is None else None,
        )

    async def transition(self, session: AsyncSession, order: Orders, requested_status: str,
                         tracking_number: Optional[str] = None,
                         seller_notes: Optional[str] = None) -> Orders:
        """Validate and persist a status change on an order already scoped to the calling seller.

        Runs inside the caller's transaction ,the caller commits.
        """
        requested = parse_order_status(requested_status)
        patch = self.build_patch(order, requested, tracking_number, seller_notes)

        previous = order.status
        updated = await self.order_store.update(session, order.id, patch)

        logger.info(
            "orders.status.updated",
            extra={
                "order_id": updated.id,
                "seller_id": updated.seller_id,
                "from_status": previous,
                "to_status": updated.status,
            },
        )
        return updated
