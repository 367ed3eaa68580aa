from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.common.custom_exceptions import storage_errors
from marketplace.common.money import Money
from marketplace.payouts import repository as payouts_repo
from marketplace.payouts.constants import MIN_PAYOUT_CENTS, logger
from marketplace.payouts.models import PayoutSummary


class PayoutCalculator:
    """Withdrawable balance of a seller: settled revenue not yet claimed by a processing/paid payout.

    Every figure comes from a single statement so a payout created concurrently is
    either fully excluded or not excluded at all. Run it on a session opened at
    snapshot isolation (see get_snapshot_session).
    """

    def __init__(self, min_payout_cents: int = MIN_PAYOUT_CENTS):
        self.min_payout = Money(min_payout_cents)

    async def pending_payout_cents(self, session: AsyncSession, seller_id: int) -> int:
        with storage_errors("payouts.pending_cents", seller_id=seller_id):
            cents = await payouts_repo.sum_pending_payout_cents(session, seller_id)
        return Money(cents).cents

    async def pending_payout_orders(self, session: AsyncSession, seller_id: int) -> list[int]:
        with storage_errors("payouts.pending_orders", seller_id=seller_id):
            rows = await payouts_repo.pending_payout_rows(session, seller_id)
        return [order_id for order_id, _, _ in rows]

    async def summary(self, session: AsyncSession, seller_id: int) -> PayoutSummary:
        with storage_errors("payouts.summary", seller_id=seller_id):
            rows = await payouts_repo.pending_payout_rows(session, seller_id)
            claimed = await payouts_repo.claimed_orders(session, seller_id)

        pending = Money.total(Money(total) - fee for _, total, fee in rows)
        logger.debug("payouts.summary.computed", extra={"seller_id": seller_id, "orders": len(rows)})

        return PayoutSummary(
            pending_payout_cents=pending.cents,
            pending_payout_display=pending.display(),
            order_ids=[order_id for order_id, _, _ in rows],
            claimed_order_ids=claimed,
            meets_minimum=pending >= self.min_payout,
        )
