from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.common.custom_exceptions import storage_errors
from marketplace.orders.repository import OrderStore
from marketplace.products.repository import ProductStore
from marketplace.seller.models import SellerStats


class SellerStatsAggregator:
    """Read-only dashboard rollup. Each table is aggregated on its own so rows never fan out across joins."""

    def __init__(self, order_store: OrderStore, product_store: ProductStore):
        self.order_store = order_store
        self.product_store = product_store

    async def stats(self, session: AsyncSession, seller_id: int) -> SellerStats:
        with storage_errors("seller.stats", seller_id=seller_id):
            total_orders, pending_orders = await self.order_store.counts_for_seller(session, seller_id)
            revenue = await self.order_store.settled_revenue_cents(session, seller_id)
            total_products, active_products = await self.product_store.counts_for_seller(session, seller_id)

        return SellerStats(
            total_orders=total_orders,
            total_revenue_cents=revenue,
            pending_orders=pending_orders,
            total_products=total_products,
            active_products=active_products,
        )
