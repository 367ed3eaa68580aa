from typing import Tuple
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.schema.full_schema import Product, ProductStatus


class ProductStore:
    """Read side of the product catalogue used by the seller dashboard."""

    async def counts_for_seller(self, session: AsyncSession, seller_id: int) -> Tuple[int, int]:
        """(total_products, active_products) of a seller."""
        active = func.coalesce(func.sum(case((Product.status == ProductStatus.ACTIVE.value, 1), else_=0)), 0)
        stmt = select(func.count(Product.id), active).where(Product.seller_id == seller_id)
        res = await session.execute(stmt)
        total, active_count = res.one()
        return int(total), int(active_count)
