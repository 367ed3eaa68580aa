from typing import Any, Dict, Optional
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.common.utils import now
from marketplace.schema.full_schema import KycStatus, SellerProfile

DEFAULT_SELLER_SETTINGS = {
    "auto_accept_orders": True,
    "notification_preferences": {"email": True, "sms": False},
}


class SellerProfileStore:

    async def get_by_user_id(self, session: AsyncSession, user_id: int) -> Optional[SellerProfile]:
        stmt = select(SellerProfile).where(SellerProfile.user_id == user_id)
        res = await session.execute(stmt)
        return res.scalar_one_or_none()

    async def create(self, session: AsyncSession, user_id: int, fields: Dict[str, Any]) -> SellerProfile:
        """Insert and flush ,a duplicate user_id surfaces here as IntegrityError."""
        profile = SellerProfile(
            user_id=user_id,
            kyc_status=KycStatus.PENDING.value,
            settings=dict(DEFAULT_SELLER_SETTINGS),
            **fields,
        )
        session.add(profile)
        await session.flush()
        return profile

    async def update(self, session: AsyncSession, profile_id: int, fields: Dict[str, Any]) -> SellerProfile:
        if fields:
            stmt = (
                update(SellerProfile)
                .where(SellerProfile.id == profile_id)
                .values(**fields, updated_at=now())
                .execution_options(synchronize_session=False)
            )
            await session.execute(stmt)

        stmt = select(SellerProfile).where(SellerProfile.id == profile_id).execution_options(populate_existing=True)
        res = await session.execute(stmt)
        return res.scalar_one()
