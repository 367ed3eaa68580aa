from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.common.custom_exceptions import Conflict, NotFound, storage_errors
from marketplace.schema.full_schema import BusinessType, SellerProfile
from marketplace.seller.constants import logger
from marketplace.seller.models import SellerApplyIn, SellerProfileUpdateIn
from marketplace.seller.repository import SellerProfileStore
from marketplace.user.repository import UserStore


class SellerApplicationService:
    """Turns a user account into a seller ,once per user."""

    def __init__(self, profile_store: SellerProfileStore, user_store: UserStore):
        self.profile_store = profile_store
        self.user_store = user_store

    async def apply(self, session: AsyncSession, user_id: int, fields: SellerApplyIn) -> SellerProfile:
        with storage_errors("seller.apply.lookup", user_id=user_id):
            user = await self.user_store.get_by_id(session, user_id)
            if user is None:
                raise NotFound("User not found")
            existing = await self.profile_store.get_by_user_id(session, user_id)

        if existing is not None:
            logger.info("seller.apply.conflict", extra={"user_id": user_id, "seller_id": existing.id})
            raise Conflict("You already have a seller profile")

        values = fields.model_dump(exclude_none=True)
        values.setdefault("business_type", BusinessType.INDIVIDUAL.value)
        values.setdefault("business_email", user.email)

        with storage_errors("seller.apply.create", user_id=user_id):
            try:
                profile = await self.profile_store.create(session, user_id, values)
            except IntegrityError as exc:
                # a concurrent application for the same user won the unique constraint
                await session.rollback()
                logger.info("seller.apply.conflict", extra={"user_id": user_id, "race": True})
                raise Conflict("You already have a seller profile") from exc

            # role promotion only happens once the profile row is in place, both land in one commit
            await self.user_store.promote_to_seller(session, user_id)
            await session.commit()

        logger.info("seller.apply.created", extra={"user_id": user_id, "seller_id": profile.id})
        return profile

    async def get_profile(self, session: AsyncSession, user_id: int) -> SellerProfile:
        with storage_errors("seller.profile.get", user_id=user_id):
            profile = await self.profile_store.get_by_user_id(session, user_id)
        if profile is None:
            raise NotFound("Seller profile not found")
        return profile

    async def update_profile(self, session: AsyncSession, profile: SellerProfile,
                             fields: SellerProfileUpdateIn) -> SellerProfile:
        values = fields.model_dump(exclude_unset=True, exclude_none=True)

        with storage_errors("seller.profile.update", seller_id=profile.id):
            updated = await self.profile_store.update(session, profile.id, values)
            await session.commit()

        logger.info("seller.profile.updated", extra={"seller_id": profile.id, "fields": sorted(values)})
        return updated
