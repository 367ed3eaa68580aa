from typing import Optional
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.common.custom_exceptions import StorageFailure
from marketplace.common.utils import now
from marketplace.schema.full_schema import Role, UserRole, Users
from marketplace.user.constants import SELLER_ROLE, logger


async def identify_user_by_pid(session, user_pid):

    stmt=select(Users.id).where(Users.public_id==user_pid,Users.deleted_at==None)
    res=await session.execute(stmt)
    user_id=res.scalar_one_or_none()
    return user_id


class UserStore:
    """Reads users and applies role changes on behalf of the seller flows."""

    async def get_by_id(self, session: AsyncSession, user_id: int) -> Optional[Users]:
        stmt = select(Users).where(Users.id == user_id, Users.deleted_at == None)
        res = await session.execute(stmt)
        return res.scalar_one_or_none()

    async def promote_to_seller(self, session: AsyncSession, user_id: int) -> int:
        """Link the seller role to the user and bump role_version so old tokens show stale roles."""
        res = await session.execute(select(Role.id).where(Role.name == SELLER_ROLE))
        role_id = res.scalar_one_or_none()
        if role_id is None:
            logger.error("user.promote.role_missing", extra={"user_id": user_id, "role": SELLER_ROLE})
            raise StorageFailure(f"role {SELLER_ROLE!r} is not seeded")

        res = await session.execute(
            select(UserRole.id).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        )
        if res.scalar_one_or_none() is None:
            session.add(UserRole(user_id=user_id, role_id=role_id))

        stmt = (
            update(Users)
            .where(Users.id == user_id)
            .values(role_version=Users.role_version + 1, updated_at=now())
            .returning(Users.role_version)
            .execution_options(synchronize_session="fetch")
        )
        res = await session.execute(stmt)
        role_version = res.scalar_one()
        await session.flush()

        logger.info("user.promote.seller", extra={"user_id": user_id, "role_version": role_version})
        return role_version
