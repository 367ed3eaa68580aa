from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.api.services import Services
from marketplace.common.custom_exceptions import Unauthenticated
from marketplace.db.dependencies import get_session
from marketplace.schema.full_schema import SellerProfile


def get_services(request: Request) -> Services:
    return request.app.state.services


def current_user_id(request: Request) -> int:
    user_id = getattr(request.state, "user_identifier", None)
    if user_id is None:
        raise Unauthenticated("Unauthorized")
    return user_id


async def get_current_seller(request: Request,
                             user_id: int = Depends(current_user_id),
                             session: AsyncSession = Depends(get_session),
                             services: Services = Depends(get_services)) -> SellerProfile:
    profile = await services.applications.get_profile(session, user_id)

    # picked up by the storage error handler for log context
    request.state.seller_id = profile.id
    return profile
