from fastapi import APIRouter
from marketplace.api.__init__ import version_prefix
from marketplace.common.routes import home_router
from marketplace.seller.routes import seller_router


public_routers = APIRouter(prefix=version_prefix)

public_routers.include_router(seller_router, prefix="/seller",tags=["seller"])
public_routers.include_router(home_router,tags=["home"])
