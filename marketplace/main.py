from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine
from marketplace.api.routers import public_routers
from marketplace.api.services import build_services
from marketplace.api.__init__ import version_prefix,cur_version
from marketplace.common.custom_exceptions import register_all_exceptions
from marketplace.common.logging_setup import setup_logging, stop_logging
from marketplace.config.settings import config_settings
from marketplace.db.connection import build_engine, build_session_maker
from marketplace.middlewares.auth_middleware import AuthenticationMiddleware
from marketplace.middlewares.request_id_middleware import RequestIdMiddleware

_UNSET = object()


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    setup_logging()
    try:
        yield
    finally:
        # at this point new requests accept has been stopped already before calling shutdown
        if app.state.owns_engine:
            await app.state.engine.dispose()
        stop_logging()


def create_app(engine: Optional[AsyncEngine] = None,
               snapshot_isolation_level=_UNSET,
               strict_transitions: Optional[bool] = None):
    """Build the api around an explicit engine ,every store and component is created here once."""

    owns_engine = engine is None
    engine = engine or build_engine()
    if snapshot_isolation_level is _UNSET:
        snapshot_isolation_level = config_settings.SNAPSHOT_ISOLATION_LEVEL
    if strict_transitions is None:
        strict_transitions = config_settings.STRICT_ORDER_TRANSITIONS

    app=FastAPI(
        title="Marketplace Seller API",
        version=cur_version,
        lifespan=app_lifespan)

    session_maker = build_session_maker(engine)
    app.state.engine = engine
    app.state.owns_engine = owns_engine
    app.state.session_maker = session_maker
    app.state.snapshot_session_maker = build_session_maker(engine, isolation_level=snapshot_isolation_level)
    app.state.services = build_services(strict_transitions=strict_transitions)

    app.include_router(public_routers)

    app.add_middleware(AuthenticationMiddleware,session_maker=session_maker,
                       paths=[f"{version_prefix}/health", "/docs", "/openapi.json", "/redoc"])
    app.add_middleware(RequestIdMiddleware)
    register_all_exceptions(app)

    return app

app=create_app()
