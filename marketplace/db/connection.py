from typing import Optional
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine,async_sessionmaker,AsyncSession
from marketplace.config.settings import config_settings
from marketplace.db.utils import _is_asyncpg_url, _normalize_db_url


def build_engine(url: Optional[str] = None, echo: bool = False) -> AsyncEngine:
    db_url = _normalize_db_url(url or config_settings.DATABASE_URL)

    connect_args = {}
    if _is_asyncpg_url(db_url):
        # bounds every statement so a stuck query fails the request instead of hanging it
        timeout_s = config_settings.DB_STATEMENT_TIMEOUT_MS / 1000
        connect_args = {
            "command_timeout": timeout_s,
            "server_settings": {"statement_timeout": str(config_settings.DB_STATEMENT_TIMEOUT_MS)},
        }

    return create_async_engine(db_url, echo=echo, pool_pre_ping=True, connect_args=connect_args)


def build_session_maker(engine: AsyncEngine, isolation_level: Optional[str] = None) -> async_sessionmaker[AsyncSession]:
    bind = engine.execution_options(isolation_level=isolation_level) if isolation_level else engine
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False)
