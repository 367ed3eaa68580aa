import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from sqlmodel import SQLModel
from marketplace.db.connection import build_engine, build_session_maker
from marketplace.db.roles_seed import seed_roles
from marketplace.main import create_app
import marketplace.schema.full_schema  # noqa: F401  registers the tables on SQLModel.metadata


@pytest.fixture
async def engine(tmp_path):
    # a file db so the app and the test each get their own connections
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'marketplace_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_maker(engine):
    maker = build_session_maker(engine)
    async with maker() as session:
        await seed_roles(session)
    return maker


@pytest.fixture
async def db_session(session_maker):

    async with session_maker() as session:
        yield session


@pytest.fixture
def app(engine, session_maker):
    # sqlite has no REPEATABLE READ ,snapshot reads use the default level here
    return create_app(engine=engine, snapshot_isolation_level=None, strict_transitions=False)


@pytest.fixture
async def ac_client(app):
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
