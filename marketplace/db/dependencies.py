from typing import AsyncGenerator
from fastapi import Request
from sqlalchemy.ext.asyncio import  AsyncSession


async def get_session(request: Request) -> AsyncGenerator[AsyncSession,None]:
    # closing the session without a commit rolls back whatever the request wrote
    async with request.app.state.session_maker() as session:
        yield session


async def get_snapshot_session(request: Request) -> AsyncGenerator[AsyncSession,None]:
    """Session whose transaction runs at the configured snapshot isolation level."""
    async with request.app.state.snapshot_session_maker() as session:
        yield session
