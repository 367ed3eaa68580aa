from typing import Sequence
from uuid import UUID
from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from marketplace.common.utils import build_error, json_error
from marketplace.user.dependencies import Authentication
from marketplace.user.repository import  identify_user_by_pid
from marketplace.middlewares.constants import logger


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Maps a bearer token to a verified user id on request.state before any route runs."""

    def __init__(self, app, *, session_maker, paths: Sequence[str]):
        super().__init__(app)
        self.session_maker = session_maker
        self.paths = tuple(paths)

    def _reject(self, reason: str, request: Request):
        logger.warning("auth.middleware.failed", extra={
            "reason": reason,
            "path": request.url.path,
            "method": request.method
        })
        payload = build_error(code="INVALID_AUTH", details={"message":"Missing or Invalid Auth Headers"})
        return json_error(payload, status_code=status.HTTP_401_UNAUTHORIZED)

    async def dispatch(self, request: Request, call_next):

        if any(request.url.path.startswith(p) for p in self.paths):
            return await call_next(request)

        try:
            auth_token = await Authentication()(request)
        except Exception as e:
            return self._reject(getattr(e, "detail", "Missing or Invalid Auth Headers"), request)

        user_pid = auth_token.get("sub")
        try:
            user_pid = UUID(str(user_pid))
        except ValueError:
            return self._reject("malformed subject claim", request)

        async with self.session_maker() as session:
            user_identifier=await identify_user_by_pid(session,user_pid)

        if not user_identifier:
            logger.warning("auth.middleware.user_not_found", extra={
                "user_public_id": str(user_pid),
                "path": request.url.path
            })
            payload = build_error(code="INVALID_AUTH", details={"message":"User unidentified and not authorized"})
            return json_error(payload, status_code=status.HTTP_401_UNAUTHORIZED)

        request.state.user_identifier = user_identifier

        logger.debug("auth.middleware.success", extra={
            "user_public_id": str(user_pid),
            "path": request.url.path
        })

        return await call_next(request)
