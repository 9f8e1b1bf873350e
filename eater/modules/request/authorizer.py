"""
Authorization policy for outbound requests.

Attaches the current session token to requests that need it and refuses,
with a typed error, to let an unauthenticated request leave the client.
"""

import logging
from typing import AsyncGenerator, Generator

import httpx

from ..auth.models import AuthError, AuthErrorKind
from ..session import SessionManager

logger = logging.getLogger(__name__)


class AuthorizedRequestBuilder(httpx.Auth):
    """
    httpx auth flow backed by the session manager.

    Use directly via authorize(), or pass as ``auth=`` to an
    httpx.AsyncClient so every request goes through it.
    """

    requires_request_body = False

    def __init__(
        self,
        session_manager: SessionManager,
        header_name: str = "Authorization",
        scheme: str = "Bearer",
    ):
        """
        Initialize request builder.

        Args:
            session_manager: Source of the current session token
            header_name: Header carrying the token
            scheme: Prefix placed before the token; empty for a bare token
        """
        self.session_manager = session_manager
        self.header_name = header_name
        self.scheme = scheme

    def header_value(self, token: str) -> str:
        return f"{self.scheme} {token}" if self.scheme else token

    async def authorize(self, request: httpx.Request) -> httpx.Request:
        """
        Attach the session token to request.

        Returns:
            The same request with the authorization header set

        Raises:
            AuthError: NOT_AUTHENTICATED when no session exists; the request
                is left untouched
        """
        session = await self.session_manager.current_session()
        if session is None:
            logger.info(f"Blocked unauthenticated {request.method} {request.url.path}")
            raise AuthError(AuthErrorKind.NOT_AUTHENTICATED)

        request.headers[self.header_name] = self.header_value(session.token)
        return request

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        yield await self.authorize(request)

    def sync_auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        raise RuntimeError("AuthorizedRequestBuilder requires an httpx.AsyncClient")
        yield request  # pragma: no cover
