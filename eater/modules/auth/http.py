"""
HTTP authenticator implementing the Authenticator interface.

This module follows Black Box Design principles:
- Implements Authenticator protocol
- Accepts configuration and HTTP client via dependency injection
- Translates transport and status failures into AuthError kinds
"""

import logging
from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..api.models import (
    ErrorResponse,
    PhoneVerificationRequest,
    PhoneVerificationResponse,
    RefreshRequest,
    RefreshResponse,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
    VerifyPhoneRequest,
)
from .models import AuthError, AuthErrorKind, Credentials, UserProfile

logger = logging.getLogger(__name__)

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)


class HttpAuthenticator:
    """
    Authenticates against the eater backend's /api/auth endpoints.

    Status mapping:
    - 400/401/403: INVALID_CREDENTIALS (INVALID_VERIFICATION_CODE for phone codes)
    - other non-2xx or unparsable body: SERVER_ERROR
    - transport errors and timeouts: NETWORK_ERROR
    """

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        """
        Initialize HTTP authenticator.

        Args:
            base_url: Backend root, e.g. https://api.example.com
            client: Optional pre-built client (tests inject a mock transport)
            timeout: Request timeout in seconds when building the client
        """
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self):
        await self.client.aclose()

    async def _post(
        self,
        path: str,
        body: Optional[BaseModel],
        response_model: Optional[Type[ResponseModel]],
        rejected_kind: AuthErrorKind = AuthErrorKind.INVALID_CREDENTIALS,
        token: Optional[str] = None,
    ) -> Optional[ResponseModel]:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        try:
            response = await self.client.post(
                f"{self.base_url}{path}",
                json=body.model_dump(by_alias=True, exclude_none=True) if body else {},
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Auth request to {path} failed: {type(e).__name__}")
            raise AuthError(AuthErrorKind.NETWORK_ERROR, str(e)) from e

        if response.status_code in (400, 401, 403):
            raise AuthError(rejected_kind, self._error_detail(response), code=response.status_code)

        if not response.is_success:
            raise AuthError(
                AuthErrorKind.SERVER_ERROR,
                self._error_detail(response),
                code=response.status_code,
            )

        if response_model is None:
            return None

        try:
            return response_model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise AuthError(
                AuthErrorKind.SERVER_ERROR, "Invalid response", code=response.status_code
            ) from e

    @staticmethod
    def _error_detail(response: httpx.Response) -> Optional[str]:
        try:
            return ErrorResponse.model_validate(response.json()).detail
        except (ValueError, ValidationError):
            return response.text or None

    @staticmethod
    def _to_credentials(payload: TokenResponse) -> Credentials:
        return Credentials(
            user_id=payload.user.uid,
            token=payload.token,
            profile=UserProfile(
                display_name=payload.user.display_name,
                phone_number=payload.user.phone_number,
                email=payload.user.email,
            ),
        )

    async def sign_in(self, identifier: str, secret: str) -> Credentials:
        payload = await self._post(
            "/api/auth/signin", SignInRequest(email=identifier, password=secret), TokenResponse
        )
        return self._to_credentials(payload)

    async def sign_up(
        self, identifier: str, secret: str, display_name: Optional[str] = None
    ) -> Credentials:
        payload = await self._post(
            "/api/auth/signup",
            SignUpRequest(email=identifier, password=secret, display_name=display_name),
            TokenResponse,
        )
        return self._to_credentials(payload)

    async def refresh_token(self, user_id: str, token: str, force: bool) -> str:
        payload = await self._post(
            "/api/auth/refresh",
            RefreshRequest(user_id=user_id, force=force),
            RefreshResponse,
            token=token,
        )
        return payload.token

    async def sign_out(self, token: Optional[str]) -> None:
        if token is None:
            return
        await self._post("/api/auth/signout", None, None, token=token)

    async def send_phone_verification(self, phone_number: str) -> str:
        payload = await self._post(
            "/api/auth/send-verification",
            PhoneVerificationRequest(phone_number=phone_number),
            PhoneVerificationResponse,
            rejected_kind=AuthErrorKind.INVALID_PHONE_NUMBER,
        )
        return payload.verification_id

    async def verify_phone_code(
        self, verification_id: str, code: str, phone_number: str
    ) -> Credentials:
        payload = await self._post(
            "/api/auth/verify-phone",
            VerifyPhoneRequest(
                verification_id=verification_id, code=code, phone_number=phone_number
            ),
            TokenResponse,
            rejected_kind=AuthErrorKind.INVALID_VERIFICATION_CODE,
        )
        return self._to_credentials(payload)
