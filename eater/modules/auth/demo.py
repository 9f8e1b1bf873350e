"""
Demo authenticator that accepts any credentials.

Lets the app be shown without an identity backend. It honors the same
Authenticator contract as the HTTP implementation, so the session manager
behaves identically with either.
"""

import asyncio
import logging
import secrets
import uuid
from typing import Dict, Optional

from .models import AuthError, AuthErrorKind, Credentials, UserProfile

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@eater.app"
DEMO_PASSWORD = "demo123"
DEMO_PHONE_NUMBER = "+14155551234"


class DemoAuthenticator:
    """Success-always authenticator with a simulated network delay."""

    def __init__(self, network_delay: float = 0.0):
        """
        Initialize demo authenticator.

        Args:
            network_delay: Seconds to sleep per call, to mimic a round trip
        """
        self.network_delay = network_delay
        self._pending_verifications: Dict[str, str] = {}

    async def _simulate_network(self):
        if self.network_delay > 0:
            await asyncio.sleep(self.network_delay)

    @staticmethod
    def _new_user_id() -> str:
        return f"demo_{uuid.uuid4().hex[:8]}"

    @staticmethod
    def _new_token() -> str:
        return f"demo_token_{uuid.uuid4()}"

    async def sign_in(self, identifier: str, secret: str) -> Credentials:
        await self._simulate_network()

        local_part = identifier.split("@")[0]
        display_name = local_part.capitalize() if local_part else "Demo User"
        logger.info(f"Demo mode: signed in as {display_name}")

        return Credentials(
            user_id=self._new_user_id(),
            token=self._new_token(),
            profile=UserProfile(
                display_name=display_name,
                phone_number=DEMO_PHONE_NUMBER,
                email=identifier,
            ),
        )

    async def sign_up(
        self, identifier: str, secret: str, display_name: Optional[str] = None
    ) -> Credentials:
        await self._simulate_network()
        logger.info(f"Demo mode: created account for {display_name or 'Demo User'}")

        return Credentials(
            user_id=self._new_user_id(),
            token=self._new_token(),
            profile=UserProfile(
                display_name=display_name or "Demo User",
                phone_number=DEMO_PHONE_NUMBER,
                email=identifier,
            ),
        )

    async def refresh_token(self, user_id: str, token: str, force: bool) -> str:
        await self._simulate_network()
        if not force:
            return token
        return self._new_token()

    async def sign_out(self, token: Optional[str]) -> None:
        await self._simulate_network()

    async def send_phone_verification(self, phone_number: str) -> str:
        await self._simulate_network()
        verification_id = secrets.token_urlsafe(16)
        # Any six-digit code is accepted for a known verification id
        self._pending_verifications[verification_id] = phone_number
        return verification_id

    async def verify_phone_code(
        self, verification_id: str, code: str, phone_number: str
    ) -> Credentials:
        await self._simulate_network()
        if self._pending_verifications.pop(verification_id, None) is None:
            raise AuthError(AuthErrorKind.INVALID_VERIFICATION_CODE, "Unknown verification id")

        return Credentials(
            user_id=self._new_user_id(),
            token=self._new_token(),
            profile=UserProfile(phone_number=phone_number),
        )
