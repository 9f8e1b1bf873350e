"""Authentication interfaces following Black Box Design principles."""
from typing import Optional, Protocol

from .models import Credentials


class Authenticator(Protocol):
    """
    Protocol for identity providers - allows swappable implementations.

    Every method raises AuthError with kind INVALID_CREDENTIALS, NETWORK_ERROR
    or SERVER_ERROR on failure.
    """

    async def sign_in(self, identifier: str, secret: str) -> Credentials:
        """
        Verify an identity.

        Args:
            identifier: E-mail address or account name
            secret: Password

        Returns:
            Issued user id, token and profile
        """
        ...

    async def sign_up(
        self, identifier: str, secret: str, display_name: Optional[str] = None
    ) -> Credentials:
        """Create an account and sign it in."""
        ...

    async def refresh_token(self, user_id: str, token: str, force: bool) -> str:
        """
        Get a fresh token for user_id.

        Args:
            user_id: Signed-in user
            token: Currently stored token
            force: Refresh even if the current token is still valid

        Returns:
            Token to store (may equal the current one when not forced)
        """
        ...

    async def sign_out(self, token: Optional[str]) -> None:
        """Invalidate the token on the provider side."""
        ...

    async def send_phone_verification(self, phone_number: str) -> str:
        """
        Send an SMS verification code.

        Returns:
            Verification id to present with the code
        """
        ...

    async def verify_phone_code(
        self, verification_id: str, code: str, phone_number: str
    ) -> Credentials:
        """Exchange a verification code for credentials."""
        ...
