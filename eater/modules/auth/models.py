"""
Authentication result and error models.

These models define the values passed between the session manager,
its authenticator collaborators and the UI layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class AuthErrorKind(str, Enum):
    """Kinds of authentication failure."""

    INVALID_CREDENTIALS = "invalid_credentials"
    STORAGE_FAILURE = "storage_failure"
    NOT_AUTHENTICATED = "not_authenticated"
    NETWORK_ERROR = "network_error"
    SERVER_ERROR = "server_error"
    INVALID_PHONE_NUMBER = "invalid_phone_number"
    INVALID_VERIFICATION_CODE = "invalid_verification_code"


_MESSAGES = {
    AuthErrorKind.INVALID_CREDENTIALS: "Invalid email or password",
    AuthErrorKind.STORAGE_FAILURE: "We couldn't save your session. Please try again.",
    AuthErrorKind.NOT_AUTHENTICATED: "You are not signed in. Please sign in to continue.",
    AuthErrorKind.NETWORK_ERROR: "Network error. Check your connection and try again.",
    AuthErrorKind.INVALID_PHONE_NUMBER: (
        "Invalid phone number. Please use E.164 format (e.g., +14155551234)"
    ),
    AuthErrorKind.INVALID_VERIFICATION_CODE: (
        "Invalid verification code. Please check and try again."
    ),
}


class AuthError(Exception):
    """Typed authentication failure."""

    def __init__(
        self,
        kind: AuthErrorKind,
        detail: Optional[str] = None,
        code: Optional[int] = None,
    ):
        self.kind = kind
        self.detail = detail
        self.code = code
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """Single human-readable message for the UI."""
        if self.kind == AuthErrorKind.SERVER_ERROR:
            return f"Server error ({self.code}): {self.detail or 'Unknown error'}"
        return _MESSAGES[self.kind]

    @property
    def requires_sign_in(self) -> bool:
        """Whether the UI should route the user to the sign-in flow."""
        return self.kind == AuthErrorKind.NOT_AUTHENTICATED

    def __repr__(self) -> str:
        return f"AuthError(kind={self.kind.value!r}, code={self.code!r}, detail={self.detail!r})"


@dataclass
class UserProfile:
    """Optional profile data returned by an authenticator."""
    display_name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None


@dataclass
class Credentials:
    """Identity and opaque token issued by an authenticator."""
    user_id: str
    token: str
    profile: UserProfile = field(default_factory=UserProfile)


@dataclass
class Session:
    """Authenticated identity reconstructed from the credential slots."""
    user_id: str
    token: str = field(repr=False)
    display_name: Optional[str] = None
    phone_number: Optional[str] = None


class AuthStatus(str, Enum):
    """Outcome of an authentication operation."""

    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"
    FAILED = "failed"


@dataclass
class AuthResult:
    """Standardized authentication result."""
    status: AuthStatus
    session: Optional[Session] = None
    error: Optional[AuthError] = None
    verification_id: Optional[str] = None

    @classmethod
    def authenticated(cls, session: Session) -> "AuthResult":
        return cls(status=AuthStatus.AUTHENTICATED, session=session)

    @classmethod
    def unauthenticated(cls, verification_id: Optional[str] = None) -> "AuthResult":
        return cls(status=AuthStatus.UNAUTHENTICATED, verification_id=verification_id)

    @classmethod
    def failed(cls, error: AuthError) -> "AuthResult":
        return cls(status=AuthStatus.FAILED, error=error)

    @property
    def ok(self) -> bool:
        """True for every outcome except FAILED."""
        return self.status != AuthStatus.FAILED

    @property
    def error_kind(self) -> Optional[AuthErrorKind]:
        return self.error.kind if self.error else None
