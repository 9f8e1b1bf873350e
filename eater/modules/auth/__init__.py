"""
Authentication Module - Black Box Interface

Purpose: Verify identities and issue opaque tokens
Interface: Authenticator protocol, AuthResult, AuthError
Hidden: Backend endpoints, demo behavior, wire formats

Any Authenticator implementation can be swapped in without affecting
the session manager.
"""

from .demo import DemoAuthenticator
from .http import HttpAuthenticator
from .interfaces import Authenticator
from .models import (
    AuthError,
    AuthErrorKind,
    AuthResult,
    AuthStatus,
    Credentials,
    Session,
    UserProfile,
)

__all__ = [
    "AuthError",
    "AuthErrorKind",
    "AuthResult",
    "AuthStatus",
    "Authenticator",
    "Credentials",
    "DemoAuthenticator",
    "HttpAuthenticator",
    "Session",
    "UserProfile",
]
