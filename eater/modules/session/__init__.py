"""
Session Module - Black Box Interface

Purpose: Own the authenticated/unauthenticated state machine
Interface: sign_in(), sign_up(), sign_out(), current_session(), refresh_token()
Hidden: Credential slot names, write ordering, operation serialization

The only component that reads or writes the session's credential slots.
"""

from .session import TOKEN_KEY, USER_ID_KEY, SessionManager

__all__ = ["SessionManager", "TOKEN_KEY", "USER_ID_KEY"]
