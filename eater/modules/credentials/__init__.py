"""
Credentials Module - Black Box Interface

Purpose: Secure, persistent storage for session secrets
Interface: save(), get(), delete(), exists(), delete_all()
Hidden: Encryption at rest, storage key layout, per-key serialization

Replaceable with any secure store (OS keychain, vault) that keeps the
same absence semantics.
"""

from .cipher import CredentialCipher
from .store import CredentialStore

__all__ = ["CredentialCipher", "CredentialStore"]
