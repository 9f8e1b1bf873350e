"""
Encryption at rest for credential values.

Uses Fernet (symmetric AES + HMAC) via the cryptography library.
"""

from typing import Optional, Union

from cryptography.fernet import Fernet, InvalidToken


class CredentialCipher:
    """Encrypts credential values before they reach the storage medium."""

    def __init__(self, key: Union[str, bytes]):
        """
        Initialize the cipher.

        Args:
            key: URL-safe base64 encoded 32-byte Fernet key

        Raises:
            ValueError: If the key is not a valid Fernet key
        """
        if isinstance(key, str):
            key = key.encode("utf-8")
        self._fernet = Fernet(key)

    @staticmethod
    def generate_key() -> str:
        """Create a fresh key suitable for CREDENTIAL_ENCRYPTION_KEY."""
        return Fernet.generate_key().decode("utf-8")

    def encrypt(self, plain: str) -> str:
        """Encrypt a credential value for persistent storage."""
        return self._fernet.encrypt(plain.encode("utf-8")).decode("utf-8")

    def decrypt(self, ciphertext: str) -> Optional[str]:
        """
        Decrypt a previously encrypted value.

        Returns:
            The plaintext, or None when the value was written under a different
            key or has been tampered with
        """
        try:
            return self._fernet.decrypt(ciphertext.encode("utf-8")).decode("utf-8")
        except InvalidToken:
            return None
