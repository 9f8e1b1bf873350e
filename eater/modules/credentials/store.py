import asyncio
import logging
from typing import Dict, List, Mapping, MutableMapping, Optional

from redis.exceptions import RedisError

from .cipher import CredentialCipher

logger = logging.getLogger(__name__)

# Errors the storage medium can surface; mapped to False/None, never raised
STORAGE_ERRORS = (RedisError, OSError)


class CredentialStore:
    """
    Encrypted, namespaced key/value store for session secrets.

    Every value is encrypted with the injected cipher before it is written.
    Absence is a normal outcome: reads return None and deletes of missing
    keys succeed. Platform failures are logged and reported as False/None;
    retry policy belongs to the caller.
    """

    def __init__(self, redis_client, cipher: CredentialCipher, namespace: str):
        """
        Initialize credential store.

        Args:
            redis_client: Async Redis client (decode_responses=True)
            cipher: Cipher used for values at rest
            namespace: Service identifier scoping every entry
        """
        if not namespace:
            raise ValueError("namespace must be a non-empty string")

        self.redis = redis_client
        self.cipher = cipher
        self.namespace = namespace
        self._locks: Dict[str, asyncio.Lock] = {}

    def _storage_key(self, key: str) -> str:
        return f"{self.namespace}:credential:{key}"

    def _lock_for(self, key: str) -> asyncio.Lock:
        return self._locks.setdefault(key, asyncio.Lock())

    async def save(self, key: str, value: str) -> bool:
        """
        Store value under key, replacing any existing value.

        The delete and insert run as one MULTI/EXEC transaction while the
        key's lock is held, so readers see either the old or the new value
        and concurrent writers to the same key serialize.

        Args:
            key: Credential slot name
            value: Secret or identifier to store

        Returns:
            True if stored, False on invalid input or storage failure
        """
        if not key or not isinstance(value, str):
            logger.warning("Refusing to save credential with empty key or non-string value")
            return False

        storage_key = self._storage_key(key)
        encrypted = self.cipher.encrypt(value)

        async with self._lock_for(key):
            try:
                async with self.redis.pipeline(transaction=True) as pipe:
                    pipe.delete(storage_key)
                    pipe.set(storage_key, encrypted)
                    await pipe.execute()
            except STORAGE_ERRORS as e:
                logger.error(f"Failed to save credential '{key}': {e}")
                return False

        return True

    async def get(self, key: str) -> Optional[str]:
        """
        Get the current value for key.

        Returns:
            The stored value, or None if absent, undecryptable or unreadable
        """
        try:
            data = await self.redis.get(self._storage_key(key))
        except STORAGE_ERRORS as e:
            logger.error(f"Failed to read credential '{key}': {e}")
            return None

        if data is None:
            return None

        value = self.cipher.decrypt(data)
        if value is None:
            # Written under another device key; treat as inaccessible
            logger.warning(f"Credential '{key}' could not be decrypted")
        return value

    async def delete(self, key: str) -> bool:
        """
        Remove key if present.

        Returns:
            True when the entry was removed or did not exist, False on storage failure
        """
        async with self._lock_for(key):
            try:
                await self.redis.delete(self._storage_key(key))
            except STORAGE_ERRORS as e:
                logger.error(f"Failed to delete credential '{key}': {e}")
                return False
        return True

    async def exists(self, key: str) -> bool:
        """Check whether key holds a value without decrypting it."""
        try:
            return await self.redis.exists(self._storage_key(key)) > 0
        except STORAGE_ERRORS as e:
            logger.error(f"Failed to check credential '{key}': {e}")
            return False

    async def delete_all(self) -> bool:
        """
        Remove every entry in this store's namespace.

        Entries belonging to other namespaces on the same Redis database are
        left untouched.

        Returns:
            True on success (including when nothing was stored)
        """
        pattern = self._storage_key("*")
        try:
            keys = [key async for key in self.redis.scan_iter(match=pattern)]
            if keys:
                await self.redis.delete(*keys)
        except STORAGE_ERRORS as e:
            logger.error(f"Failed to clear credentials in namespace '{self.namespace}': {e}")
            return False

        logger.info(f"Cleared {len(keys)} credential(s) in namespace '{self.namespace}'")
        return True

    async def migrate_from(
        self, source: MutableMapping[str, str], keys: Mapping[str, str]
    ) -> List[str]:
        """
        Move plaintext values from a legacy store into encrypted slots.

        Args:
            source: Legacy mapping holding plaintext values (e.g. loaded preferences)
            keys: Legacy name -> credential slot name, migrated in order

        Returns:
            Slot names that were migrated. A value is removed from source only
            after it was saved successfully.
        """
        migrated = []
        for legacy_key, slot in keys.items():
            value = source.get(legacy_key)
            if value is None:
                continue

            if await self.save(slot, value):
                del source[legacy_key]
                migrated.append(slot)
                logger.info(f"Migrated '{legacy_key}' into credential slot '{slot}'")
            else:
                logger.error(f"Migration of '{legacy_key}' failed; legacy value kept")

        return migrated
