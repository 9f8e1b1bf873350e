"""
Unit tests for the credential store.
"""

import asyncio

import pytest

from eater.modules.credentials import CredentialCipher, CredentialStore

TEST_NAMESPACE = "com.eater.test"


@pytest.mark.asyncio
async def test_save_then_get_round_trip(store):
    """Test a saved value is returned exactly."""
    assert await store.save("session-token", "abc.def.ghi") is True
    assert await store.get("session-token") == "abc.def.ghi"


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["x", "with spaces and ünïcödé", "a" * 4096])
async def test_round_trip_various_values(store, value):
    """Test values of different shapes survive encryption."""
    await store.save("slot", value)
    assert await store.get("slot") == value


@pytest.mark.asyncio
async def test_values_are_encrypted_at_rest(store, redis_double):
    """Test plaintext never reaches the storage medium."""
    await store.save("token", "super-secret-token")

    raw = redis_double.storage[f"{TEST_NAMESPACE}:credential:token"]
    assert "super-secret-token" not in raw


@pytest.mark.asyncio
async def test_get_missing_key_returns_none(store):
    """Test absence is a normal outcome, not an error."""
    assert await store.get("nonExistentKey") is None


@pytest.mark.asyncio
async def test_overwrite_returns_new_value(store, redis_double):
    """Test overwriting never leaves the old value or a gap."""
    await store.save("token", "v1")
    assert await store.save("token", "v2") is True

    assert await store.get("token") == "v2"
    assert len([k for k in redis_double.storage if k.endswith(":token")]) == 1


@pytest.mark.asyncio
async def test_overwrite_runs_as_single_transaction(store, redis_double):
    """Test delete and insert are issued together."""
    await store.save("token", "v1")
    await store.save("token", "v2")

    assert redis_double.transactions == 2


@pytest.mark.asyncio
async def test_concurrent_saves_serialize(store):
    """Test the last completed write wins and no reader sees absence."""
    await store.save("token", "initial")

    async def reader():
        seen = []
        for _ in range(20):
            seen.append(await store.get("token"))
            await asyncio.sleep(0)
        return seen

    values = [f"v{i}" for i in range(10)]
    results = await asyncio.gather(reader(), *(store.save("token", v) for v in values))

    assert all(results[1:])
    assert None not in results[0]
    assert await store.get("token") == values[-1]


@pytest.mark.asyncio
async def test_delete_existing_value(store):
    """Test deletion removes the entry."""
    await store.save("token", "value")

    assert await store.delete("token") is True
    assert await store.get("token") is None


@pytest.mark.asyncio
async def test_delete_missing_value_succeeds(store):
    """Test deleting a non-existent key is still a success."""
    assert await store.delete("nonExistentKey") is True
    assert await store.get("nonExistentKey") is None


@pytest.mark.asyncio
async def test_exists(store):
    """Test existence check for saved and missing values."""
    await store.save("token", "value")

    assert await store.exists("token") is True
    assert await store.exists("nonExistentKey") is False


@pytest.mark.asyncio
async def test_multiple_keys_are_independent(store):
    """Test distinct slots do not interfere."""
    await store.save("key1", "value1")
    await store.save("key2", "value2")

    assert await store.get("key1") == "value1"
    assert await store.get("key2") == "value2"


@pytest.mark.asyncio
async def test_delete_all_only_clears_own_namespace(store, redis_double, cipher):
    """Test delete_all leaves other namespaces on the same medium alone."""
    other = CredentialStore(redis_double, cipher, namespace="com.other.app")
    await store.save("token", "mine")
    await store.save("userId", "me")
    await other.save("token", "theirs")

    assert await store.delete_all() is True

    assert await store.get("token") is None
    assert await store.get("userId") is None
    assert await other.get("token") == "theirs"


@pytest.mark.asyncio
async def test_delete_all_when_empty(store):
    """Test clearing an empty namespace succeeds."""
    assert await store.delete_all() is True


@pytest.mark.asyncio
async def test_value_from_other_key_is_inaccessible(redis_double):
    """Test a value encrypted under another device key reads as absent."""
    writer = CredentialStore(
        redis_double, CredentialCipher(CredentialCipher.generate_key()), TEST_NAMESPACE
    )
    reader = CredentialStore(
        redis_double, CredentialCipher(CredentialCipher.generate_key()), TEST_NAMESPACE
    )
    await writer.save("token", "value")

    assert await reader.get("token") is None
    assert await reader.exists("token") is True


@pytest.mark.asyncio
async def test_save_failure_returns_false(store, redis_double):
    """Test platform errors during save are reported, not raised."""
    redis_double.fail_ops.add("execute")

    assert await store.save("token", "value") is False


@pytest.mark.asyncio
async def test_read_failures_return_absent(store, redis_double):
    """Test platform errors during reads map to absent."""
    await store.save("token", "value")
    redis_double.fail_ops.update({"get", "exists"})

    assert await store.get("token") is None
    assert await store.exists("token") is False


@pytest.mark.asyncio
async def test_delete_failure_returns_false(store, redis_double):
    """Test platform errors during delete and delete_all are reported."""
    redis_double.fail_ops.update({"delete", "scan_iter"})

    assert await store.delete("token") is False
    assert await store.delete_all() is False


@pytest.mark.asyncio
async def test_empty_key_is_rejected(store):
    """Test saving under an empty key fails without touching storage."""
    assert await store.save("", "value") is False


def test_empty_namespace_is_rejected(redis_double, cipher):
    """Test a store must be scoped to a namespace."""
    with pytest.raises(ValueError):
        CredentialStore(redis_double, cipher, namespace="")


@pytest.mark.asyncio
async def test_migrate_from_legacy_mapping(store):
    """Test plaintext values move into encrypted slots."""
    legacy = {"firebaseToken": "legacy-token", "userId": "user-1", "other": "kept"}

    migrated = await store.migrate_from(legacy, {"firebaseToken": "token", "userId": "userId"})

    assert migrated == ["token", "userId"]
    assert await store.get("token") == "legacy-token"
    assert await store.get("userId") == "user-1"
    assert legacy == {"other": "kept"}


@pytest.mark.asyncio
async def test_migrate_keeps_legacy_value_on_failure(store, redis_double):
    """Test a failed save leaves the legacy value in place."""
    redis_double.fail_ops.add("execute")
    legacy = {"firebaseToken": "legacy-token"}

    migrated = await store.migrate_from(legacy, {"firebaseToken": "token"})

    assert migrated == []
    assert legacy == {"firebaseToken": "legacy-token"}
