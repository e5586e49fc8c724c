import asyncio
import time

from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from app.core.errors import ConcurrencyConflict, StorageUnavailable, storage_error_from
from app.core.locks import KeyedLockStore
from app.core.security import create_session_token, verify_session_token


def test_session_token_round_trip():
    token = create_session_token("user:with:colons")
    assert verify_session_token(token) == "user:with:colons"


def test_tampered_token_is_rejected():
    token = create_session_token("alice")
    encoded, sig = token.rsplit(".", 1)
    assert verify_session_token(encoded + "." + "0" * len(sig)) is None
    assert verify_session_token("not-a-token") is None
    assert verify_session_token("") is None


def test_expired_token_is_rejected():
    token = create_session_token("alice", issued_at=int(time.time()) - 60 * 60 * 24 * 365)
    assert verify_session_token(token) is None


def test_integrity_error_is_a_conflict():
    exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
    assert isinstance(storage_error_from(exc), ConcurrencyConflict)


def test_locked_database_is_a_conflict():
    exc = OperationalError("UPDATE", {}, Exception("database is locked"))
    assert isinstance(storage_error_from(exc), ConcurrencyConflict)


def test_other_failures_are_unavailable():
    lost = OperationalError("SELECT", {}, Exception("could not connect to server"))
    assert isinstance(storage_error_from(lost), StorageUnavailable)
    assert isinstance(storage_error_from(ProgrammingError("SELECT", {}, Exception("boom"))), StorageUnavailable)
    assert storage_error_from(ConnectionRefusedError("refused")).status_code == 503


async def test_keyed_locks_serialize_one_key_only():
    locks = KeyedLockStore()
    events = []

    async def worker(key, name):
        async with locks.hold(key):
            events.append(f"{name}-in")
            await asyncio.sleep(0.01)
            events.append(f"{name}-out")

    await asyncio.gather(worker("k", "a"), worker("k", "b"))
    assert events == ["a-in", "a-out", "b-in", "b-out"]

    events.clear()
    await asyncio.gather(worker("x", "a"), worker("y", "b"))
    assert events[:2] == ["a-in", "b-in"]
    assert len(locks) == 0


async def test_keyed_lock_released_on_error():
    locks = KeyedLockStore()
    try:
        async with locks.hold("k"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert len(locks) == 0
    async with locks.hold("k"):
        assert len(locks) == 1
