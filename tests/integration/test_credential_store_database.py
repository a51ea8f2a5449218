"""
CredentialStore against a real aiosqlite database

Every account handed back by the store has left its unit of work by the time
the caller sees it, so its attributes must be readable without a session.
"""
from datetime import timedelta

import pytest

from credential_service.domain.clock import utcnow
from credential_service.domain.entities import Account


@pytest.fixture
def store(app):
    return app.state.services.store


@pytest.mark.asyncio
async def test_looked_up_account_is_readable_after_scope(store):
    created = await store.create(Account(email="a@x.com", password_hash="$2b$04$" + "a" * 53))
    assert created.is_ok()

    result = await store.get_by_email("a@x.com")

    assert result.is_ok()
    account = result.value
    assert account.id == created.value.id
    assert account.email == "a@x.com"
    assert account.password_hash.startswith("$2b$04$")
    assert account.reset_token_hash is None
    assert account.created_at is not None


@pytest.mark.asyncio
async def test_created_account_is_readable_after_scope(store):
    result = await store.create(Account(email="b@x.com", password_hash="hash"))

    assert result.is_ok()
    assert result.value.email == "b@x.com"
    assert result.value.id is not None


@pytest.mark.asyncio
async def test_reset_token_lifecycle(store):
    now = utcnow()
    account = (await store.create(Account(email="c@x.com", password_hash="old"))).value
    token_hash = "d" * 64

    assert (await store.set_reset_token(account.id, token_hash, now + timedelta(minutes=10))).is_ok()

    found = await store.get_by_reset_token_hash(token_hash, now)
    assert found.is_ok()
    assert found.value.id == account.id
    assert found.value.has_pending_reset(now)

    applied = await store.apply_password_reset(account.id, token_hash, "new", now)
    replayed = await store.apply_password_reset(account.id, token_hash, "newer", now)

    assert applied.value is True
    assert replayed.value is False
    reread = (await store.get_by_email("c@x.com")).value
    assert reread.password_hash == "new"
    assert reread.reset_token_hash is None
    assert reread.reset_token_expiry is None


@pytest.mark.asyncio
async def test_expired_token_is_not_found(store):
    now = utcnow()
    account = (await store.create(Account(email="e@x.com", password_hash="old"))).value
    await store.set_reset_token(account.id, "e" * 64, now - timedelta(seconds=1))

    found = await store.get_by_reset_token_hash("e" * 64, now)

    assert found.is_ok()
    assert found.value is None


@pytest.mark.asyncio
async def test_clear_leaves_newer_token_alone(store):
    now = utcnow()
    account = (await store.create(Account(email="f@x.com", password_hash="old"))).value
    await store.set_reset_token(account.id, "1" * 64, now + timedelta(minutes=10))
    await store.set_reset_token(account.id, "2" * 64, now + timedelta(minutes=10))

    cleared = await store.clear_reset_token(account.id, "1" * 64)

    assert cleared.value is False
    assert (await store.get_by_email("f@x.com")).value.reset_token_hash == "2" * 64
