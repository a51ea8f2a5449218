"""
Integration tests for applying a password reset
"""
import hashlib
import secrets
from datetime import timedelta

import bcrypt
import pytest
from httpx import AsyncClient

from credential_service.domain.clock import utcnow
from credential_service.domain.entities import Account
from credential_service.domain.errors import ErrorCode


async def create_account_with_reset_token(insert_account, email="reset@example.com", expired=False):
    """
    Helper to create an account with a pending reset token.

    Returns:
        Tuple of (Account, plain_token)
    """
    plain_token = secrets.token_hex(32)
    expiry = utcnow() - timedelta(minutes=1) if expired else utcnow() + timedelta(minutes=10)
    account = Account(
        email=email,
        password_hash=bcrypt.hashpw(b"OldPass123", bcrypt.gensalt(4)).decode(),
        reset_token_hash=hashlib.sha256(plain_token.encode()).hexdigest(),
        reset_token_expiry=expiry,
    )
    return await insert_account(account), plain_token


@pytest.mark.asyncio
async def test_successful_reset(client: AsyncClient, insert_account, fetch_account, test_data):
    account, token = await create_account_with_reset_token(insert_account)

    response = await client.post(f"/api/auth/reset-password/{token}", json={"password": "NewPass456"})

    assert response.status_code == 200
    assert response.json() == test_data.get("reset_applied_body")

    updated = await fetch_account("reset@example.com")
    assert bcrypt.checkpw(b"NewPass456", updated.password_hash.encode())
    assert updated.reset_token_hash is None
    assert updated.reset_token_expiry is None
    assert updated.created_at == account.created_at


@pytest.mark.asyncio
async def test_reset_does_not_issue_session_token(client: AsyncClient, insert_account):
    _, token = await create_account_with_reset_token(insert_account)

    response = await client.post(f"/api/auth/reset-password/{token}", json={"password": "NewPass456"})

    assert "token" not in response.json()


@pytest.mark.asyncio
async def test_token_is_single_use(client: AsyncClient, insert_account):
    _, token = await create_account_with_reset_token(insert_account)

    first = await client.post(f"/api/auth/reset-password/{token}", json={"password": "NewPass456"})
    replay = await client.post(f"/api/auth/reset-password/{token}", json={"password": "Other789"})

    assert first.status_code == 200
    assert replay.status_code == 400
    assert replay.json()["error"]["code"] == ErrorCode.INVALID_OR_EXPIRED_TOKEN


@pytest.mark.asyncio
async def test_expired_token_rejected(client: AsyncClient, insert_account, fetch_account):
    _, token = await create_account_with_reset_token(insert_account, expired=True)

    response = await client.post(f"/api/auth/reset-password/{token}", json={"password": "NewPass456"})

    assert response.status_code == 400
    assert response.json()["error"] == {
        "code": "INVALID_OR_EXPIRED_TOKEN",
        "message": "Invalid or expired token",
    }
    # Lazy invalidation: expiry alone does not clear the fields
    account = await fetch_account("reset@example.com")
    assert account.reset_token_hash is not None


@pytest.mark.asyncio
async def test_unknown_token_rejected(client: AsyncClient):
    response = await client.post(
        f"/api/auth/reset-password/{secrets.token_hex(32)}", json={"password": "NewPass456"}
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_weak_password_rejected(client: AsyncClient, insert_account, fetch_account):
    _, token = await create_account_with_reset_token(insert_account)

    response = await client.post(f"/api/auth/reset-password/{token}", json={"password": "abc"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == ErrorCode.VALIDATION_ERROR
    # Token still pending
    account = await fetch_account("reset@example.com")
    assert account.reset_token_hash is not None


@pytest.mark.asyncio
async def test_full_credential_lifecycle(client: AsyncClient, dispatcher, fetch_account):
    signup = await client.post("/api/auth/signup", json={"email": "a@x.com", "password": "secret1"})
    assert signup.status_code == 201
    assert signup.json()["token"]

    signin = await client.post("/api/auth/signin", json={"email": "a@x.com", "password": "secret1"})
    assert signin.status_code == 200
    assert signin.json()["email"] == "a@x.com"

    wrong = await client.post("/api/auth/signin", json={"email": "a@x.com", "password": "wrong"})
    assert wrong.status_code == 401
    assert wrong.json()["error"]["message"] == "Invalid credentials"

    forgot = await client.post("/api/auth/forgot-password", json={"email": "a@x.com"})
    assert forgot.status_code == 200
    assert (await fetch_account("a@x.com")).reset_token_hash is not None

    raw_token = dispatcher.last_token_for("a@x.com")
    reset = await client.post(f"/api/auth/reset-password/{raw_token}", json={"password": "secret2"})
    assert reset.status_code == 200

    old = await client.post("/api/auth/signin", json={"email": "a@x.com", "password": "secret1"})
    assert old.status_code == 401

    new = await client.post("/api/auth/signin", json={"email": "a@x.com", "password": "secret2"})
    assert new.status_code == 200
    assert new.json()["email"] == "a@x.com"
