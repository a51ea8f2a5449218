from unittest.mock import MagicMock

import pytest

from credential_service.app.use_cases.auth import SigninCommand, SigninUseCase
from credential_service.domain.entities import Account
from credential_service.domain.errors import ErrorCode
from credential_service.libs.result import Error, Return


@pytest.fixture
def account(hasher):
    return Account(email="a@x.com", password_hash=hasher.hash("secret1"))


@pytest.fixture
def use_case(mock_store, hasher, sessions):
    return SigninUseCase(mock_store, hasher, sessions)


@pytest.mark.asyncio
async def test_successful_signin(use_case, mock_store, account, sessions):
    mock_store.get_by_email.return_value = Return.ok(account)

    result = await use_case.execute(SigninCommand(email="a@x.com", password="secret1"))

    assert result.is_ok()
    assert result.value.email == "a@x.com"
    assert sessions.verify(result.value.token).value["sub"] == "a@x.com"


@pytest.mark.asyncio
async def test_signin_is_case_insensitive(use_case, mock_store, account):
    mock_store.get_by_email.return_value = Return.ok(account)

    result = await use_case.execute(SigninCommand(email="A@X.COM", password="secret1"))

    assert result.is_ok()
    mock_store.get_by_email.assert_awaited_once_with("a@x.com")


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_account_are_identical(use_case, mock_store, account):
    mock_store.get_by_email.return_value = Return.ok(account)
    wrong_password = await use_case.execute(SigninCommand(email="a@x.com", password="wrong"))

    mock_store.get_by_email.return_value = Return.ok(None)
    unknown = await use_case.execute(SigninCommand(email="b@x.com", password="secret1"))

    assert wrong_password.error.code == ErrorCode.INVALID_CREDENTIALS
    assert wrong_password.error == unknown.error
    assert wrong_password.error.message == "Invalid credentials"


@pytest.mark.asyncio
async def test_unknown_account_still_runs_a_hash_comparison(mock_store, hasher, sessions):
    spy = MagicMock(wraps=hasher)
    use_case = SigninUseCase(mock_store, spy, sessions)

    await use_case.execute(SigninCommand(email="b@x.com", password="secret1"))

    spy.dummy_verify.assert_called_once_with("secret1")


@pytest.mark.asyncio
async def test_malformed_hash_is_hash_error(use_case, mock_store):
    mock_store.get_by_email.return_value = Return.ok(
        Account(email="a@x.com", password_hash="corrupted")
    )

    result = await use_case.execute(SigninCommand(email="a@x.com", password="secret1"))

    assert result.error.code == ErrorCode.HASH_ERROR


@pytest.mark.asyncio
async def test_store_timeout_propagates(use_case, mock_store):
    mock_store.get_by_email.return_value = Return.err(Error(ErrorCode.STORE_TIMEOUT, "slow"))

    result = await use_case.execute(SigninCommand(email="a@x.com", password="secret1"))

    assert result.error.code == ErrorCode.STORE_TIMEOUT


@pytest.mark.asyncio
async def test_oversized_password_is_invalid_credentials_for_any_account(
    use_case, mock_store, account
):
    mock_store.get_by_email.return_value = Return.ok(account)
    existing = await use_case.execute(SigninCommand(email="a@x.com", password="x" * 80))

    mock_store.get_by_email.return_value = Return.ok(None)
    unknown = await use_case.execute(SigninCommand(email="b@x.com", password="x" * 80))

    assert existing.error.code == ErrorCode.INVALID_CREDENTIALS
    assert existing.error == unknown.error
