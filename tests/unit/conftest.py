from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from credential_service.app.services.password_hasher import PasswordHasher
from credential_service.app.services.reset_token_service import ResetTokenService
from credential_service.app.services.session_issuer import SessionIssuer
from credential_service.libs.result import Return

FIXED_NOW = datetime(2026, 1, 15, 12, 0, 0)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock(return_value=Return.ok(None))
    uow.rollback = AsyncMock()

    uow.accounts = MagicMock()
    uow.accounts.get_by_email = AsyncMock(return_value=Return.ok(None))
    uow.accounts.get_by_reset_token_hash = AsyncMock(return_value=Return.ok(None))
    uow.accounts.create = AsyncMock()
    uow.accounts.set_reset_token = AsyncMock(return_value=Return.ok(None))
    uow.accounts.clear_reset_token = AsyncMock(return_value=Return.ok(True))
    uow.accounts.apply_password_reset = AsyncMock(return_value=Return.ok(True))
    return uow


@pytest.fixture
def mock_store():
    """CredentialStore stand-in: every operation succeeds with an empty result"""
    store = MagicMock()
    store.get_by_email = AsyncMock(return_value=Return.ok(None))
    store.get_by_reset_token_hash = AsyncMock(return_value=Return.ok(None))
    store.create = AsyncMock(side_effect=lambda account: Return.ok(account))
    store.set_reset_token = AsyncMock(return_value=Return.ok(None))
    store.clear_reset_token = AsyncMock(return_value=Return.ok(True))
    store.apply_password_reset = AsyncMock(return_value=Return.ok(True))
    return store


@pytest.fixture
def hasher():
    # Lowest bcrypt cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def reset_tokens():
    return ResetTokenService(ttl=timedelta(minutes=10))


@pytest.fixture
def sessions():
    return SessionIssuer("unit-test-secret", ttl=timedelta(hours=24))
