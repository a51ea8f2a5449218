"""
Credential Store

Every read and write of Account records goes through here. Each operation:
- fails fast with STORE_UNAVAILABLE when the database is not ready (no retry)
- runs each attempt in its own unit of work, bounded by the attempt timeout
- retries STORE_TIMEOUT with exponential backoff up to the retry budget
- returns CONFLICT and STORE_ERROR immediately
"""

import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional
from uuid import UUID

from credential_service.app.repositories.account_repository import IAccountRepository
from credential_service.app.services.retry_policy import RetryPolicy
from credential_service.app.services.unit_of_work import UnitOfWork
from credential_service.domain.entities import Account
from credential_service.domain.errors import (
    RETRYABLE_STORE_ERRORS,
    ErrorCode,
    store_unavailable,
)
from credential_service.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


def _is_retryable(error: Error) -> bool:
    return error.code in RETRYABLE_STORE_ERRORS


def _attempt_timed_out() -> Error:
    return Error(ErrorCode.STORE_TIMEOUT, "Store operation exceeded its time limit")


class CredentialStore:
    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        is_ready: Callable[[], bool],
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self._uow_factory = uow_factory
        self._is_ready = is_ready
        self.retry_policy = retry_policy or RetryPolicy(attempt_timeout=15.0)

    async def _execute(
        self,
        operation_name: str,
        action: Callable[[IAccountRepository], Awaitable[Result]],
        write: bool = False,
    ) -> Result:
        if not self._is_ready():
            logger.error(f"{operation_name}: store is not ready")
            return Return.err(store_unavailable())

        async def attempt() -> Result:
            async with self._uow_factory() as uow:
                result = await action(uow.accounts)
                if result.is_ok() and write:
                    committed = await uow.commit()
                    if committed.is_err():
                        return committed
                return result

        return await self.retry_policy.run(
            operation_name,
            attempt,
            is_retryable=_is_retryable,
            on_timeout=_attempt_timed_out,
        )

    async def get_by_email(self, email: str) -> Result[Optional[Account]]:
        return await self._execute(
            "get_by_email", lambda accounts: accounts.get_by_email(email)
        )

    async def get_by_reset_token_hash(
        self, token_hash: str, now: datetime
    ) -> Result[Optional[Account]]:
        return await self._execute(
            "get_by_reset_token_hash",
            lambda accounts: accounts.get_by_reset_token_hash(token_hash, now),
        )

    async def create(self, account: Account) -> Result[Account]:
        return await self._execute(
            "create_account", lambda accounts: accounts.create(account), write=True
        )

    async def set_reset_token(
        self, account_id: UUID, token_hash: str, expires_at: datetime
    ) -> Result[None]:
        return await self._execute(
            "set_reset_token",
            lambda accounts: accounts.set_reset_token(account_id, token_hash, expires_at),
            write=True,
        )

    async def clear_reset_token(self, account_id: UUID, token_hash: str) -> Result[bool]:
        return await self._execute(
            "clear_reset_token",
            lambda accounts: accounts.clear_reset_token(account_id, token_hash),
            write=True,
        )

    async def apply_password_reset(
        self, account_id: UUID, token_hash: str, password_hash: str, now: datetime
    ) -> Result[bool]:
        return await self._execute(
            "apply_password_reset",
            lambda accounts: accounts.apply_password_reset(
                account_id, token_hash, password_hash, now
            ),
            write=True,
        )
