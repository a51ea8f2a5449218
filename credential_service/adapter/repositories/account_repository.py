from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from credential_service.adapter.services.db_errors import returns_result
from credential_service.app.repositories.account_repository import IAccountRepository
from credential_service.domain.entities import Account
from credential_service.libs.result import Result, Return


class AccountRepository(IAccountRepository):
    """Account repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _detach(self, account: Optional[Account]) -> Optional[Account]:
        # The unit of work rolls back on exit, which would expire anything still attached
        if account is not None:
            self.session.expunge(account)
        return account

    @returns_result
    async def get_by_email(self, email: str) -> Result[Optional[Account]]:
        """Get account by email address"""
        stmt = select(Account).where(Account.email == email)
        result = await self.session.exec(stmt)
        return Return.ok(self._detach(result.one_or_none()))

    @returns_result
    async def get_by_reset_token_hash(
        self, token_hash: str, now: datetime
    ) -> Result[Optional[Account]]:
        """Get account by reset token hash, expiry filter applied in the query"""
        stmt = select(Account).where(
            Account.reset_token_hash == token_hash,
            Account.reset_token_expiry > now,
        )
        result = await self.session.exec(stmt)
        return Return.ok(self._detach(result.first()))

    @returns_result
    async def create(self, account: Account) -> Result[Account]:
        """Create a new account"""
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return Return.ok(account)

    @returns_result
    async def set_reset_token(
        self, account_id: UUID, token_hash: str, expires_at: datetime
    ) -> Result[None]:
        """Overwrite any pending reset token for the account"""
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(reset_token_hash=token_hash, reset_token_expiry=expires_at)
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return Return.ok(None)

    @returns_result
    async def clear_reset_token(self, account_id: UUID, token_hash: str) -> Result[bool]:
        """Clear the pending reset token unless a newer one replaced it"""
        stmt = (
            update(Account)
            .where(Account.id == account_id, Account.reset_token_hash == token_hash)
            .values(reset_token_hash=None, reset_token_expiry=None)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return Return.ok(result.rowcount > 0)

    @returns_result
    async def apply_password_reset(
        self, account_id: UUID, token_hash: str, password_hash: str, now: datetime
    ) -> Result[bool]:
        """Set the new password and consume the token in one statement"""
        stmt = (
            update(Account)
            .where(
                Account.id == account_id,
                Account.reset_token_hash == token_hash,
                Account.reset_token_expiry > now,
            )
            .values(
                password_hash=password_hash,
                reset_token_hash=None,
                reset_token_expiry=None,
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return Return.ok(result.rowcount > 0)
