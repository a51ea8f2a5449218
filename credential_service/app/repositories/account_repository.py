from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from credential_service.domain.entities import Account
from credential_service.libs.result import Result


class IAccountRepository(ABC):
    """
    Account repository interface - application layer

    Each method is a single attempt against the store. Driver failures are
    returned as Error values (STORE_TIMEOUT, CONFLICT, STORE_ERROR), never raised.
    """

    @abstractmethod
    async def get_by_email(self, email: str) -> Result[Optional[Account]]:
        """Get account by (normalized) email address"""
        pass

    @abstractmethod
    async def get_by_reset_token_hash(
        self, token_hash: str, now: datetime
    ) -> Result[Optional[Account]]:
        """Get account whose pending reset token matches and has not expired"""
        pass

    @abstractmethod
    async def create(self, account: Account) -> Result[Account]:
        """Create a new account"""
        pass

    @abstractmethod
    async def set_reset_token(
        self, account_id: UUID, token_hash: str, expires_at: datetime
    ) -> Result[None]:
        """Overwrite both reset fields"""
        pass

    @abstractmethod
    async def clear_reset_token(self, account_id: UUID, token_hash: str) -> Result[bool]:
        """Clear both reset fields if the stored hash still equals token_hash"""
        pass

    @abstractmethod
    async def apply_password_reset(
        self, account_id: UUID, token_hash: str, password_hash: str, now: datetime
    ) -> Result[bool]:
        """Write the new password hash and clear reset fields if the token is still live"""
        pass
