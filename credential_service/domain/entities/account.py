"""
Account Entity

A set of credentials identified by an email address.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from credential_service.domain.clock import utcnow


class Account(SQLModel, table=True):
    """
    Account entity - credentials for one email identifier.

    Business Rules:
    - Email is unique, stored trimmed and lower-cased
    - Password stored as bcrypt hash, computed before the account is built
    - reset_token_hash (SHA-256) and reset_token_expiry are set and cleared together
    - A reset token is only valid while reset_token_expiry > now
    - created_at is set once and never updated
    """

    __tablename__ = "accounts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    # Password reset (SHA-256 hex digest of the emailed token)
    reset_token_hash: Optional[str] = Field(default=None, max_length=64)
    reset_token_expiry: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )

    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (
        Index("idx_account_reset_token", "reset_token_hash", "reset_token_expiry"),
    )

    def has_pending_reset(self, now: datetime) -> bool:
        return (
            self.reset_token_hash is not None
            and self.reset_token_expiry is not None
            and self.reset_token_expiry > now
        )
