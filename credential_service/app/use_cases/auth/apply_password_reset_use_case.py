"""
Apply Password Reset Use Case

Consumes a reset token and sets a new password.
"""

import asyncio
from datetime import datetime
from typing import Callable

from credential_service.app.services.credential_store import CredentialStore
from credential_service.app.services.password_hasher import PasswordHasher
from credential_service.app.services.reset_token_service import ResetTokenService
from credential_service.domain.clock import utcnow
from credential_service.domain.errors import invalid_or_expired_token
from credential_service.libs.result import Result, Return
from .dtos import RESET_APPLIED_MESSAGE, MessageResponse
from .validation import validate_password


class ApplyPasswordResetUseCase:
    """
    Use case for applying a password reset.

    Business Rules:
    - New password must meet the length rules
    - Submitted token is hashed before the store is queried; the query itself
      filters out expired tokens
    - Password update and token clearing happen in one conditional UPDATE, so a
      consumed or concurrently replaced token cannot be replayed
    - No session token is issued; the user signs in afterwards
    """

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        reset_tokens: ResetTokenService,
        password_min_length: int = 6,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.hasher = hasher
        self.reset_tokens = reset_tokens
        self.password_min_length = password_min_length
        self.clock = clock

    async def execute(self, raw_token: str, new_password: str) -> Result[MessageResponse]:
        """
        Returns:
            Result with success message, or VALIDATION_ERROR /
            INVALID_OR_EXPIRED_TOKEN / store errors
        """
        password_check = validate_password(new_password, self.password_min_length)
        if password_check.is_err():
            return Return.err(password_check.error)

        if not raw_token:
            return Return.err(invalid_or_expired_token())

        token_hash = self.reset_tokens.hash(raw_token)
        now = self.clock()

        lookup = await self.store.get_by_reset_token_hash(token_hash, now)
        if lookup.is_err():
            return Return.err(lookup.error)

        account = lookup.value
        if account is None or not self.reset_tokens.validate(
            raw_token, account.reset_token_hash, account.reset_token_expiry, now
        ):
            return Return.err(invalid_or_expired_token())

        password_hash = await asyncio.to_thread(self.hasher.hash, new_password)

        applied = await self.store.apply_password_reset(
            account.id, token_hash, password_hash, now
        )
        if applied.is_err():
            return Return.err(applied.error)
        if not applied.value:
            return Return.err(invalid_or_expired_token())

        return Return.ok(MessageResponse(message=RESET_APPLIED_MESSAGE))
