"""
Request Password Reset Use Case

Issues a single-use reset token and emails it. The response never reveals
whether the account exists or whether the email was delivered.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from credential_service.app.services.credential_store import CredentialStore
from credential_service.app.services.notification_dispatcher import INotificationDispatcher
from credential_service.app.services.reset_token_service import ResetTokenService
from credential_service.domain.clock import utcnow
from credential_service.domain.entities import Account
from credential_service.libs.result import Result, Return
from .dtos import RESET_REQUESTED_MESSAGE, MessageResponse
from .validation import normalize_email

logger = logging.getLogger(__name__)

Scheduler = Callable[..., Any]


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Unknown email: same generic response, nothing persisted or sent
    - Token hash and expiry (10 minutes) overwrite any pending token
    - If the email cannot be delivered the pending token is cleared again,
      so no token stays live that the user could never have received
    - Only a failed lookup is reported to the caller
    """

    def __init__(
        self,
        store: CredentialStore,
        reset_tokens: ResetTokenService,
        dispatcher: INotificationDispatcher,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.reset_tokens = reset_tokens
        self.dispatcher = dispatcher
        self.clock = clock

    async def execute(
        self, email: str, schedule: Optional[Scheduler] = None
    ) -> Result[MessageResponse]:
        """
        Execute request password reset use case.

        Args:
            email: Account email
            schedule: Optional scheduler (e.g. BackgroundTasks.add_task). When
                given, token issuance and delivery run after the response, so
                existing and unknown emails answer in the same time.

        Returns:
            Result with the generic message, or the lookup error
        """
        lookup = await self.store.get_by_email(normalize_email(email))
        if lookup.is_err():
            return Return.err(lookup.error)

        account = lookup.value
        if account is not None:
            if schedule is not None:
                schedule(self.issue_and_dispatch, account)
            else:
                await self.issue_and_dispatch(account)

        return Return.ok(MessageResponse(message=RESET_REQUESTED_MESSAGE))

    async def issue_and_dispatch(self, account: Account) -> bool:
        """Persist a fresh token and email it; returns True if the email went out"""
        token = self.reset_tokens.generate(self.clock())

        persisted = await self.store.set_reset_token(
            account.id, token.token_hash, token.expires_at
        )
        if persisted.is_err():
            logger.error(
                f"Could not store reset token for account {account.id}: {persisted.error.code}"
            )
            # The write may have landed before the failure was reported
            await self._rollback(account, token.token_hash)
            return False

        sent = await self.dispatcher.send_reset_email(account.email, token.raw)
        if sent.is_err():
            logger.error(f"Reset email for account {account.id} failed: {sent.error.code}")
            await self._rollback(account, token.token_hash)
            return False

        return True

    async def _rollback(self, account: Account, token_hash: str) -> None:
        cleared = await self.store.clear_reset_token(account.id, token_hash)
        if cleared.is_err():
            logger.error(
                f"Rollback of reset token for account {account.id} failed: {cleared.error.code}"
            )
