import asyncio
import logging

from credential_service.app.services.credential_store import CredentialStore
from credential_service.app.services.password_hasher import PasswordHasher
from credential_service.app.services.session_issuer import SessionIssuer
from credential_service.domain.errors import invalid_credentials
from credential_service.libs.result import Result, Return
from .dtos import AuthResponse, SigninCommand
from .validation import normalize_email

logger = logging.getLogger(__name__)


class SigninUseCase:
    """
    Use case for password sign-in.

    Business Rules:
    - Unknown email and wrong password return the same INVALID_CREDENTIALS error
    - A bcrypt comparison runs in both cases so response time does not reveal
      whether the account exists
    """

    def __init__(self, store: CredentialStore, hasher: PasswordHasher, sessions: SessionIssuer):
        self.store = store
        self.hasher = hasher
        self.sessions = sessions

    async def execute(self, command: SigninCommand) -> Result[AuthResponse]:
        email = normalize_email(command.email)

        lookup = await self.store.get_by_email(email)
        if lookup.is_err():
            return Return.err(lookup.error)

        account = lookup.value
        if account is None:
            await asyncio.to_thread(self.hasher.dummy_verify, command.password)
            return Return.err(invalid_credentials())

        verified = await asyncio.to_thread(
            self.hasher.verify, command.password, account.password_hash
        )
        if verified.is_err():
            logger.error(f"Account {account.id} has a malformed password hash")
            return Return.err(verified.error)
        if not verified.value:
            return Return.err(invalid_credentials())

        token = self.sessions.issue(account.email)
        return Return.ok(AuthResponse(token=token, email=account.email))
