import asyncio

from credential_service.app.services.credential_store import CredentialStore
from credential_service.app.services.password_hasher import PasswordHasher
from credential_service.app.services.session_issuer import SessionIssuer
from credential_service.domain.entities import Account
from credential_service.domain.errors import ErrorCode
from credential_service.libs.result import Error, Result, Return
from .dtos import AuthResponse, SignupCommand
from .validation import validate_identifier, validate_password


class SignupUseCase:
    """
    Signup Use Case

    Business Logic:
    1. Validate email shape and password length
    2. Check if email already exists
    3. Hash password with bcrypt before building the Account
    4. Create Account (a concurrent signup losing the unique index race is a CONFLICT)
    5. Issue session token
    """

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        sessions: SessionIssuer,
        password_min_length: int = 6,
    ):
        self.store = store
        self.hasher = hasher
        self.sessions = sessions
        self.password_min_length = password_min_length

    async def execute(self, command: SignupCommand) -> Result[AuthResponse]:
        """
        Execute signup use case

        Returns:
            Result[AuthResponse] with session token and email,
            or VALIDATION_ERROR / CONFLICT / store errors
        """
        identifier = validate_identifier(command.email)
        if identifier.is_err():
            return Return.err(identifier.error)
        email = identifier.value

        password_check = validate_password(command.password, self.password_min_length)
        if password_check.is_err():
            return Return.err(password_check.error)

        existing = await self.store.get_by_email(email)
        if existing.is_err():
            return Return.err(existing.error)
        if existing.value is not None:
            return Return.err(Error(ErrorCode.CONFLICT, "Email already registered"))

        password_hash = await asyncio.to_thread(self.hasher.hash, command.password)

        created = await self.store.create(Account(email=email, password_hash=password_hash))
        if created.is_err():
            return Return.err(created.error)

        token = self.sessions.issue(created.value.email)
        return Return.ok(AuthResponse(token=token, email=created.value.email))
