"""
Component wiring and FastAPI dependencies.

build_services() runs once in create_app; request handlers reach the shared,
read-only components through app.state.
"""

from dataclasses import dataclass
from datetime import timedelta

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from credential_service.adapter.services.database import Database
from credential_service.adapter.services.mail_dispatcher import (
    FastMailDispatcher,
    build_connection_config,
)
from credential_service.api.error import ClientError
from credential_service.app.services.credential_store import CredentialStore
from credential_service.app.services.notification_dispatcher import INotificationDispatcher
from credential_service.app.services.password_hasher import PasswordHasher
from credential_service.app.services.reset_token_service import ResetTokenService
from credential_service.app.services.retry_policy import RetryPolicy
from credential_service.app.services.session_issuer import SessionIssuer


@dataclass
class Services:
    config: type
    database: Database
    store: CredentialStore
    hasher: PasswordHasher
    reset_tokens: ResetTokenService
    sessions: SessionIssuer
    dispatcher: INotificationDispatcher


def build_services(config) -> Services:
    database = Database(
        config.DB_URI,
        connect_retries=config.DB_CONNECT_RETRIES,
        connect_base_delay=config.DB_CONNECT_BASE_DELAY,
        connect_max_delay=config.DB_CONNECT_MAX_DELAY,
    )
    store = CredentialStore(
        uow_factory=database.unit_of_work,
        is_ready=lambda: database.is_ready,
        retry_policy=RetryPolicy(
            max_retries=config.STORE_MAX_RETRIES,
            base_delay=config.STORE_RETRY_BASE_DELAY,
            attempt_timeout=config.STORE_MAX_OPERATION_TIME,
        ),
    )
    dispatcher = FastMailDispatcher(
        build_connection_config(config),
        frontend_url=config.FRONTEND_URL,
        ttl_minutes=config.RESET_TOKEN_TTL_MINUTES,
        retry_policy=RetryPolicy(
            max_retries=config.MAIL_MAX_RETRIES,
            base_delay=config.MAIL_RETRY_BASE_DELAY,
            attempt_timeout=config.MAIL_SEND_TIMEOUT,
        ),
    )
    return Services(
        config=config,
        database=database,
        store=store,
        hasher=PasswordHasher(rounds=config.BCRYPT_ROUNDS),
        reset_tokens=ResetTokenService(ttl=timedelta(minutes=config.RESET_TOKEN_TTL_MINUTES)),
        sessions=SessionIssuer(
            config.JWT_SECRET, ttl=timedelta(hours=config.SESSION_TTL_HOURS)
        ),
        dispatcher=dispatcher,
    )


security = HTTPBearer()


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_notification_dispatcher(
    services: Services = Depends(get_services),
) -> INotificationDispatcher:
    return services.dispatcher


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    services: Services = Depends(get_services),
) -> str:
    """
    Dependency to extract and verify the session token from the Authorization header.

    Returns:
        The account email the token was issued to

    Raises:
        ClientError: 401 if token is invalid or expired
    """
    result = services.sessions.verify(credentials.credentials)
    if result.is_err():
        raise ClientError(result.error, status_code=401)
    return result.value["sub"]
