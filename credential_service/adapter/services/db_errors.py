"""
Translation of database driver exceptions into Error values.

Only SQLAlchemy and connection-level OS errors are translated; anything else
is a programming error and propagates.
"""

import functools
import logging

from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)

from credential_service.domain.errors import ErrorCode
from credential_service.libs.result import Error, Return

logger = logging.getLogger(__name__)


def translate_db_error(exc: BaseException) -> Error:
    """Map a driver exception to CONFLICT, STORE_TIMEOUT or STORE_ERROR"""
    if isinstance(exc, IntegrityError):
        return Error(ErrorCode.CONFLICT, "Email already registered")
    if isinstance(exc, (PoolTimeoutError, OperationalError, ConnectionError, OSError)):
        return Error(ErrorCode.STORE_TIMEOUT, f"Store operation timed out: {type(exc).__name__}")
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return Error(ErrorCode.STORE_TIMEOUT, "Store connection was invalidated")
    return Error(ErrorCode.STORE_ERROR, f"Store operation failed: {type(exc).__name__}")


def returns_result(func):
    """Wrap a single-attempt store call so driver failures come back as Result errors"""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (SQLAlchemyError, ConnectionError, OSError) as exc:
            error = translate_db_error(exc)
            logger.debug(f"{func.__qualname__} failed: {error.code}")
            return Return.err(error)

    return wrapper
