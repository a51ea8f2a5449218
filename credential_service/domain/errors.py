"""
Credential Service Error Taxonomy

Closed set of error codes carried by ``Error`` values. The API layer maps each
code to exactly one HTTP status.
"""

from enum import Enum

from credential_service.libs.result import Error


class ErrorCode(str, Enum):
    """Every failure the credential core can report"""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    STORE_TIMEOUT = "STORE_TIMEOUT"
    STORE_ERROR = "STORE_ERROR"
    DISPATCH_ERROR = "DISPATCH_ERROR"
    HASH_ERROR = "HASH_ERROR"
    INVALID_TOKEN = "INVALID_TOKEN"
    EXPIRED_TOKEN = "EXPIRED_TOKEN"


# Transient store failures, retried inside the credential store
RETRYABLE_STORE_ERRORS = frozenset({ErrorCode.STORE_TIMEOUT})


def invalid_credentials() -> Error:
    # Same message for unknown account and wrong password
    return Error(ErrorCode.INVALID_CREDENTIALS, "Invalid credentials")


def invalid_or_expired_token() -> Error:
    return Error(ErrorCode.INVALID_OR_EXPIRED_TOKEN, "Invalid or expired token")


def store_unavailable() -> Error:
    return Error(
        ErrorCode.STORE_UNAVAILABLE,
        "Service temporarily unavailable, please try again later",
    )
