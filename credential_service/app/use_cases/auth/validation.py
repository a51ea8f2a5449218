from email_validator import EmailNotValidError, validate_email

from credential_service.app.services.password_hasher import MAX_PASSWORD_BYTES
from credential_service.domain.errors import ErrorCode
from credential_service.libs.result import Error, Result, Return


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_identifier(email: str) -> Result[str]:
    """Return the normalized email, or VALIDATION_ERROR"""
    normalized = normalize_email(email or "")
    if not normalized:
        return Return.err(Error(ErrorCode.VALIDATION_ERROR, "Email is required"))
    if len(normalized) > 255:
        return Return.err(Error(ErrorCode.VALIDATION_ERROR, "Please provide a valid email"))
    try:
        validate_email(normalized, check_deliverability=False)
    except EmailNotValidError:
        return Return.err(Error(ErrorCode.VALIDATION_ERROR, "Please provide a valid email"))
    return Return.ok(normalized)


def validate_password(password: str, min_length: int) -> Result[None]:
    if not password or len(password) < min_length:
        return Return.err(
            Error(
                ErrorCode.VALIDATION_ERROR,
                f"Password must be at least {min_length} characters long",
            )
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return Return.err(
            Error(
                ErrorCode.VALIDATION_ERROR,
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes long",
            )
        )
    return Return.ok(None)
