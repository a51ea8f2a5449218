from fastapi import APIRouter, BackgroundTasks, Depends, Path, status
from pydantic import BaseModel, EmailStr, Field

from credential_service.api.error import ClientError, ServerError
from credential_service.app.services.notification_dispatcher import INotificationDispatcher
from credential_service.app.use_cases.auth import (
    ApplyPasswordResetUseCase,
    AuthResponse,
    MessageResponse,
    RequestPasswordResetUseCase,
    SigninCommand,
    SigninUseCase,
    SignupCommand,
    SignupUseCase,
)
from credential_service.depends import (
    Services,
    get_current_identity,
    get_notification_dispatcher,
    get_services,
)
from credential_service.domain.errors import ErrorCode
from credential_service.libs.result import Error

router = APIRouter(prefix="/auth", tags=["Authentication"])

STORE_DOWN_CODES = (ErrorCode.STORE_UNAVAILABLE, ErrorCode.STORE_TIMEOUT)


def _raise_store_or_server_error(error: Error):
    if error.code in STORE_DOWN_CODES:
        raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    raise ServerError(error)


class SignupRequest(BaseModel):
    """
    Signup HTTP request payload

    Only the email shape is checked here; password rules live in the use cases.
    """

    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., description="Account password")


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
async def signup(request: SignupRequest, services: Services = Depends(get_services)):
    """
    Create an account and return a session token.

    Raises:
        - 400 Bad Request: Invalid email or password too short
        - 409 Conflict: Email already registered
        - 503 Service Unavailable: Store unavailable
    """
    command = SignupCommand(email=request.email, password=request.password)

    use_case = SignupUseCase(
        services.store,
        services.hasher,
        services.sessions,
        password_min_length=services.config.PASSWORD_MIN_LENGTH,
    )
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == ErrorCode.VALIDATION_ERROR:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == ErrorCode.CONFLICT:
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        _raise_store_or_server_error(error)

    return result.value


class SigninRequest(BaseModel):
    """
    Signin HTTP request payload

    The email is not shape-checked: anything that matches no account is simply
    invalid credentials.
    """

    email: str = Field(..., description="Account email address")
    password: str = Field(..., description="Account password")


@router.post("/signin", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def signin(request: SigninRequest, services: Services = Depends(get_services)):
    """
    Authenticate with email and password.

    Raises:
        - 401 Unauthorized: Invalid credentials (same for unknown email and wrong password)
        - 503 Service Unavailable: Store unavailable
    """
    use_case = SigninUseCase(services.store, services.hasher, services.sessions)
    result = await use_case.execute(
        SigninCommand(email=request.email, password=request.password)
    )

    if result.is_err():
        error = result.error
        if error.code == ErrorCode.INVALID_CREDENTIALS:
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        _raise_store_or_server_error(error)

    return result.value


class ForgotPasswordRequest(BaseModel):
    """Request password reset HTTP request payload"""

    email: EmailStr = Field(..., description="Account email address")


@router.post("/forgot-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    services: Services = Depends(get_services),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
):
    """
    Request a password reset email.

    Security:
        - No email enumeration (same response body for known and unknown emails)
        - Token issuance and delivery run after the response is sent

    Returns:
        - 200 OK: Always, unless the account lookup itself fails
        - 503 Service Unavailable: Store unavailable
    """
    use_case = RequestPasswordResetUseCase(services.store, services.reset_tokens, dispatcher)
    result = await use_case.execute(request.email, schedule=background_tasks.add_task)

    if result.is_err():
        _raise_store_or_server_error(result.error)

    return result.value


class ResetPasswordRequest(BaseModel):
    """Apply password reset HTTP request payload"""

    password: str = Field(..., description="New password")


@router.post(
    "/reset-password/{token}", status_code=status.HTTP_200_OK, response_model=MessageResponse
)
async def reset_password(
    request: ResetPasswordRequest,
    token: str = Path(..., min_length=1, description="Reset token from the email link"),
    services: Services = Depends(get_services),
):
    """
    Set a new password using the emailed reset token.

    Raises:
        - 400 Bad Request: Invalid or expired token, or password too short
        - 503 Service Unavailable: Store unavailable
    """
    use_case = ApplyPasswordResetUseCase(
        services.store,
        services.hasher,
        services.reset_tokens,
        password_min_length=services.config.PASSWORD_MIN_LENGTH,
    )
    result = await use_case.execute(token, request.password)

    if result.is_err():
        error = result.error
        if error.code in (ErrorCode.INVALID_OR_EXPIRED_TOKEN, ErrorCode.VALIDATION_ERROR):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        _raise_store_or_server_error(error)

    return result.value


@router.get("/me", status_code=status.HTTP_200_OK)
async def me(identity: str = Depends(get_current_identity)):
    """Return the email bound to the presented session token"""
    return {"email": identity}
