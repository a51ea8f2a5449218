"""
Authentication Use Cases

Signup, signin and the two halves of the password reset flow.
"""

from .signup_use_case import SignupUseCase
from .signin_use_case import SigninUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .apply_password_reset_use_case import ApplyPasswordResetUseCase
from .dtos import (
    SignupCommand,
    SigninCommand,
    AuthResponse,
    MessageResponse,
    RESET_REQUESTED_MESSAGE,
    RESET_APPLIED_MESSAGE,
)

__all__ = [
    # Use Cases
    "SignupUseCase",
    "SigninUseCase",
    "RequestPasswordResetUseCase",
    "ApplyPasswordResetUseCase",
    # DTOs - Commands
    "SignupCommand",
    "SigninCommand",
    # DTOs - Responses
    "AuthResponse",
    "MessageResponse",
    "RESET_REQUESTED_MESSAGE",
    "RESET_APPLIED_MESSAGE",
]
