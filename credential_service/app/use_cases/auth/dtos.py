"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
"""

from pydantic import BaseModel


# ============================================================================
# Commands
# ============================================================================


class SignupCommand(BaseModel):
    """Validated signup intent (no HTTP concerns)"""

    email: str
    password: str


class SigninCommand(BaseModel):
    """Signin intent"""

    email: str
    password: str


# ============================================================================
# Response DTOs
# ============================================================================


class AuthResponse(BaseModel):
    """Response for signup and signin: session token plus the identifier"""

    token: str
    email: str


class MessageResponse(BaseModel):
    """Generic message response for the password reset flow"""

    message: str


RESET_REQUESTED_MESSAGE = "If an account exists, a password reset email will be sent"
RESET_APPLIED_MESSAGE = "Password reset successful"
