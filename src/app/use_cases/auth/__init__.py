"""
Authentication Use Cases

All authentication-related business logic.
"""

from .signup_use_case import SignupUseCase
from .signin_use_case import SigninUseCase
from .verify_session_use_case import VerifySessionUseCase
from .forgot_password_use_case import ForgotPasswordUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .dtos import (
    AuthResult,
    CurrentUser,
    MessageResponse,
    SignupCommand,
    UserView,
)

__all__ = [
    # Use Cases
    "SignupUseCase",
    "SigninUseCase",
    "VerifySessionUseCase",
    "ForgotPasswordUseCase",
    "ResetPasswordUseCase",
    # DTOs - Commands
    "SignupCommand",
    # DTOs - Responses
    "AuthResult",
    "CurrentUser",
    "MessageResponse",
    "UserView",
]
