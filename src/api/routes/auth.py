from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.app.services.clock import Clock
from src.app.services.notifier import Notifier
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    AuthResult,
    ForgotPasswordUseCase,
    MessageResponse,
    ResetPasswordUseCase,
    SigninUseCase,
    SignupCommand,
    SignupUseCase,
    UserView,
)
from src.depends import get_clock, get_notifier, get_token_service, get_unit_of_work

router = APIRouter(prefix="/auth", tags=["Authentication"])


class AuthResponse(BaseModel):
    """Signup/signin response payload"""

    status: str
    token: str
    user: UserView


class UserData(BaseModel):
    user: UserView


class UserResponse(BaseModel):
    """Envelope wrapping a single user"""

    status: str
    data: UserData


def send_token(response: Response, result: AuthResult) -> AuthResponse:
    """
    Set the session cookie and shape the response for a newly issued token.

    Shared by signup and signin so both entry points behave the same way.
    """
    max_age = timedelta(days=ApplicationConfig.COOKIE_EXPIRES_IN_DAYS)
    response.set_cookie(
        key=ApplicationConfig.COOKIE_NAME,
        value=result.token,
        max_age=int(max_age.total_seconds()),
        httponly=True,
        secure=ApplicationConfig.ENVIRONMENT == "production",
        samesite="lax",
    )
    return AuthResponse(status="success", token=result.token, user=result.user)


class SignupRequest(BaseModel):
    """
    Signup HTTP request payload

    Fields are optional here; missing details are reported by the use case.
    """

    name: Optional[str] = Field(None, max_length=255, description="Display name")
    email: Optional[str] = Field(None, max_length=255, description="User email address")
    password: Optional[str] = Field(None, description="User password (min 8 chars)")
    password_confirm: Optional[str] = Field(None, description="Password confirmation")


@router.post(
    "/signup", status_code=status.HTTP_201_CREATED, response_model=AuthResponse
)
async def signup(
    request: SignupRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
):
    """
    User Signup

    Creates an account and signs the user in: returns a session token in the
    body and in the jwt cookie.

    Raises:
        - 400 Bad Request: Missing details, invalid email, short or
          mismatched password, email already registered
        - 500 Internal Server Error: Server error
    """
    command = SignupCommand(
        name=request.name,
        email=request.email,
        password=request.password,
        password_confirm=request.password_confirm,
    )

    use_case = SignupUseCase(uow, token_service)
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return send_token(response, result.value)


class SigninRequest(BaseModel):
    """Signin HTTP request payload"""

    email: Optional[str] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="User password")


@router.post("/signin", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def signin(
    request: SigninRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
):
    """
    User Signin

    Raises:
        - 400 Bad Request: Email or password missing
        - 401 Unauthorized: Invalid email or password
        - 500 Internal Server Error: Server error
    """
    use_case = SigninUseCase(
        uow, token_service, bcrypt_rounds=ApplicationConfig.BCRYPT_ROUNDS
    )
    result = await use_case.execute(request.email, request.password)

    if result.is_err():
        raise_for_error(result.error)

    return send_token(response, result.value)


class ForgotPasswordRequest(BaseModel):
    """Forgot password HTTP request payload"""

    email: Optional[str] = Field(None, description="User email address")


@router.post(
    "/forgot-password", status_code=status.HTTP_200_OK, response_model=MessageResponse
)
async def forgot_password(
    request: ForgotPasswordRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: Notifier = Depends(get_notifier),
    clock: Clock = Depends(get_clock),
):
    """
    Forgot Password

    Emails a single-use reset link valid for PASSWORD_RESET_EXPIRES_MINUTES.

    Raises:
        - 400 Bad Request: Email missing
        - 404 Not Found: No user with this email (unless hidden by config)
        - 500 Internal Server Error: Email could not be sent
    """
    use_case = ForgotPasswordUseCase(
        uow,
        notifier,
        clock,
        reset_expires_in=timedelta(minutes=ApplicationConfig.PASSWORD_RESET_EXPIRES_MINUTES),
        reveal_unknown_email=ApplicationConfig.FORGOT_PASSWORD_REVEAL_UNKNOWN_EMAIL,
    )
    result = await use_case.execute(
        request.email,
        lambda token: str(http_request.url_for("reset_password", token=token)),
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ResetPasswordRequest(BaseModel):
    """Reset password HTTP request payload"""

    password: Optional[str] = Field(None, description="New password (min 8 chars)")
    password_confirm: Optional[str] = Field(None, description="Password confirmation")


@router.patch(
    "/reset-password/{token}", status_code=status.HTTP_200_OK, response_model=UserResponse
)
async def reset_password(
    token: str,
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Reset Password

    Sets a new password using the emailed token. Every session token issued
    before this call stops working.

    Raises:
        - 400 Bad Request: Token invalid/expired, or password invalid
        - 500 Internal Server Error: Server error
    """
    use_case = ResetPasswordUseCase(uow)
    result = await use_case.execute(token, request.password, request.password_confirm)

    if result.is_err():
        raise_for_error(result.error)

    return UserResponse(status="success", data=UserData(user=result.value))
