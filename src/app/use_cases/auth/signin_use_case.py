"""
Signin Use Case

Checks email and password and issues a session token.
"""

from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.hashing import (
    DEFAULT_BCRYPT_ROUNDS,
    burn_password_check,
    verify_password,
)
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from .dtos import AuthResult, UserView

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid email or password")


class SigninUseCase:
    """
    Use case for signin and session token issuance.

    Business Rules:
    - Email and password are both required; nothing else runs without them
    - Unknown email and wrong password fail identically (no enumeration)
    - A bcrypt comparison at the configured cost runs even when the user is
      missing (constant time)
    - Passwords too long for bcrypt are wrong passwords, not errors
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_service: TokenService,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ):
        self.uow = uow
        self.token_service = token_service
        self.bcrypt_rounds = bcrypt_rounds

    async def execute(
        self, email: Optional[str], password: Optional[str]
    ) -> Result[AuthResult]:
        """
        Execute signin use case.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Result with AuthResult, or Error
        """
        if not email or not password:
            return Return.err(
                Error("VALIDATION_ERROR", "Please provide your email and password")
            )

        async with self.uow:
            user = await self.uow.users.get_by_email(email, include_password_hash=True)

            if user is None:
                burn_password_check(password, self.bcrypt_rounds)
                return Return.err(INVALID_CREDENTIALS)

            if not verify_password(password, user.password_hash):
                return Return.err(INVALID_CREDENTIALS)

            token = self.token_service.sign(user.id)
            return Return.ok(AuthResult(user=UserView.model_validate(user), token=token))
