"""
Reset Password Use Case

Sets a new password from a valid reset token. Saving the password stamps
password_changed_at, which invalidates every session token issued before it.
"""

from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.repositories.user_repository import UserValidationError
from src.app.services.hashing import hash_reset_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import PasswordChange
from .dtos import UserView


class ResetPasswordUseCase:
    """
    Use case for completing a password reset.

    Business Rules:
    - The raw token is hashed with SHA-256 and matched against unexpired
      stored hashes only
    - The repository checks the password against its confirmation and
      re-hashes it
    - Reset fields are cleared so the token cannot be used twice
    - No new session token is issued; the user signs in again
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        raw_token: str,
        password: Optional[str],
        password_confirm: Optional[str],
    ) -> Result[UserView]:
        """
        Execute reset password use case.

        Args:
            raw_token: Plaintext reset token from the emailed link
            password: New password
            password_confirm: Confirmation of the new password

        Returns:
            Result with the updated UserView, or Error

        Errors:
            - INVALID_OR_EXPIRED_TOKEN: No user holds an unexpired matching token
            - VALIDATION_ERROR: Missing, too short or mismatched password
        """
        async with self.uow:
            user = await self.uow.users.get_by_reset_token_hash(hash_reset_token(raw_token))
            if user is None:
                return Return.err(
                    Error("INVALID_OR_EXPIRED_TOKEN", "Token is invalid or has expired")
                )

            if not password or not password_confirm:
                return Return.err(
                    Error("VALIDATION_ERROR", "Please provide password and password_confirm")
                )

            user.password_reset_token_hash = None
            user.password_reset_expires_at = None
            try:
                user = await self.uow.users.save(
                    user,
                    new_password=PasswordChange(
                        password=password, password_confirm=password_confirm
                    ),
                )
            except UserValidationError as e:
                return Return.err(Error("VALIDATION_ERROR", e.message))

            await self.uow.commit()

            return Return.ok(UserView.model_validate(user))
