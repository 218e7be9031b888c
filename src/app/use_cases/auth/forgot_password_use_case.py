"""
Forgot Password Use Case

Issues a single-use password reset token and emails the reset link.
"""

import logging
from datetime import timedelta
from typing import Callable, Optional

from src.libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.hashing import generate_reset_token, hash_reset_token
from src.app.services.notifier import Notifier
from src.app.services.unit_of_work import UnitOfWork
from .dtos import MessageResponse

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Your password reset token (valid for {minutes} minutes)"
RESET_EMAIL_BODY = (
    "Forgot your password? Submit a PATCH request with your new password and "
    "password_confirm to: {url}\n"
    "If you didn't request a password reset, please ignore this email."
)
CHECK_EMAIL_MESSAGE = "Please check your email for a password reset link"


class ForgotPasswordUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Generate a cryptographically secure token (secrets.token_urlsafe)
    - Store only its SHA-256 hash with a short expiry (10 minutes)
    - The token write is a partial save and skips full user validation
    - If the email cannot be delivered, the stored hash and expiry are
      cleared again before the error is reported
    - Unknown emails fail with EMAIL_NOT_FOUND unless reveal_unknown_email
      is off, in which case they get the same reply as known ones
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: Notifier,
        clock: Clock,
        reset_expires_in: timedelta = timedelta(minutes=10),
        reveal_unknown_email: bool = True,
    ):
        self.uow = uow
        self.notifier = notifier
        self.clock = clock
        self.reset_expires_in = reset_expires_in
        self.reveal_unknown_email = reveal_unknown_email

    async def execute(
        self, email: Optional[str], build_reset_url: Callable[[str], str]
    ) -> Result[MessageResponse]:
        """
        Execute forgot password use case.

        Args:
            email: Address of the account to reset
            build_reset_url: Builds the reset link from the plaintext token

        Returns:
            Result with MessageResponse, or Error
        """
        if not email:
            return Return.err(Error("VALIDATION_ERROR", "Please provide your email"))

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                if self.reveal_unknown_email:
                    return Return.err(
                        Error("EMAIL_NOT_FOUND", "There is no user with this email address")
                    )
                return Return.ok(
                    MessageResponse(status="success", message=CHECK_EMAIL_MESSAGE)
                )

            reset_token = generate_reset_token()
            user.password_reset_token_hash = hash_reset_token(reset_token)
            user.password_reset_expires_at = self.clock.now() + self.reset_expires_in
            await self.uow.users.save(user, skip_validation=True)
            await self.uow.commit()

            minutes = int(self.reset_expires_in.total_seconds() // 60)
            sent = await self.notifier.send(
                to=user.email,
                subject=RESET_EMAIL_SUBJECT.format(minutes=minutes),
                body=RESET_EMAIL_BODY.format(url=build_reset_url(reset_token)),
            )

            if sent.is_err():
                # Compensate: an undelivered token must not stay live
                logger.warning(
                    f"Password reset email to user {user.id} failed "
                    f"({sent.error.message}); clearing reset token"
                )
                user.password_reset_token_hash = None
                user.password_reset_expires_at = None
                await self.uow.users.save(user, skip_validation=True)
                await self.uow.commit()
                return Return.err(
                    Error(
                        "DELIVERY_ERROR",
                        "There was an error sending the email. Try again later",
                    )
                )

            return Return.ok(MessageResponse(status="success", message=CHECK_EMAIL_MESSAGE))
