"""
Verify Session Use Case

Guards protected routes: authenticates the bearer token on every call and
rejects tokens issued before the user's latest password change.
"""

from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.clock import to_epoch_millis
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from .dtos import CurrentUser, UserView

BEARER_SCHEME = "bearer"


class VerifySessionUseCase:
    """
    Use case for authenticating a protected request.

    Business Rules:
    - Credentials come from an "Authorization: Bearer <token>" header; the
      scheme name is matched case-insensitively
    - Token signature and expiry are verified before any claim is used
    - The token's user must still exist
    - A password change after the token was issued invalidates it; there is
      no other revocation mechanism
    """

    def __init__(self, uow: UnitOfWork, token_service: TokenService):
        self.uow = uow
        self.token_service = token_service

    async def execute(self, authorization: Optional[str]) -> Result[CurrentUser]:
        """
        Execute verify session use case.

        Args:
            authorization: Raw Authorization header value, if any

        Returns:
            Result with CurrentUser, or Error
        """
        token = self._extract_bearer_token(authorization)
        if token is None:
            return Return.err(
                Error("MISSING_CREDENTIALS", "Please log in to perform this operation")
            )

        decoded = self.token_service.verify_and_decode(token)
        if decoded.is_err():
            return Return.err(decoded.error)
        claims = decoded.value

        async with self.uow:
            user = await self.uow.users.get_by_id(claims.subject_id)
            if user is None:
                return Return.err(
                    Error(
                        "USER_NO_LONGER_EXISTS",
                        "The user belonging to this token no longer exists",
                    )
                )

            if (
                user.password_changed_at is not None
                and to_epoch_millis(user.password_changed_at) > claims.issued_at_ms
            ):
                return Return.err(
                    Error(
                        "STALE_CREDENTIALS",
                        "Password was changed recently. Please log in again",
                    )
                )

            return Return.ok(
                CurrentUser(user=UserView.model_validate(user), issued_at_ms=claims.issued_at_ms)
            )

    @staticmethod
    def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
        if not authorization:
            return None
        # Auth scheme names are case-insensitive (RFC 7235)
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != BEARER_SCHEME:
            return None
        return token.strip() or None
