"""
Session token signing and verification.

Tokens are HS256 JWTs carrying the subject id (``sub``), issued-at (``iat``)
and expiry (``exp``). ``exp`` is whole epoch seconds and ``iat`` a fractional
NumericDate carrying milliseconds. Nothing is persisted: a
token is valid while its signature checks out, it has not expired, and its
subject has not changed password since ``iat``.
"""

from datetime import timedelta
from uuid import UUID

from jose import JWTError, jwt
from pydantic import BaseModel

from src.libs.result import Error, Result, Return
from src.app.services.clock import Clock, SystemClock, to_epoch_millis, to_epoch_seconds


class TokenClaims(BaseModel):
    """Verified contents of a session token"""

    subject_id: UUID
    issued_at_ms: int
    expires_at: int


class TokenService:
    def __init__(
        self,
        secret: str,
        expires_in: timedelta,
        clock: Clock = None,
        algorithm: str = "HS256",
    ):
        if not secret:
            raise ValueError("TokenService requires a non-empty secret")
        self._secret = secret
        self._expires_in = expires_in
        self._clock = clock or SystemClock()
        self._algorithm = algorithm

    def sign(self, subject_id: UUID) -> str:
        """
        Issue a session token for a user.

        Args:
            subject_id: User UUID

        Returns:
            JWT string expiring ``expires_in`` after now
        """
        issued_at_ms = to_epoch_millis(self._clock.now())
        payload = {
            "sub": str(subject_id),
            "iat": issued_at_ms / 1000,
            "exp": issued_at_ms // 1000 + int(self._expires_in.total_seconds()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify_and_decode(self, token: str) -> Result[TokenClaims]:
        """
        Verify the signature and return the claims in one step.

        Expiry is checked against the injected clock rather than the
        library's wall clock, after the signature has been verified.

        Returns:
            Result with TokenClaims, or Error(TOKEN_INVALID / TOKEN_EXPIRED)
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            return Return.err(Error("TOKEN_INVALID", "Invalid token. Please log in again"))

        try:
            claims = TokenClaims(
                subject_id=UUID(str(payload["sub"])),
                issued_at_ms=round(float(payload["iat"]) * 1000),
                expires_at=int(payload["exp"]),
            )
        except (KeyError, TypeError, ValueError, OverflowError):
            return Return.err(Error("TOKEN_INVALID", "Invalid token. Please log in again"))

        if claims.expires_at <= to_epoch_seconds(self._clock.now()):
            return Return.err(
                Error("TOKEN_EXPIRED", "Your token has expired. Please log in again")
            )

        return Return.ok(claims)
