from typing import Optional
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import defer
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository, UserValidationError
from src.app.services.clock import Clock
from src.app.services.hashing import MAX_PASSWORD_BYTES, hash_password, password_too_long
from src.domain.entities import NewUser, PasswordChange, User

MIN_PASSWORD_LENGTH = 8


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession, clock: Clock, bcrypt_rounds: int):
        self.session = session
        self.clock = clock
        self.bcrypt_rounds = bcrypt_rounds

    async def create(self, fields: NewUser) -> User:
        """Create a new user"""
        self._validate_password(fields.password, fields.password_confirm)
        user = User(
            name=fields.name,
            email=fields.email,
            password_hash=hash_password(fields.password, self.bcrypt_rounds),
            created_at=self.clock.now(),
        )
        self._validate(user)
        await self._ensure_email_available(user)

        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError:
            # A concurrent signup took the address after the check above
            raise UserValidationError("Email already registered")
        await self.session.refresh(user)
        return user

    async def get_by_email(
        self, email: str, include_password_hash: bool = False
    ) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email.strip().lower(), User.active == True)
        if not include_password_hash:
            stmt = stmt.options(defer(User.password_hash))
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = (
            select(User)
            .where(User.id == user_id, User.active == True)
            .options(defer(User.password_hash))
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_reset_token_hash(self, token_hash: str) -> Optional[User]:
        """Get user by reset token hash, ignoring expired tokens"""
        stmt = (
            select(User)
            .where(
                User.password_reset_token_hash == token_hash,
                User.password_reset_expires_at >= self.clock.now(),
                User.active == True,
            )
            .options(defer(User.password_hash))
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def save(
        self,
        user: User,
        new_password: Optional[PasswordChange] = None,
        skip_validation: bool = False,
    ) -> User:
        """Update existing user"""
        if not skip_validation:
            self._validate(user)

        if new_password is not None:
            self._validate_password(new_password.password, new_password.password_confirm)
            user.password_hash = hash_password(new_password.password, self.bcrypt_rounds)
            user.password_changed_at = self.clock.now()

        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    def _validate(self, user: User) -> None:
        if not user.name or not user.name.strip():
            raise UserValidationError("Please tell us your name")

        if user.email is not None:
            try:
                validate_email(user.email, check_deliverability=False)
            except EmailNotValidError:
                raise UserValidationError("Please provide a valid email")
            user.email = user.email.strip().lower()

    def _validate_password(self, password: str, password_confirm: str) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise UserValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        if password_too_long(password):
            raise UserValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"
            )
        if password != password_confirm:
            raise UserValidationError("Passwords are not the same")

    async def _ensure_email_available(self, user: User) -> None:
        if user.email is None:
            return
        stmt = select(User.id).where(User.email == user.email)
        result = await self.session.exec(stmt)
        if result.first() is not None:
            raise UserValidationError("Email already registered")
