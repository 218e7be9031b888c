from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import NewUser, PasswordChange, User


class UserValidationError(Exception):
    """Raised by the repository when user fields fail validation"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class IUserRepository(ABC):
    """User repository interface - application layer

    Implementations own password hashing and field validation, so plaintext
    passwords never leave the repository boundary.
    """

    @abstractmethod
    async def create(self, fields: NewUser) -> User:
        """Validate, hash the password and create a new user"""
        pass

    @abstractmethod
    async def get_by_email(
        self, email: str, include_password_hash: bool = False
    ) -> Optional[User]:
        """Get active user by email address"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get active user by ID"""
        pass

    @abstractmethod
    async def get_by_reset_token_hash(self, token_hash: str) -> Optional[User]:
        """Get active user whose unexpired reset token matches the hash"""
        pass

    @abstractmethod
    async def save(
        self,
        user: User,
        new_password: Optional[PasswordChange] = None,
        skip_validation: bool = False,
    ) -> User:
        """Persist changes, hashing new_password and stamping password_changed_at"""
        pass
