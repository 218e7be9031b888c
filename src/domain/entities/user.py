"""
User Entity

Represents an account that can sign in and hold session tokens.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel
from sqlmodel import Column, DateTime, Field, Index, SQLModel


class User(SQLModel, table=True):
    """
    User entity - an account identified by id, optionally by email.

    Business Rules:
    - Email is unique across users and stored lower-cased
    - Password stored as bcrypt hash only, never in plaintext
    - password_changed_at is stamped on every password change after creation;
      session tokens issued before it are rejected
    - Password reset token stored as SHA-256 hash, valid for 10 minutes
    - Inactive users are invisible to every repository lookup
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    email: Optional[str] = Field(default=None, unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    password_changed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Password reset (forgot/reset flow)
    password_reset_token_hash: Optional[str] = Field(
        default=None, index=True, max_length=64
    )
    password_reset_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    active: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_user_active", "active"),)


class NewUser(BaseModel):
    """Fields accepted by the repository when creating a user"""

    name: str
    email: Optional[str] = None
    password: str
    password_confirm: str


class PasswordChange(BaseModel):
    """A new plaintext password and its confirmation, hashed by the repository"""

    password: str
    password_confirm: str
