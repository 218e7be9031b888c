"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


# ============================================================================
# Command DTOs
# ============================================================================


class SignupCommand(BaseModel):
    """
    Signup command - raw signup intent

    Fields are optional so the use case can report missing details itself.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    password_confirm: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class UserView(BaseModel):
    """Outward view of a user; never carries password or reset fields"""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: Optional[str] = None


class AuthResult(BaseModel):
    """A user together with a freshly issued session token"""

    user: UserView
    token: str


class CurrentUser(BaseModel):
    """Verified identity attached to a protected request"""

    user: UserView
    issued_at_ms: int


class MessageResponse(BaseModel):
    """Status plus a human-readable message"""

    status: str
    message: str
