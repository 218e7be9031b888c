"""
Session Auth Domain Entities
"""

from .user import NewUser, PasswordChange, User

__all__ = [
    "User",
    "NewUser",
    "PasswordChange",
]
