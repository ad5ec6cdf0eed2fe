from .address import Address
from .session import Session
from .tokens import EmailVerification, PasswordResetToken
from .user import User

__all__ = [
    "User",
    "Session",
    "EmailVerification",
    "PasswordResetToken",
    "Address",
]
