# users/services/exceptions.py

"""
ACCOUNT SERVICE ERRORS
"""


class AccountServiceError(Exception):
    """Base exception for account token flows."""


class InvalidTokenError(AccountServiceError):
    """Token unknown or already consumed."""


class ExpiredTokenError(AccountServiceError):
    """Token found but past its expiry (it is deleted on detection)."""


class SessionExpiredError(AccountServiceError):
    """Storefront session found but past its expiry."""
