"""
PATH: users/validators.py

Password + name rules shared by registration, admin user CRUD,
password reset and the seed commands.

Password policy: >= 8 chars, at least one lowercase, one uppercase,
one digit and one special char among @$!%*?&. Other characters are refused.
"""

from __future__ import annotations

import re

from rest_framework import serializers

PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$"
)

PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters and contain an uppercase letter, "
    "a lowercase letter, a digit and a special character (@$!%*?&)."
)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100


def validate_password_strength(password: str) -> str:
    """
    Raises ValueError when the password breaks the policy.
    Plain ValueError so management commands can use it without DRF.
    """
    if not PASSWORD_PATTERN.match(password or ""):
        raise ValueError(PASSWORD_POLICY_MESSAGE)
    return password


def password_policy_validator(value: str) -> str:
    """DRF field validator wrapping validate_password_strength."""
    try:
        return validate_password_strength(value)
    except ValueError as exc:
        raise serializers.ValidationError(str(exc)) from exc


def name_field(**kwargs) -> serializers.CharField:
    kwargs.setdefault("min_length", NAME_MIN_LENGTH)
    kwargs.setdefault("max_length", NAME_MAX_LENGTH)
    kwargs.setdefault("trim_whitespace", True)
    return serializers.CharField(**kwargs)
