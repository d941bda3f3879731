"""Domain value objects with validation.

Immutable value objects that enforce business constraints.
"""

from src.domain.value_objects.credentials import (
    Credentials,
    EmailPasswordCredentials,
    UsernamePasswordCredentials,
)
from src.domain.value_objects.email import Email
from src.domain.value_objects.password import Password, password_policy_violation
from src.domain.value_objects.user_id import UserId

__all__ = [
    "Credentials",
    "Email",
    "EmailPasswordCredentials",
    "Password",
    "UserId",
    "UsernamePasswordCredentials",
    "password_policy_violation",
]
