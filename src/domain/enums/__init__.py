"""Domain enums.

Available Enums:
    - CredentialType: Credential variant tags used to select strategies
    - UserRole: Role vocabulary mapped at the HTTP/DB edges
"""

from src.domain.enums.credential_type import CredentialType
from src.domain.enums.user_role import UserRole

__all__ = [
    "CredentialType",
    "UserRole",
]
