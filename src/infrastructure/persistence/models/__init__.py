"""Database models for persistence layer.

These are infrastructure concerns and should not be imported by the domain
layer. Domain records live in src/domain/entities/ and are mapped via the
repository layer.
"""

from src.infrastructure.persistence.models.user import UserModel, UserRoleModel

__all__ = [
    "UserModel",
    "UserRoleModel",
]
