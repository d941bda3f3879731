"""UserRepository implementations.

- InMemoryUserRepository: process-local (no database configured, tests)
- SqlAlchemyUserRepository: async SQLAlchemy over users/user_roles tables
"""

from src.infrastructure.persistence.repositories.in_memory_user_repository import (
    InMemoryUserRepository,
)
from src.infrastructure.persistence.repositories.user_repository import (
    SqlAlchemyUserRepository,
)

__all__ = [
    "InMemoryUserRepository",
    "SqlAlchemyUserRepository",
]
