"""Domain entities.

Pure business data with no framework dependencies.
"""

from src.domain.entities.user import UserRecord

__all__ = [
    "UserRecord",
]
