"""Database persistence infrastructure.

This module provides:
- Declarative base for all database models
- Database connection and session management
- UserRepository implementations
"""

from src.infrastructure.persistence.base import Base, BaseModel
from src.infrastructure.persistence.database import Database

__all__ = [
    "Base",
    "BaseModel",
    "Database",
]
