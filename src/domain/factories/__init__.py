"""Domain factories."""

from src.domain.factories.user_factory import UserFactory

__all__ = ["UserFactory"]
