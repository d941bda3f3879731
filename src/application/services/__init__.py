"""Application services."""

from src.application.services.auth_engine import AuthEngine

__all__ = ["AuthEngine"]
