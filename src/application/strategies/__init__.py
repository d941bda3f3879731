"""Credential strategies (pluggable verifiers per credential tag)."""

from src.application.strategies.email_password_strategy import EmailPasswordStrategy
from src.application.strategies.registry import StrategyRegistry
from src.application.strategies.username_password_strategy import (
    UsernamePasswordStrategy,
)

__all__ = [
    "EmailPasswordStrategy",
    "StrategyRegistry",
    "UsernamePasswordStrategy",
]
