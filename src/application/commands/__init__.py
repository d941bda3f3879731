"""Authentication commands."""

from src.application.commands.auth_commands import (
    AuthenticateUser,
    ChangePassword,
    RegisterUser,
)

__all__ = [
    "AuthenticateUser",
    "ChangePassword",
    "RegisterUser",
]
