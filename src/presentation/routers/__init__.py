"""HTTP routers.

- auth: registration, login, logout and token refresh (configurable paths)
- system: root and health endpoints
"""

from src.presentation.routers.auth import create_auth_router, create_token_router
from src.presentation.routers.system import system_router

__all__ = ["create_auth_router", "create_token_router", "system_router"]
