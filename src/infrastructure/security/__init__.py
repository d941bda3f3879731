"""Security infrastructure adapters.

This package contains security-related infrastructure implementations:
- Password hashing (bcrypt)
- JWT access/refresh token issue, validation and revocation
"""

from src.infrastructure.security.bcrypt_password_hasher import BcryptPasswordHasher
from src.infrastructure.security.jwt_token_service import JwtTokenService

__all__ = [
    "BcryptPasswordHasher",
    "JwtTokenService",
]
