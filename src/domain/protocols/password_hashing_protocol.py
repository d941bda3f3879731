"""Password hashing protocol for domain layer.

This protocol defines the interface for password hashing and verification.
Infrastructure layer provides concrete implementations (bcrypt).

Architecture:
    - Domain defines protocol (port)
    - Infrastructure implements adapter (BcryptPasswordHasher)
    - No framework dependencies in domain

Note:
    Methods are synchronous and CPU-bound; async callers offload them with
    ``asyncio.to_thread``.
"""

from typing import Protocol


class PasswordHasherProtocol(Protocol):
    """Password hashing and verification interface.

    Usage:
        password_hash = hasher.encode("P@ssw0rd!")
        hasher.matches("P@ssw0rd!", password_hash)  # True
    """

    def encode(self, raw_password: str) -> str:
        """Hash a plaintext password.

        Returns:
            Salted, one-way hash (bcrypt format: $2b$12$...).
        """
        ...

    def matches(self, raw_password: str, encoded_password: str) -> bool:
        """Verify a plaintext password against a hash.

        Note:
            - Constant-time comparison (prevents timing attacks)
            - Returns False for invalid hash format (no exceptions)
        """
        ...

    def generate_random(self, length: int = 16) -> str:
        """Generate a cryptographically strong random password."""
        ...

    def is_strong(self, raw_password: str) -> bool:
        """Check the password complexity policy."""
        ...

    def is_compromised(self, raw_password: str) -> bool:
        """Check the password against known breach corpora."""
        ...
