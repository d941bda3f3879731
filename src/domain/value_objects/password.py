"""Password value object with complexity validation.

A Password holds either a raw secret that passed the policy (``Password.of``)
or an already-encoded hash (``Password.from_encoded``). Its string forms
never reveal the secret.
"""

import re
from dataclasses import dataclass

from src.domain.errors import InvalidPasswordError

MIN_LENGTH = 8
MAX_LENGTH = 128

# bcrypt, argon2 and scrypt hash prefixes
ENCODED_PREFIXES = ("$2a$", "$2b$", "$2y$", "$argon2", "$scrypt$")
_HEX_DIGEST = re.compile(r"[0-9a-fA-F]{64,}")

PROTECTED = "[PROTECTED]"


def password_policy_violation(raw: str | None) -> str | None:
    """Check a raw password against the policy.

    Requirements:
        - Between 8 and 128 characters
        - At least one uppercase letter
        - At least one lowercase letter
        - At least one digit
        - At least one non-alphanumeric character

    Args:
        raw: Candidate password.

    Returns:
        str | None: Description of the first violated rule, or None if the
            password satisfies the policy.
    """
    if raw is None or not raw.strip():
        return "Password cannot be empty"
    if len(raw) < MIN_LENGTH:
        return f"Password must be at least {MIN_LENGTH} characters"
    if len(raw) > MAX_LENGTH:
        return f"Password must be at most {MAX_LENGTH} characters"
    if not any(c.isupper() for c in raw):
        return "Password must contain uppercase letter"
    if not any(c.islower() for c in raw):
        return "Password must contain lowercase letter"
    if not any(c.isdigit() for c in raw):
        return "Password must contain digit"
    if all(c.isalnum() for c in raw):
        return "Password must contain special character"
    return None


@dataclass(frozen=True)
class Password:
    """Password value object.

    Attributes:
        value: Raw password (policy-checked) or encoded hash.

    Raises:
        InvalidPasswordError: If the value is blank, or (via ``of``) violates
            the complexity policy.

    Example:
        >>> Password.of("P@ssw0rd!").is_encoded()
        False
        >>> Password.from_encoded("$2b$12$abc...").is_encoded()
        True
        >>> repr(Password.of("P@ssw0rd!"))
        "Password('[PROTECTED]')"
    """

    value: str

    def __post_init__(self) -> None:
        if self.value is None or not str(self.value).strip():
            raise InvalidPasswordError("Password cannot be empty")

    @classmethod
    def of(cls, raw: str | None) -> "Password":
        """Build a raw Password that satisfies the policy.

        Raises:
            InvalidPasswordError: If the password violates the policy.
        """
        violation = password_policy_violation(raw)
        if violation is not None:
            raise InvalidPasswordError(violation)
        return cls(raw)  # type: ignore[arg-type]

    @classmethod
    def from_encoded(cls, encoded: str | None) -> "Password":
        """Wrap an encoded hash (no policy check).

        Raises:
            InvalidPasswordError: If the encoded value is blank.
        """
        return cls(encoded)  # type: ignore[arg-type]

    def is_encoded(self) -> bool:
        """Check whether the value looks like a known hash format."""
        return self.value.startswith(ENCODED_PREFIXES) or bool(
            _HEX_DIGEST.fullmatch(self.value)
        )

    def __str__(self) -> str:
        """Return placeholder; the secret is never rendered."""
        return PROTECTED

    def __repr__(self) -> str:
        """Return repr for debugging (masked)."""
        return f"Password('{PROTECTED}')"
