"""Email value object with validation.

Immutable value object that trims, lowercases and validates addresses.
"""

import re
from dataclasses import dataclass

from src.domain.errors import InvalidEmailError

EMAIL_PATTERN = re.compile(
    r"[A-Za-z0-9_+&*-]+(?:\.[A-Za-z0-9_+&*-]+)*@(?:[A-Za-z0-9-]+\.)+[A-Za-z]{2,7}"
)


@dataclass(frozen=True)
class Email:
    """Email value object with format validation.

    Attributes:
        value: The email address string (trimmed, lowercase)

    Raises:
        InvalidEmailError: If email is blank or does not match the pattern

    Example:
        >>> email = Email.of("  Alice@Example.COM ")
        >>> str(email)
        'alice@example.com'
        >>> email.domain
        'example.com'
        >>> Email.of("invalid")
        Traceback (most recent call last):
        ...
        InvalidEmailError: Invalid email format: invalid
    """

    value: str

    def __post_init__(self) -> None:
        """Normalize and validate the address.

        Raises:
            InvalidEmailError: If email is blank or malformed.
        """
        if self.value is None or not str(self.value).strip():
            raise InvalidEmailError("Email cannot be empty")

        normalized = str(self.value).strip().lower()
        if EMAIL_PATTERN.fullmatch(normalized) is None:
            raise InvalidEmailError(f"Invalid email format: {normalized}")

        # Use object.__setattr__ because dataclass is frozen
        object.__setattr__(self, "value", normalized)

    @classmethod
    def of(cls, raw: str | None) -> "Email":
        """Build an Email from raw input.

        Args:
            raw: Address as entered by the user.

        Returns:
            Email: Normalized value object.

        Raises:
            InvalidEmailError: If email is blank or malformed.
        """
        return cls(raw)  # type: ignore[arg-type]

    @classmethod
    def is_valid(cls, raw: str | None) -> bool:
        """Check whether raw input would produce a valid Email."""
        try:
            cls.of(raw)
        except InvalidEmailError:
            return False
        return True

    @property
    def local_part(self) -> str:
        """Part before the '@'."""
        return self.value.split("@", 1)[0]

    @property
    def domain(self) -> str:
        """Part after the '@'."""
        return self.value.split("@", 1)[1]

    def __str__(self) -> str:
        """Return email address as string.

        Returns:
            str: The email address.
        """
        return self.value

    def __repr__(self) -> str:
        """Return repr for debugging.

        Returns:
            str: String representation of Email object.
        """
        return f"Email('{self.value}')"
