"""Unit tests for Email, Password and UserId value objects."""

from uuid import UUID

import pytest

from src.domain.errors import InvalidEmailError, InvalidPasswordError
from src.domain.value_objects import Email, Password, UserId, password_policy_violation


@pytest.mark.unit
class TestEmail:
    """Email normalization and validation."""

    def test_email_is_trimmed_and_lowercased(self):
        # Act
        email = Email.of("  Alice@Example.COM ")

        # Assert
        assert email.value == "alice@example.com"
        assert email.local_part == "alice"
        assert email.domain == "example.com"

    @pytest.mark.parametrize(
        "raw",
        ["", "   ", None, "alice", "alice@", "@example.com", "alice@example", "a b@c.io"],
    )
    def test_invalid_email_raises(self, raw):
        with pytest.raises(InvalidEmailError):
            Email.of(raw)

    def test_is_valid_does_not_raise(self):
        assert Email.is_valid("bob.smith+tag@mail.example.org")
        assert not Email.is_valid("not-an-email")

    def test_invalid_email_error_is_value_error(self):
        with pytest.raises(ValueError):
            Email.of("broken")


@pytest.mark.unit
class TestPassword:
    """Password policy and masking."""

    def test_policy_compliant_password_accepted(self):
        password = Password.of("P@ssw0rd!")

        assert password.value == "P@ssw0rd!"
        assert not password.is_encoded()

    @pytest.mark.parametrize(
        ("raw", "fragment"),
        [
            ("", "empty"),
            ("Sh0rt!", "at least 8"),
            ("p@ssw0rd!", "uppercase"),
            ("P@SSW0RD!", "lowercase"),
            ("P@ssword!", "digit"),
            ("Passw0rdX", "special"),
            ("P@ssw0rd!" + "a" * 200, "at most 128"),
        ],
    )
    def test_policy_violations_rejected(self, raw, fragment):
        with pytest.raises(InvalidPasswordError) as exc_info:
            Password.of(raw)

        assert fragment in exc_info.value.message
        assert password_policy_violation(raw) == exc_info.value.message

    def test_from_encoded_skips_policy(self):
        encoded = Password.from_encoded("$2b$12$" + "x" * 53)

        assert encoded.is_encoded()

    def test_from_encoded_rejects_blank(self):
        with pytest.raises(InvalidPasswordError):
            Password.from_encoded("  ")

    def test_hex_digest_counts_as_encoded(self):
        assert Password.from_encoded("a" * 64).is_encoded()

    def test_string_forms_never_reveal_secret(self):
        password = Password.of("P@ssw0rd!")

        assert "P@ssw0rd!" not in str(password)
        assert "P@ssw0rd!" not in repr(password)


@pytest.mark.unit
class TestUserId:
    def test_of_parses_string(self):
        raw = "0190b0a0-0000-7000-8000-000000000001"

        assert UserId.of(raw).value == UUID(raw)

    def test_of_rejects_garbage(self):
        with pytest.raises(ValueError):
            UserId.of("not-a-uuid")

    def test_generate_is_unique(self):
        assert UserId.generate() != UserId.generate()
