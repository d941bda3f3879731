"""Email + password strategy."""

from src.application.strategies.base import PasswordCredentialStrategy
from src.domain.entities.user import UserRecord
from src.domain.enums import CredentialType
from src.domain.value_objects import Credentials, Email, EmailPasswordCredentials


class EmailPasswordStrategy(PasswordCredentialStrategy):
    """Verify an email/password pair (email matched case-insensitively)."""

    credential_types = frozenset({CredentialType.EMAIL_PASSWORD})

    def prepare(self, credentials: Credentials) -> Credentials:
        match credentials:
            case EmailPasswordCredentials(email=email, password=password):
                return EmailPasswordCredentials(
                    email=email.strip().lower(), password=password
                )
            case _:
                return credentials

    def validate_format(self, credentials: Credentials) -> bool:
        match credentials:
            case EmailPasswordCredentials(email=email, password=password):
                return Email.is_valid(email) and bool(password and password.strip())
            case _:
                return False

    async def authenticate(self, credentials: Credentials) -> UserRecord | None:
        if not isinstance(credentials, EmailPasswordCredentials):
            return None

        user = await self._user_repo.find_by_email(credentials.email)
        return await self._verify(user, credentials.password)
