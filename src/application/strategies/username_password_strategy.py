"""Username (or email) + password strategy."""

from src.application.strategies.base import PasswordCredentialStrategy
from src.domain.entities.user import UserRecord
from src.domain.enums import CredentialType
from src.domain.value_objects import Credentials, Email, UsernamePasswordCredentials


class UsernamePasswordStrategy(PasswordCredentialStrategy):
    """Verify a username/password pair.

    The identifier is looked up as a username first; if no user has that
    username and the identifier parses as an email, it is looked up by email.
    A value that is both an existing username and a valid email therefore
    resolves to the username record.
    """

    credential_types = frozenset({CredentialType.USERNAME_PASSWORD})

    def prepare(self, credentials: Credentials) -> Credentials:
        match credentials:
            case UsernamePasswordCredentials(username=username, password=password):
                return UsernamePasswordCredentials(
                    username=username.strip(), password=password
                )
            case _:
                return credentials

    def validate_format(self, credentials: Credentials) -> bool:
        match credentials:
            case UsernamePasswordCredentials(username=username, password=password):
                return bool(username and username.strip()) and bool(
                    password and password.strip()
                )
            case _:
                return False

    async def authenticate(self, credentials: Credentials) -> UserRecord | None:
        if not isinstance(credentials, UsernamePasswordCredentials):
            return None

        user = await self._user_repo.find_by_username(credentials.username)
        if user is None and Email.is_valid(credentials.username):
            user = await self._user_repo.find_by_email(
                Email.of(credentials.username).value
            )

        return await self._verify(user, credentials.password)
