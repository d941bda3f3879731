"""AuthEngine - orchestrates registration, login, refresh, logout and
password change.

Flows:
- register_user: validate -> uniqueness -> hash -> save -> issue tokens ->
  welcome notification (background)
- authenticate: strategy -> status gates -> issue tokens -> lastLogin and
  login notification (background)
- refresh_token: revoked? -> live? -> mint new access token (no rotation)
- logout: revoke every refresh token of the token's subject
- change_password: verify current -> policy -> update -> revoke all ->
  notification (background)

Error handling:
    Every repository / token-store call runs under a deadline. Timeouts and
    storage failures become TRANSIENT_STORAGE; domain exceptions are mapped
    through their ErrorCode. Results are always returned as envelopes, the
    engine never raises for an expected failure.

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols)
- NO infrastructure imports (collaborators are injected via protocols)
"""

import asyncio
from collections.abc import Awaitable, Coroutine, Iterable
from datetime import UTC, datetime
from typing import Any, TypeVar
from uuid import UUID

from src.application.commands.auth_commands import (
    AuthenticateUser,
    ChangePassword,
    RegisterUser,
)
from src.application.dtos.auth_dtos import (
    AuthenticationResult,
    LogoutResult,
    PasswordChangeResult,
    TokenRefreshResult,
)
from src.application.strategies.registry import StrategyRegistry
from src.core.enums import ErrorCode
from src.domain.entities.user import UserRecord
from src.domain.errors import (
    AuthenticationError,
    ConcurrentUpdateError,
    InvalidEmailError,
    InvalidPasswordError,
    TransientStorageError,
    UserAlreadyExistsError,
)
from src.domain.factories.user_factory import UserFactory
from src.domain.protocols import (
    LoggerProtocol,
    NotificationProtocol,
    PasswordHasherProtocol,
    TokenServiceProtocol,
    UserRepository,
)
from src.domain.value_objects import Email, Password

T = TypeVar("T")
R = TypeVar(
    "R",
    AuthenticationResult,
    TokenRefreshResult,
    LogoutResult,
    PasswordChangeResult,
)

LAST_LOGIN_ATTRIBUTE = "lastLogin"
LAST_LOGIN_ATTEMPTS = 3


class RegistrationError:
    """Registration-specific messages."""

    REQUIRED_FIELDS = "Email, username and password are required"
    EMAIL_ALREADY_EXISTS = "User with this email already exists"
    USERNAME_ALREADY_EXISTS = "User with this username already exists"
    USER_ALREADY_EXISTS = "User already exists"


class PasswordChangeError:
    """Password change messages."""

    USER_NOT_FOUND = "User not found"
    CURRENT_PASSWORD_INCORRECT = "Current password is incorrect"


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class AuthEngine:
    """Authentication and token lifecycle orchestration.

    Stateless between calls apart from the set of running background tasks;
    safe to share across concurrent requests.

    Example:
        >>> engine = get_auth_engine()
        >>> result = await engine.register_user(
        ...     RegisterUser(email="alice@example.com", username="alice",
        ...                  password="P@ssw0rd!")
        ... )
        >>> result.success
        True
    """

    def __init__(
        self,
        *,
        user_repo: UserRepository,
        password_hasher: PasswordHasherProtocol,
        token_service: TokenServiceProtocol,
        strategies: StrategyRegistry,
        notifications: NotificationProtocol,
        logger: LoggerProtocol,
        user_factory: UserFactory | None = None,
        default_roles: Iterable[str] = ("user",),
        operation_timeout: float = 5.0,
    ) -> None:
        """Initialize engine with dependencies.

        Args:
            user_repo: User persistence.
            password_hasher: Password encoder/verifier (synchronous, run in a
                worker thread).
            token_service: JWT issue/validate/revoke.
            strategies: Credential strategies consulted by authenticate.
            notifications: Best-effort user notifications.
            logger: Structured logger.
            user_factory: Record factory (default: UTC wall clock).
            default_roles: Roles assigned when registration names none.
            operation_timeout: Deadline in seconds for each external call.
        """
        self._user_repo = user_repo
        self._password_hasher = password_hasher
        self._token_service = token_service
        self._strategies = strategies
        self._notifications = notifications
        self._logger = logger.bind(component="auth_engine")
        self._user_factory = user_factory or UserFactory()
        self._default_roles = frozenset(default_roles)
        self._timeout = operation_timeout
        self._background_tasks: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def register_user(self, command: RegisterUser) -> AuthenticationResult:
        """Register a user and issue tokens.

        Args:
            command: RegisterUser command.

        Returns:
            AuthenticationResult: Success with user and tokens, or failure
                with VALIDATION_FAILED, INVALID_EMAIL, INVALID_PASSWORD,
                USER_ALREADY_EXISTS or TRANSIENT_STORAGE.
        """
        log = self._logger.bind(operation="register_user")

        # Step 1: Required fields
        if (
            _is_blank(command.email)
            or _is_blank(command.username)
            or _is_blank(command.password)
        ):
            return AuthenticationResult.failed(
                ErrorCode.VALIDATION_FAILED, RegistrationError.REQUIRED_FIELDS
            )

        # Step 2: Email format (normalizes to lowercase)
        try:
            email = Email.of(command.email)
        except InvalidEmailError as e:
            return AuthenticationResult.failed(ErrorCode.INVALID_EMAIL, e.message)

        username = command.username.strip()

        try:
            # Step 3: Uniqueness
            if await self._io(self._user_repo.exists_by_email(email.value)):
                return AuthenticationResult.failed(
                    ErrorCode.USER_ALREADY_EXISTS,
                    RegistrationError.EMAIL_ALREADY_EXISTS,
                )
            if await self._io(self._user_repo.exists_by_username(username)):
                return AuthenticationResult.failed(
                    ErrorCode.USER_ALREADY_EXISTS,
                    RegistrationError.USERNAME_ALREADY_EXISTS,
                )

            # Step 4: Password policy, then hash off the event loop
            try:
                password = Password.of(command.password)
            except InvalidPasswordError as e:
                return AuthenticationResult.failed(ErrorCode.INVALID_PASSWORD, e.message)
            encoded = await asyncio.to_thread(
                self._password_hasher.encode, password.value
            )

            # Step 5: Create and save (repository enforces uniqueness on races)
            user = self._user_factory.create_user(
                email=email,
                username=username,
                password=Password.from_encoded(encoded),
                roles=command.roles or self._default_roles,
                attributes=command.attributes,
                display_name=command.display_name,
            )
            user = await self._io(self._user_repo.save(user))
        except UserAlreadyExistsError:
            return AuthenticationResult.failed(
                ErrorCode.USER_ALREADY_EXISTS, RegistrationError.USER_ALREADY_EXISTS
            )
        except TransientStorageError as e:
            log.warning("Registration storage failure", error_message=e.message)
            return self._unavailable(AuthenticationResult)

        # Step 6: Issue tokens; a user without tokens is removed again
        try:
            access_token, refresh_token = await self._issue_tokens(user)
        except asyncio.CancelledError:
            await asyncio.shield(self._discard_user(user))
            raise
        except TransientStorageError as e:
            log.warning("Token issue failed after registration", error_message=e.message)
            await self._discard_user(user)
            return self._unavailable(AuthenticationResult)

        # Step 7: Welcome notification (best-effort)
        self._run_in_background(
            self._notifications.send_welcome(user),
            description="welcome_notification",
            email=user.email,
        )

        log.info("User registered", user_id=str(user.id))
        return AuthenticationResult.succeeded(
            user, access_token, refresh_token, self._token_service.token_type
        )

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def authenticate(self, command: AuthenticateUser) -> AuthenticationResult:
        """Authenticate credentials and issue tokens.

        Status gates are checked in order: disabled, locked, account expired,
        credentials expired.

        Returns:
            AuthenticationResult: Success with tokens, or failure with
                UNSUPPORTED_AUTHENTICATION, INVALID_CREDENTIALS, an account
                state code or TRANSIENT_STORAGE.
        """
        log = self._logger.bind(operation="authenticate")

        strategy = self._strategies.resolve(command.credentials.credential_type)
        if strategy is None:
            return AuthenticationResult.failed(
                ErrorCode.UNSUPPORTED_AUTHENTICATION,
                AuthenticationError.UNSUPPORTED_AUTHENTICATION,
            )

        credentials = strategy.prepare(command.credentials)
        if not strategy.validate_format(credentials):
            return AuthenticationResult.failed(
                ErrorCode.INVALID_CREDENTIALS, AuthenticationError.INVALID_CREDENTIALS
            )

        try:
            user = await self._io(strategy.authenticate(credentials))
            if user is None:
                log.info(
                    "Authentication failed",
                    credential_type=credentials.credential_type.value,
                )
                return AuthenticationResult.failed(
                    ErrorCode.INVALID_CREDENTIALS,
                    AuthenticationError.INVALID_CREDENTIALS,
                )

            gate = self._status_failure(user)
            if gate is not None:
                log.info(
                    "Authentication blocked",
                    user_id=str(user.id),
                    error_code=gate.value,
                )
                return AuthenticationResult.failed(gate, self._status_message(gate))

            access_token, refresh_token = await self._issue_tokens(user)
        except TransientStorageError as e:
            log.warning("Authentication storage failure", error_message=e.message)
            return self._unavailable(AuthenticationResult)

        self._run_in_background(
            self._record_last_login(user.id),
            description="record_last_login",
            email=user.email,
        )
        self._run_in_background(
            self._notifications.send_login(
                user, command.ip_address, command.user_agent
            ),
            description="login_notification",
            email=user.email,
        )

        log.info("User authenticated", user_id=str(user.id))
        return AuthenticationResult.succeeded(
            user, access_token, refresh_token, self._token_service.token_type
        )

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    async def refresh_token(self, refresh_token: str) -> TokenRefreshResult:
        """Mint a new access token; the refresh token is echoed back."""
        if _is_blank(refresh_token):
            return TokenRefreshResult.failed(
                ErrorCode.INVALID_TOKEN, AuthenticationError.INVALID_TOKEN
            )

        try:
            if await self._io(self._token_service.is_refresh_token_revoked(refresh_token)):
                return TokenRefreshResult.failed(
                    ErrorCode.INVALID_TOKEN, AuthenticationError.REVOKED_TOKEN
                )
            if not await self._io(
                self._token_service.is_token_valid_and_not_expired(refresh_token)
            ):
                return TokenRefreshResult.failed(
                    ErrorCode.INVALID_TOKEN, AuthenticationError.INVALID_OR_EXPIRED_TOKEN
                )
            access_token = await self._io(
                self._token_service.refresh_access_token(refresh_token)
            )
        except TransientStorageError as e:
            self._logger.warning("Token refresh storage failure", error_message=e.message)
            return self._unavailable(TokenRefreshResult)

        if access_token is None:
            return TokenRefreshResult.failed(
                ErrorCode.INVALID_TOKEN, AuthenticationError.INVALID_TOKEN
            )

        return TokenRefreshResult.succeeded(
            access_token, refresh_token, self._token_service.token_type
        )

    async def logout(self, refresh_token: str) -> LogoutResult:
        """Revoke every refresh token of the token's subject.

        A refresh token that is already revoked yields INVALID_TOKEN and
        changes nothing.
        """
        if (
            _is_blank(refresh_token)
            or not self._token_service.is_token_signature_valid(refresh_token)
            or self._token_service.extract_claim(refresh_token, "typ") != "refresh"
        ):
            return LogoutResult.failed(
                ErrorCode.INVALID_TOKEN, AuthenticationError.INVALID_TOKEN
            )

        user_id = self._token_service.extract_user_id(refresh_token)
        if user_id is None:
            return LogoutResult.failed(
                ErrorCode.INVALID_TOKEN, AuthenticationError.INVALID_TOKEN
            )

        try:
            if await self._io(self._token_service.is_refresh_token_revoked(refresh_token)):
                return LogoutResult.failed(
                    ErrorCode.INVALID_TOKEN, AuthenticationError.REVOKED_TOKEN
                )
            await self._io(self._token_service.revoke_all_tokens_for_user(user_id))
        except TransientStorageError as e:
            self._logger.warning("Logout storage failure", error_message=e.message)
            return self._unavailable(LogoutResult)

        self._logger.info("User logged out", user_id=str(user_id))
        return LogoutResult.succeeded()

    async def validate_token(self, token: str) -> UserRecord | None:
        """Resolve the user of a live token.

        Returns:
            The user iff the token is valid, not expired, not revoked and its
            subject exists; None otherwise (including storage failures).
        """
        if _is_blank(token):
            return None
        try:
            if not await self._io(self._token_service.is_token_valid_and_not_expired(token)):
                return None
            user_id = self._token_service.extract_user_id(token)
            if user_id is None:
                return None
            return await self._io(self._user_repo.find_by_id(user_id))
        except TransientStorageError as e:
            self._logger.warning("Token validation storage failure", error_message=e.message)
            return None

    # ------------------------------------------------------------------
    # Password change
    # ------------------------------------------------------------------

    async def change_password(self, command: ChangePassword) -> PasswordChangeResult:
        """Change a password and revoke all refresh tokens of the user."""
        log = self._logger.bind(operation="change_password", user_id=str(command.user_id))

        try:
            user = await self._io(self._user_repo.find_by_id(command.user_id))
            if user is None:
                return PasswordChangeResult.failed(
                    ErrorCode.USER_NOT_FOUND, PasswordChangeError.USER_NOT_FOUND
                )

            matched = await asyncio.to_thread(
                self._password_hasher.matches,
                command.current_password,
                user.password_hash,
            )
            if not matched:
                return PasswordChangeResult.failed(
                    ErrorCode.INVALID_CREDENTIALS,
                    PasswordChangeError.CURRENT_PASSWORD_INCORRECT,
                )

            try:
                new_password = Password.of(command.new_password)
            except InvalidPasswordError as e:
                return PasswordChangeResult.failed(ErrorCode.INVALID_PASSWORD, e.message)

            encoded = await asyncio.to_thread(
                self._password_hasher.encode, new_password.value
            )
            updated = self._user_factory.update_password(
                user, Password.from_encoded(encoded)
            )
            updated = await self._io(self._user_repo.update(updated))
            await self._io(self._token_service.revoke_all_tokens_for_user(user.id))
        except TransientStorageError as e:
            log.warning("Password change storage failure", error_message=e.message)
            return self._unavailable(PasswordChangeResult)

        self._run_in_background(
            self._notifications.send_password_change(updated),
            description="password_change_notification",
            email=updated.email,
        )

        log.info("Password changed")
        return PasswordChangeResult.succeeded()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_user_by_id(self, user_id: UUID) -> UserRecord | None:
        return await self._lookup(self._user_repo.find_by_id(user_id), "id")

    async def get_user_by_email(self, email: str) -> UserRecord | None:
        if not Email.is_valid(email):
            return None
        return await self._lookup(
            self._user_repo.find_by_email(Email.of(email).value), "email"
        )

    async def get_user_by_username(self, username: str) -> UserRecord | None:
        if _is_blank(username):
            return None
        return await self._lookup(
            self._user_repo.find_by_username(username.strip()), "username"
        )

    # ------------------------------------------------------------------
    # Background tasks
    # ------------------------------------------------------------------

    async def wait_for_background_tasks(self) -> None:
        """Wait until every pending background task has finished."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    def _run_in_background(
        self, coro: Coroutine[Any, Any, None], *, description: str, email: str
    ) -> None:
        task = asyncio.create_task(self._guarded(coro, description, email))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _guarded(
        self, coro: Coroutine[Any, Any, None], description: str, email: str
    ) -> None:
        # Failures never reach the caller's result
        try:
            async with asyncio.timeout(self._timeout):
                await coro
        except Exception as e:
            self._logger.warning(
                "Background task failed",
                task=description,
                email=email,
                error_type=type(e).__name__,
                error_message=str(e),
            )

    async def _record_last_login(self, user_id: UUID) -> None:
        # Writes only over the record it read; a concurrent change forces a re-read
        for _ in range(LAST_LOGIN_ATTEMPTS):
            user = await self._user_repo.find_by_id(user_id)
            if user is None:
                return
            updated = self._user_factory.add_attribute(
                user, LAST_LOGIN_ATTRIBUTE, datetime.now(UTC).isoformat()
            )
            try:
                await self._user_repo.update(
                    updated, expected_updated_at=user.updated_at
                )
            except ConcurrentUpdateError:
                continue
            return
        raise ConcurrentUpdateError(
            f"lastLogin not recorded after {LAST_LOGIN_ATTEMPTS} attempts"
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _io(self, awaitable: Awaitable[T]) -> T:
        """Await an external call under the operation deadline.

        Raises:
            TransientStorageError: If the deadline passes.
        """
        try:
            async with asyncio.timeout(self._timeout):
                return await awaitable
        except TimeoutError as e:
            raise TransientStorageError("Operation timed out") from e

    async def _issue_tokens(self, user: UserRecord) -> tuple[str, str]:
        access_token = self._token_service.generate_access_token(user)
        refresh_token = await self._io(self._token_service.generate_refresh_token(user))
        return access_token, refresh_token

    async def _discard_user(self, user: UserRecord) -> None:
        try:
            await self._io(self._user_repo.delete_by_id(user.id))
        except TransientStorageError as e:
            self._logger.error(
                "Failed to remove user after aborted registration",
                error=e,
                user_id=str(user.id),
            )

    async def _lookup(
        self, query: Awaitable[UserRecord | None], by: str
    ) -> UserRecord | None:
        try:
            return await self._io(query)
        except TransientStorageError as e:
            self._logger.warning("User lookup failed", by=by, error_message=e.message)
            return None

    @staticmethod
    def _status_failure(user: UserRecord) -> ErrorCode | None:
        if not user.enabled:
            return ErrorCode.ACCOUNT_DISABLED
        if user.locked:
            return ErrorCode.ACCOUNT_LOCKED
        if user.account_expired:
            return ErrorCode.ACCOUNT_EXPIRED
        if user.credentials_expired:
            return ErrorCode.CREDENTIALS_EXPIRED
        return None

    @staticmethod
    def _status_message(code: ErrorCode) -> str:
        match code:
            case ErrorCode.ACCOUNT_DISABLED:
                return AuthenticationError.ACCOUNT_DISABLED
            case ErrorCode.ACCOUNT_LOCKED:
                return AuthenticationError.ACCOUNT_LOCKED
            case ErrorCode.ACCOUNT_EXPIRED:
                return AuthenticationError.ACCOUNT_EXPIRED
            case _:
                return AuthenticationError.CREDENTIALS_EXPIRED

    @staticmethod
    def _unavailable(envelope: type[R]) -> R:
        return envelope.failed(
            ErrorCode.TRANSIENT_STORAGE, AuthenticationError.SERVICE_UNAVAILABLE
        )
