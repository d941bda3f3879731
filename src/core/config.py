"""
Configuration management using Pydantic Settings.

This module provides type-safe, validated configuration loading from environment
variables (or a .env file). Every option can be given either by its flat
environment name (``JWT_SECRET``) or by its dotted property name
(``security.jwt.secret``), so existing property files keep working.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic

Usage:
    from src.core.config import get_settings

    settings = get_settings()
    ttl = settings.access_token_validity_seconds

    # Environment detection
    if settings.is_development:
        # Dev-specific behavior
"""

from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.enums import Environment

# Default notification templates (subject, text). Placeholders are replaced
# verbatim, e.g. "{displayName}" -> user's display name.
_SIGNATURE = "\n\nRegards,\nThe Team"

DEFAULT_EMAIL_TEMPLATES: dict[str, tuple[str, str]] = {
    "welcome": (
        "Welcome to our platform!",
        "Hello {displayName},\n\nWelcome to our platform! "
        "Your account has been created successfully." + _SIGNATURE,
    ),
    "password-change": (
        "Your password has been changed",
        "Hello {displayName},\n\nYour password has been changed successfully. "
        "If you did not make this change, please contact support immediately."
        + _SIGNATURE,
    ),
    "password-reset": (
        "Password Reset Request",
        "Hello {displayName},\n\nYou have requested a password reset. "
        "Use the following temporary password to sign in:\n\n{temporaryPassword}"
        "\n\nIf you did not request this reset, please ignore this email."
        + _SIGNATURE,
    ),
    "account-status": (
        "Account Status Update",
        "Hello {displayName},\n\nYour account status has been updated to: "
        "{status}.\n\nIf you have any questions, please contact support."
        + _SIGNATURE,
    ),
    "login": (
        "New Login Detected",
        "Hello {displayName},\n\nA new login to your account has been detected."
        "\n\nIP Address: {ipAddress}\nBrowser/Device: {userAgent}\n\n"
        "If this was not you, please contact support immediately." + _SIGNATURE,
    ),
    "security-alert": (
        "Security Alert",
        "Hello {displayName},\n\nA security alert has been triggered for your "
        "account.\n\nAlert Type: {alertType}\nDetails: {details}\n\n"
        "If you did not perform this action, please contact support immediately."
        + _SIGNATURE,
    ),
}


def _alias(flat: str, dotted: str) -> AliasChoices:
    """Accept both the flat env name and the dotted property name."""
    return AliasChoices(flat, dotted)


def _template_field(template: str, part: str) -> Any:
    subject, text = DEFAULT_EMAIL_TEMPLATES[template]
    flat = f"notification_email_{template.replace('-', '_')}_{part}"
    return Field(
        default=subject if part == "subject" else text,
        validation_alias=_alias(flat, f"notification.email.{template}.{part}"),
        description=f"Notification '{template}' {part}",
    )


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Configuration precedence:
        1. Init kwargs (tests, embedding applications)
        2. Environment variables
        3. .env file
        4. Default values (only for non-sensitive config)

    Returns:
        Settings: Application configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )

    # Core application settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, detailed errors)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON (CI/production) instead of console output",
    )

    # Application metadata
    app_name: str = Field(
        default="Authcore",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )

    # Security configuration (JWT)
    jwt_secret: str = Field(
        validation_alias=_alias("jwt_secret", "security.jwt.secret"),
        description="HMAC key for JWT signing (at least 256 bits, keep secret)",
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm (HS256, HS384, HS512)",
    )
    access_token_validity_seconds: int = Field(
        default=900,
        validation_alias=_alias(
            "access_token_validity_seconds",
            "security.jwt.access-token-validity-seconds",
        ),
        description="Access token lifetime in seconds",
    )
    refresh_token_validity_seconds: int = Field(
        default=7 * 24 * 3600,
        validation_alias=_alias(
            "refresh_token_validity_seconds",
            "security.jwt.refresh-token-validity-seconds",
        ),
        description="Refresh token lifetime in seconds",
    )
    token_type: str = Field(
        default="Bearer",
        validation_alias=_alias("token_type", "security.jwt.token-type"),
        description="Token type label returned to clients",
    )
    bcrypt_rounds: int = Field(
        default=12,
        description="Number of bcrypt hashing rounds (10-20, 12 = ~250ms)",
    )

    # API paths
    auth_base_path: str = Field(
        default="/api/auth",
        validation_alias=_alias("auth_base_path", "api.auth.base-path"),
        description="Prefix for registration/login/logout routes",
    )
    token_base_path: str = Field(
        default="/api/token",
        validation_alias=_alias("token_base_path", "api.token.base-path"),
        description="Prefix for token routes",
    )
    register_path: str = Field(
        default="/register",
        validation_alias=_alias("register_path", "api.auth.register-path"),
        description="Registration route (relative to auth base path)",
    )
    login_path: str = Field(
        default="/login",
        validation_alias=_alias("login_path", "api.auth.login-path"),
        description="Login route (relative to auth base path)",
    )
    logout_path: str = Field(
        default="/logout",
        validation_alias=_alias("logout_path", "api.auth.logout-path"),
        description="Logout route (relative to auth base path)",
    )
    refresh_path: str = Field(
        default="/refresh",
        validation_alias=_alias("refresh_path", "api.token.refresh-path"),
        description="Token refresh route (relative to token base path)",
    )

    # Storage configuration
    redis_url: str | None = Field(
        default=None,
        description="Redis URL for the token store (unset = in-process store)",
    )
    database_url: str | None = Field(
        default=None,
        description="Database URL for users (unset = in-process repository)",
    )
    db_echo: bool = Field(
        default=False,
        description="Log all SQL queries (useful for debugging, disabled in production)",
    )
    operation_timeout_seconds: float = Field(
        default=5.0,
        description="Deadline for each repository, token store and notification call",
    )

    # Registration
    default_roles: str = Field(
        default="user",
        description="Roles assigned when registration does not specify any (comma-separated)",
    )

    # Notifications
    notification_email_enabled: bool = Field(
        default=False,
        validation_alias=_alias(
            "notification_email_enabled", "notification.email.enabled"
        ),
        description="Send notification emails (disabled = no-op)",
    )
    notification_email_from: str = Field(
        default="noreply@example.com",
        validation_alias=_alias("notification_email_from", "notification.email.from"),
        description="Sender address for notification emails",
    )
    notification_email_welcome_subject: str = _template_field("welcome", "subject")
    notification_email_welcome_text: str = _template_field("welcome", "text")
    notification_email_password_change_subject: str = _template_field(
        "password-change", "subject"
    )
    notification_email_password_change_text: str = _template_field(
        "password-change", "text"
    )
    notification_email_password_reset_subject: str = _template_field(
        "password-reset", "subject"
    )
    notification_email_password_reset_text: str = _template_field(
        "password-reset", "text"
    )
    notification_email_account_status_subject: str = _template_field(
        "account-status", "subject"
    )
    notification_email_account_status_text: str = _template_field(
        "account-status", "text"
    )
    notification_email_login_subject: str = _template_field("login", "subject")
    notification_email_login_text: str = _template_field("login", "text")
    notification_email_security_alert_subject: str = _template_field(
        "security-alert", "subject"
    )
    notification_email_security_alert_text: str = _template_field(
        "security-alert", "text"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """
        Require a 256-bit HMAC key.

        Args:
            v: Secret key.

        Returns:
            str: Validated secret key.

        Raises:
            ValueError: If the key is shorter than 32 bytes.
        """
        if len(v.encode("utf-8")) < 32:
            raise ValueError("jwt_secret must be at least 32 bytes (256 bits)")
        return v

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """Only HMAC-SHA2 algorithms are supported."""
        if v not in ("HS256", "HS384", "HS512"):
            raise ValueError("jwt_algorithm must be one of HS256, HS384, HS512")
        return v

    @field_validator("access_token_validity_seconds", "refresh_token_validity_seconds")
    @classmethod
    def validate_positive_ttl(cls, v: int) -> int:
        """Token lifetimes must be positive."""
        if v <= 0:
            raise ValueError("token validity must be a positive number of seconds")
        return v

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """
        Validate bcrypt rounds are within safe range.

        Args:
            v: Number of bcrypt rounds.

        Returns:
            int: Validated bcrypt rounds.

        Raises:
            ValueError: If rounds are not between 10 and 20.
        """
        if not 10 <= v <= 20:
            raise ValueError("bcrypt_rounds must be between 10 and 20")
        return v

    @field_validator(
        "auth_base_path", "token_base_path", "register_path", "login_path",
        "logout_path", "refresh_path",
    )
    @classmethod
    def normalize_path(cls, v: str) -> str:
        """
        Ensure a leading slash and remove trailing slashes.

        Args:
            v: Route path.

        Returns:
            str: Normalized path.
        """
        return "/" + v.strip().strip("/")

    def email_template(self, name: str) -> tuple[str, str]:
        """
        Get (subject, text) for a notification template.

        Args:
            name: Template name (welcome, password-change, password-reset,
                account-status, login, security-alert).

        Returns:
            tuple[str, str]: Subject and text with placeholders.

        Raises:
            KeyError: If the template name is unknown.
        """
        if name not in DEFAULT_EMAIL_TEMPLATES:
            raise KeyError(name)
        prefix = f"notification_email_{name.replace('-', '_')}"
        return getattr(self, f"{prefix}_subject"), getattr(self, f"{prefix}_text")

    @property
    def default_role_list(self) -> list[str]:
        """
        Parse comma-separated default roles.

        Returns:
            list[str]: Role tokens (empty entries dropped).
        """
        return [role.strip() for role in self.default_roles.split(",") if role.strip()]

    # Convenience properties for environment checks
    @property
    def is_development(self) -> bool:
        """
        Check if running in development environment.

        Returns:
            bool: True if environment is DEVELOPMENT, False otherwise.
        """
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """
        Check if running in testing environment.

        Returns:
            bool: True if environment is TESTING, False otherwise.
        """
        return self.environment == Environment.TESTING

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.

        Returns:
            bool: True if environment is PRODUCTION, False otherwise.
        """
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()  # type: ignore[call-arg]  # Pydantic Settings loads from env
