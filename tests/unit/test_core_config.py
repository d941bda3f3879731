"""Unit tests for Settings."""

import pytest
from pydantic import ValidationError

from src.core.config import Settings
from src.core.enums import Environment
from tests.conftest import TEST_SECRET


def make_settings(**kwargs) -> Settings:
    kwargs.setdefault("jwt_secret", TEST_SECRET)
    return Settings(_env_file=None, **kwargs)


@pytest.mark.unit
class TestDefaults:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("BCRYPT_ROUNDS", raising=False)
        monkeypatch.delenv("ENVIRONMENT", raising=False)

        settings = make_settings()

        assert settings.access_token_validity_seconds == 900
        assert settings.refresh_token_validity_seconds == 604800
        assert settings.token_type == "Bearer"
        assert settings.bcrypt_rounds == 12
        assert settings.auth_base_path == "/api/auth"
        assert settings.refresh_path == "/refresh"
        assert settings.notification_email_enabled is False
        assert settings.redis_url is None
        assert settings.is_development

    def test_environment_from_env(self):
        # conftest exports ENVIRONMENT=testing
        assert make_settings().environment == Environment.TESTING


@pytest.mark.unit
class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"jwt_secret": "short"},
            {"jwt_algorithm": "RS256"},
            {"access_token_validity_seconds": 0},
            {"refresh_token_validity_seconds": -1},
            {"bcrypt_rounds": 9},
            {"bcrypt_rounds": 21},
        ],
    )
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValidationError):
            make_settings(**kwargs)

    def test_paths_are_normalized(self):
        settings = make_settings(auth_base_path="api/v2/auth/", login_path="signin")

        assert settings.auth_base_path == "/api/v2/auth"
        assert settings.login_path == "/signin"


@pytest.mark.unit
class TestAliases:
    def test_dotted_property_names(self):
        settings = Settings(
            _env_file=None,
            **{
                "security.jwt.secret": TEST_SECRET,
                "security.jwt.access-token-validity-seconds": 60,
                "api.auth.base-path": "/auth",
                "notification.email.welcome.subject": "Hi {username}",
            },
        )

        assert settings.jwt_secret == TEST_SECRET
        assert settings.access_token_validity_seconds == 60
        assert settings.auth_base_path == "/auth"
        assert settings.email_template("welcome")[0] == "Hi {username}"

    def test_flat_environment_names(self, monkeypatch):
        monkeypatch.setenv("ACCESS_TOKEN_VALIDITY_SECONDS", "120")
        monkeypatch.setenv("NOTIFICATION_EMAIL_ENABLED", "true")

        settings = make_settings()

        assert settings.access_token_validity_seconds == 120
        assert settings.notification_email_enabled is True


@pytest.mark.unit
class TestHelpers:
    def test_email_template(self):
        subject, text = make_settings().email_template("security-alert")

        assert subject == "Security Alert"
        assert "{alertType}" in text

    def test_unknown_email_template(self):
        with pytest.raises(KeyError):
            make_settings().email_template("missing")

    def test_default_role_list(self):
        settings = make_settings(default_roles=" user, ,auditor ")

        assert settings.default_role_list == ["user", "auditor"]
