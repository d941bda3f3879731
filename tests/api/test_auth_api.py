"""API tests for the authentication and token endpoints.

The application is built from the real container with in-process defaults
(no REDIS_URL / DATABASE_URL): InMemoryTokenStore and InMemoryUserRepository.
Async collaborators are reached through ``client.portal`` so everything runs
on the TestClient event loop.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.application.commands import ChangePassword
from src.application.dtos import AuthenticationResult
from src.core.config import Settings
from src.core.container import (
    clear_container_cache,
    get_auth_engine,
    get_token_service,
    get_user_repository,
)
from src.core.enums import ErrorCode
from src.domain.errors import AuthenticationError
from src.main import create_app
from tests.conftest import TEST_PASSWORD

REGISTER = "/api/auth/register"
LOGIN = "/api/auth/login"
LOGOUT = "/api/auth/logout"
REFRESH = "/api/token/refresh"

ALICE = {"email": "Alice@Example.COM", "username": "alice", "password": TEST_PASSWORD}


@pytest.fixture
def app():
    clear_container_cache()
    application = create_app()
    yield application
    application.dependency_overrides.clear()
    clear_container_cache()


@pytest.fixture
def client(app):
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def registered(client):
    response = client.post(REGISTER, json=ALICE)
    assert response.status_code == 200
    return response.json()


def login_alice(client, password=TEST_PASSWORD):
    return client.post(LOGIN, json={"usernameOrEmail": "alice", "password": password})


@pytest.mark.api
class TestRegister:
    def test_register_returns_tokens(self, client):
        """Scenario 1: register, then find the user by normalized email."""
        response = client.post(REGISTER, json=ALICE)

        assert response.status_code == 200
        body = response.json()
        assert body["accessToken"] and body["refreshToken"]
        assert body["tokenType"] == "Bearer"

        user = client.portal.call(get_user_repository().find_by_email, "alice@example.com")
        assert user is not None
        assert get_token_service().extract_user_id(body["accessToken"]) == user.id

    def test_duplicate_email(self, client, registered):
        """Scenario 2: same email, different username."""
        response = client.post(
            REGISTER, json={**ALICE, "email": "alice@example.com", "username": "alice2"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["status"] == 400
        assert body["error"] == "Bad Request"
        assert body["code"] == ErrorCode.USER_ALREADY_EXISTS.value

    def test_register_with_roles(self, client):
        response = client.post(REGISTER, json={**ALICE, "roles": ["admin"]})

        roles = get_token_service().extract_roles(response.json()["accessToken"])
        assert roles == frozenset({"admin"})

    @pytest.mark.parametrize(
        ("payload", "code"),
        [
            ({**ALICE, "email": "nope"}, ErrorCode.INVALID_EMAIL),
            ({**ALICE, "password": "password"}, ErrorCode.INVALID_PASSWORD),
            ({**ALICE, "username": "  "}, ErrorCode.VALIDATION_FAILED),
        ],
    )
    def test_engine_validation(self, client, payload, code):
        response = client.post(REGISTER, json=payload)

        assert response.status_code == 400
        assert response.json()["code"] == code.value

    def test_schema_validation(self, client):
        response = client.post(REGISTER, json={"email": "a@example.com", "roles": ["root"]})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        fields = {detail["field"] for detail in body["details"]}
        assert {"username", "password", "roles.0"} <= fields


@pytest.mark.api
class TestLogin:
    def test_login_and_wrong_password(self, client, registered):
        """Scenario 3: login succeeds; wrong password is 401 without user hints."""
        ok = login_alice(client)
        wrong = login_alice(client, password="wrong")

        assert ok.status_code == 200
        assert ok.json()["refreshToken"]
        assert wrong.status_code == 401
        assert wrong.json()["code"] == ErrorCode.INVALID_CREDENTIALS.value
        assert "alice" not in wrong.json()["message"]

    def test_unknown_user_is_indistinguishable(self, client, registered):
        unknown = client.post(
            LOGIN, json={"usernameOrEmail": "nobody", "password": TEST_PASSWORD}
        )
        wrong = login_alice(client, password="Wr0ng-pass!")

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json()

    def test_login_with_email(self, client, registered):
        response = client.post(
            LOGIN, json={"usernameOrEmail": "ALICE@example.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200

    def test_missing_field(self, client):
        response = client.post(LOGIN, json={"password": "x"})

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "usernameOrEmail"


@pytest.mark.api
class TestTokens:
    def test_refresh(self, client, registered):
        """Scenario 4: refresh mints a live access token for the same user."""
        response = client.post(REFRESH, json={"refreshToken": registered["refreshToken"]})

        assert response.status_code == 200
        body = response.json()
        assert body["refreshToken"] == registered["refreshToken"]
        token_service = get_token_service()
        user_id = token_service.extract_user_id(registered["accessToken"])
        assert token_service.extract_user_id(body["accessToken"]) == user_id
        assert token_service.get_expiration_time(body["accessToken"]) > datetime.now(UTC)

    def test_logout_then_refresh(self, client, registered):
        """Scenario 5: logout revokes; the same refresh token is then 401."""
        refresh_token = registered["refreshToken"]

        logout = client.post(LOGOUT, json={"refreshToken": refresh_token})
        refresh = client.post(REFRESH, json={"refreshToken": refresh_token})
        again = client.post(LOGOUT, json={"refreshToken": refresh_token})

        assert logout.status_code == 200
        assert logout.content == b""
        assert refresh.status_code == 401
        assert refresh.json()["code"] == ErrorCode.INVALID_TOKEN.value
        assert again.status_code == 401

    def test_change_password_revokes_refresh_tokens(self, client, registered):
        """Scenario 6: old access tokens still verify, old refresh tokens die."""
        login = login_alice(client).json()
        token_service = get_token_service()
        user_id = token_service.extract_user_id(registered["accessToken"])

        result = client.portal.call(
            get_auth_engine().change_password,
            ChangePassword(
                user_id=user_id,
                current_password=TEST_PASSWORD,
                new_password="N3wP@ssword!",
            ),
        )

        assert result.success
        assert token_service.is_token_signature_valid(registered["accessToken"])
        for refresh_token in (registered["refreshToken"], login["refreshToken"]):
            response = client.post(REFRESH, json={"refreshToken": refresh_token})
            assert response.status_code == 401
        assert login_alice(client, password="N3wP@ssword!").status_code == 200

    @pytest.mark.parametrize("token", ["", "not-a-jwt"])
    def test_garbage_tokens(self, client, token):
        assert client.post(REFRESH, json={"refreshToken": token}).status_code == 401
        assert client.post(LOGOUT, json={"refreshToken": token}).status_code == 401


@pytest.mark.api
class TestErrorMapping:
    def test_transient_storage_is_503(self, app, client):
        engine = AsyncMock()
        engine.authenticate.return_value = AuthenticationResult.failed(
            ErrorCode.TRANSIENT_STORAGE, AuthenticationError.SERVICE_UNAVAILABLE
        )
        app.dependency_overrides[get_auth_engine] = lambda: engine

        response = login_alice(client)

        assert response.status_code == 503
        assert response.json()["code"] == "transient_storage"

    def test_unexpected_exception_is_500_without_internals(self, app, client):
        engine = AsyncMock()
        engine.refresh_token.side_effect = RuntimeError("secret internals")
        app.dependency_overrides[get_auth_engine] = lambda: engine

        response = client.post(REFRESH, json={"refreshToken": "x"})

        assert response.status_code == 500
        assert response.json()["code"] == "internal_error"
        assert "secret internals" not in response.text


@pytest.mark.api
class TestConfiguredPaths:
    def test_custom_base_paths(self):
        clear_container_cache()
        settings = Settings(
            _env_file=None,
            **{"api.auth.base-path": "/auth", "api.token.base-path": "/token"},
        )
        app = create_app(settings)

        with TestClient(app) as client:
            registered = client.post("/auth/register", json=ALICE)
            refreshed = client.post(
                "/token/refresh", json={"refreshToken": registered.json()["refreshToken"]}
            )

        clear_container_cache()
        assert registered.status_code == 200
        assert refreshed.status_code == 200
