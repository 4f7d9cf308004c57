"""Authentication, token and identity tests."""

import uuid
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import pytest
from jose import jwt

from cloudspace.exceptions import ErrorType, ServiceError, TokenError
from cloudspace.services import auth
from cloudspace.services.identity import resolve_principal_id


def make_user(username: str = "alice"):
    return SimpleNamespace(id=uuid.uuid4(), username=username)


def sign(claims: dict, secret: str | None = None) -> str:
    return jwt.encode(claims, secret or auth.settings.jwt_secret, algorithm="HS256")


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_register_user(client, storage):
    """Test user registration provisions a bucket and default workspace."""
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "newuser", "password": "password123"},
    )
    assert response.status_code == 201
    data = response.json()
    assert "access_token" in data
    assert data["user"]["username"] == "newuser"
    assert data["user"]["bucket_name"] == data["user"]["id"]
    assert storage.calls_named("ensure_bucket") == [("ensure_bucket", data["user"]["id"])]
    assert "default/" in storage.keys(data["user"]["id"])


def test_register_duplicate_username(client, auth_headers):
    """Test registration with duplicate username fails with conflict."""
    response = client.post(
        "/api/v1/auth/register",
        json={"username": auth_headers.username, "password": "password123"},
    )
    assert response.status_code == 409
    body = response.json()
    assert body["code"] == "CONFLICT"
    assert auth_headers.username in body["message"]


def test_register_rolls_back_when_bucket_fails(client, storage, db):
    """A bucket failure leaves no user behind."""
    from cloudspace.models.user import User

    storage.fail_on.add("ensure_bucket")
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "nobucket", "password": "password123"},
    )
    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_SERVER_ERROR"
    assert db.query(User).filter(User.username == "nobucket").first() is None


def test_register_invalid_payload(client):
    """Test short passwords are rejected as bad requests."""
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "shorty", "password": "short"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "BAD_REQUEST"
    assert "password" in body["message"]


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post(
        "/api/v1/auth/login",
        json={"username": auth_headers.username, "password": "testpass123"},
    )
    assert response.status_code == 200
    assert "access_token" in response.json()


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/v1/auth/login",
        json={"username": auth_headers.username, "password": "wrongpass"},
    )
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_login_unknown_user(client):
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "ghost", "password": "whatever123"},
    )
    assert response.status_code == 401


def test_get_current_user(client, auth_headers):
    """Test getting current user info."""
    response = client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["username"] == auth_headers.username
    assert response.json()["id"] == auth_headers.user_id


def test_get_current_user_without_token(client):
    response = client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


def test_get_current_user_with_garbage_token(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_get_current_user_with_basic_auth_header(client):
    """A non-bearer header is anonymous, which principal-scoped routes reject."""
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert response.status_code == 401


def test_deleted_user_token_is_not_found(client, db):
    """A valid token for a user that no longer exists resolves but finds nobody."""
    token = auth.create_access_token(make_user("vanished"))
    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 404


class TestTokenService:
    """Tests for issuing and validating tokens."""

    def test_token_carries_username_and_user_id(self):
        user = make_user()
        claims = auth.decode_access_token(auth.create_access_token(user))

        assert claims["sub"] == "alice"
        assert claims["user_id"] == str(user.id)
        assert claims["exp"] - claims["iat"] == auth.settings.jwt_expiration_minutes * 60

    def test_is_token_valid_matches_username(self):
        token = auth.create_access_token(make_user("alice"))
        assert auth.is_token_valid(token, "alice") is True
        assert auth.is_token_valid(token, "bob") is False

    def test_wrong_secret_raises_token_error(self):
        token = sign({"sub": "alice", "user_id": str(uuid.uuid4())}, secret="other-secret")
        with pytest.raises(TokenError):
            auth.decode_access_token(token)
        with pytest.raises(TokenError):
            auth.is_token_valid(token, "alice")

    def test_malformed_token_raises_token_error(self):
        with pytest.raises(TokenError):
            auth.decode_access_token("abc.def.ghi")

    def test_wrong_algorithm_raises_token_error(self):
        token = jwt.encode({"sub": "alice"}, auth.settings.jwt_secret, algorithm="HS512")
        with pytest.raises(TokenError):
            auth.decode_access_token(token)

    def test_is_token_expired(self):
        now = datetime.now(UTC)
        fresh = sign({"sub": "alice", "exp": now + timedelta(minutes=5)})
        stale = sign({"sub": "alice", "exp": now - timedelta(minutes=5)})

        assert auth.is_token_expired(fresh) is False
        assert auth.is_token_expired(stale) is True

    def test_expired_token_fails_validation(self):
        stale = sign({"sub": "alice", "exp": datetime.now(UTC) - timedelta(minutes=1)})
        with pytest.raises(TokenError):
            auth.decode_access_token(stale)

    def test_is_token_expired_still_checks_signature(self):
        forged = sign(
            {"sub": "alice", "exp": datetime.now(UTC) + timedelta(minutes=5)},
            secret="other-secret",
        )
        with pytest.raises(TokenError):
            auth.is_token_expired(forged)

    def test_password_hashing(self):
        hashed = auth.get_password_hash("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert auth.verify_password("s3cret-pass", hashed)
        assert not auth.verify_password("wrong-pass", hashed)


class TestResolvePrincipalId:
    """Tests for extracting the principal id from a bearer token."""

    def test_returns_user_id(self):
        user = make_user()
        assert resolve_principal_id(auth.create_access_token(user)) == user.id

    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_missing_token(self, token):
        with pytest.raises(ServiceError) as exc_info:
            resolve_principal_id(token)
        assert exc_info.value.error_type is ErrorType.UNAUTHORIZED

    def test_invalid_token(self):
        with pytest.raises(ServiceError) as exc_info:
            resolve_principal_id("garbage")
        assert exc_info.value.error_type is ErrorType.UNAUTHORIZED
        assert isinstance(exc_info.value.__cause__, TokenError)

    def test_token_without_user_id_claim(self):
        token = sign({"sub": "alice", "exp": datetime.now(UTC) + timedelta(minutes=5)})
        with pytest.raises(ServiceError) as exc_info:
            resolve_principal_id(token)
        assert exc_info.value.error_type is ErrorType.UNAUTHORIZED

    def test_token_with_malformed_user_id(self):
        token = sign(
            {"sub": "alice", "user_id": "42", "exp": datetime.now(UTC) + timedelta(minutes=5)}
        )
        with pytest.raises(ServiceError) as exc_info:
            resolve_principal_id(token)
        assert exc_info.value.error_type is ErrorType.UNAUTHORIZED
