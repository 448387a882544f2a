"""Tests for registration, login and the current-user profile."""
import pytest


def _register(client, email="test@example.com", password="SecurePass123!", **extra):
    return client.post("/auth/register", json={"email": email, "password": password, **extra})


class TestRegister:
    """Test registration scenarios."""

    def test_register_success(self, client):
        """Valid registration returns 201 with user and token."""
        response = _register(client, full_name="Test Person")

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "test@example.com"
        assert "id" in data["user"]
        assert "access_token" in data
        assert data["token_type"] == "bearer"
        # Password should not be returned
        assert "password" not in data["user"]
        assert "hashed_password" not in data["user"]

    def test_register_duplicate_email(self, client):
        """Registering with existing email returns 409."""
        _register(client, email="duplicate@example.com")
        response = _register(client, email="duplicate@example.com", password="DifferentPass456!")

        assert response.status_code == 409
        assert "email already registered" in response.json()["detail"].lower()

    @pytest.mark.parametrize(
        "email,password",
        [
            ("not-an-email", "SecurePass123!"),
            ("test@example.com", "Short1!"),
            ("test@example.com", "NoNumbers!!"),
            ("test@example.com", "NoSpecial123"),
            ("", ""),
        ],
    )
    def test_register_validation(self, client, email, password):
        assert _register(client, email=email, password=password).status_code == 422


class TestLogin:
    """Test login scenarios."""

    def test_login_success(self, client):
        _register(client, email="login@example.com")

        response = client.post(
            "/auth/login",
            json={"email": "login@example.com", "password": "SecurePass123!"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["email"] == "login@example.com"
        assert data["access_token"]

    def test_login_wrong_password(self, client):
        _register(client, email="wrong@example.com")

        response = client.post(
            "/auth/login",
            json={"email": "wrong@example.com", "password": "WrongPass123!"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_login_nonexistent_user(self, client):
        response = client.post(
            "/auth/login",
            json={"email": "nobody@example.com", "password": "SecurePass123!"},
        )
        assert response.status_code == 401


class TestCurrentUser:
    """The token scopes every request to one owner."""

    def test_profile(self, client):
        token = _register(client, email="me@example.com", full_name="Me").json()["access_token"]

        response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["email"] == "me@example.com"
        assert response.json()["full_name"] == "Me"

    def test_profile_without_token(self, client):
        assert client.get("/users/me").status_code == 401

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
