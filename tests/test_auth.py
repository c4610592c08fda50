"""Tests for authentication endpoints."""


class TestLogin:
    """Test /auth/login endpoint."""

    def test_login_success(self, client, test_user):
        """Test successful login returns token."""
        response = client.post(
            "/auth/login",
            json={"email": "test@example.com", "password": "testpass123"}
        )
        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert data["token_type"] == "bearer"

    def test_login_wrong_password(self, client, test_user):
        """Test login with wrong password fails."""
        response = client.post(
            "/auth/login",
            json={"email": "test@example.com", "password": "wrongpass"}
        )
        assert response.status_code == 401
        assert "Incorrect email or password" in response.json()["detail"]

    def test_login_nonexistent_user(self, client):
        response = client.post(
            "/auth/login",
            json={"email": "nobody@example.com", "password": "anypass"}
        )
        assert response.status_code == 401

    def test_login_invalid_email_format(self, client):
        response = client.post(
            "/auth/login",
            json={"email": "not-an-email", "password": "anypass"}
        )
        assert response.status_code == 422

    def test_token_works_for_me(self, client, test_user):
        token = client.post(
            "/auth/login",
            json={"email": "test@example.com", "password": "testpass123"}
        ).json()["access_token"]
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200


class TestGetMe:
    """Test /auth/me endpoint."""

    def test_get_me_authenticated(self, client, test_user, auth_headers):
        response = client.get("/auth/me", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "test@example.com"
        assert data["full_name"] == "Test User"
        assert data["role"] == "User"
        assert data["hourly_rate"] == 100.0

    def test_get_me_unauthenticated(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401

    def test_get_me_invalid_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer invalid"})
        assert response.status_code == 401


class TestUsers:

    def test_list_users(self, client, auth_headers, admin_user, second_user):
        response = client.get("/auth/users", headers=auth_headers)
        assert response.status_code == 200
        assert [u["full_name"] for u in response.json()] == ["Admin User", "Second User", "Test User"]

    def test_register_as_admin(self, client, admin_headers):
        response = client.post(
            "/auth/register",
            json={
                "email": "new@example.com",
                "full_name": "New Analyst",
                "password": "longenough",
                "hourly_rate": 85,
                "department": "Finance",
            },
            headers=admin_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["role"] == "User"
        assert data["department"] == "Finance"

    def test_register_requires_admin(self, client, auth_headers):
        response = client.post(
            "/auth/register",
            json={"email": "new@example.com", "full_name": "New", "password": "longenough"},
            headers=auth_headers
        )
        assert response.status_code == 403

    def test_register_duplicate_email(self, client, admin_headers, test_user):
        response = client.post(
            "/auth/register",
            json={"email": "test@example.com", "full_name": "Dup", "password": "longenough"},
            headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Email already registered"

    def test_register_invalid_role(self, client, admin_headers):
        response = client.post(
            "/auth/register",
            json={"email": "new@example.com", "full_name": "New", "password": "longenough",
                  "role": "Superuser"},
            headers=admin_headers
        )
        assert response.status_code == 400

    def test_register_short_password(self, client, admin_headers):
        response = client.post(
            "/auth/register",
            json={"email": "new@example.com", "full_name": "New", "password": "short"},
            headers=admin_headers
        )
        assert response.status_code == 422
