"""Tests for app wiring: health checks, headers and the sign-in page."""


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_ready_reports_configuration(client):
    assert client.get("/ready").json() == {"status": "ready"}


def test_root_redirects_to_dashboard(client):
    response = client.get("/", follow_redirects=False)

    assert response.status_code in (302, 307)
    assert response.headers["location"] == "/dashboard/profile"


def test_security_headers_allow_configured_image_hosts(client):
    response = client.get("/health")

    assert response.headers["X-Frame-Options"] == "DENY"
    csp = response.headers["Content-Security-Policy"]
    assert "https://fal.media" in csp
    assert "https://replicate.delivery" in csp


class TestAuthPages:
    def test_sign_in_page_renders(self, client):
        response = client.get("/auth?next=/dashboard/profile")

        assert response.status_code == 200
        assert 'name="next" value="/dashboard/profile"' in response.text

    def test_sign_in_sets_cookie_and_redirects(self, client):
        response = client.post(
            "/auth",
            data={"email": "u1@example.com", "password": "correct-password", "next": "/dashboard/profile"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard/profile"
        assert response.cookies.get("sb-access-token") == "tok-u1"

    def test_sign_in_ignores_offsite_next(self, client):
        response = client.post(
            "/auth",
            data={"email": "u1@example.com", "password": "correct-password", "next": "//evil.example"},
            follow_redirects=False,
        )

        assert response.headers["location"] == "/dashboard/profile"

    def test_bad_password_rerenders_with_error(self, client):
        response = client.post("/auth", data={"email": "u1@example.com", "password": "wrong"})

        assert response.status_code == 401
        assert "Invalid email or password" in response.text

    def test_logout_clears_cookie(self, client, auth_service):
        client.cookies.set("sb-access-token", "tok-u1")

        response = client.post("/auth/logout", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/auth"
        assert auth_service.logged_out == ["tok-u1"]

    def test_me_returns_current_user(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer tok-u1"})

        assert response.status_code == 200
        assert response.json()["id"] == "u1"
