from datetime import timedelta

import pytest

from novel_api.core.security import create_access_token, create_refresh_token, verify_token


def register(client, username="alice", email="alice@example.com", password="secret1"):
    return client.post("/auth/register", json={"username": username, "email": email, "password": password})


def test_register_creates_user_with_hashed_password(client, db):
    response = register(client)
    assert response.status_code == 201
    assert response.json() == {"message": "User registered successfully"}

    stored = db.Users.find_one({"email": "alice@example.com"})
    assert stored["username"] == "alice"
    assert stored["password"] != "secret1"
    assert stored["password"].startswith("$2")


def test_password_length_boundary(client):
    short = register(client, password="12345")
    assert short.status_code == 400
    assert "password" in short.json()["errors"]
    assert register(client, password="123456").status_code == 201


@pytest.mark.parametrize("payload, field", [
    ({"username": "  ", "email": "bob@example.com", "password": "secret1"}, "username"),
    ({"username": "bob", "email": "not-an-email", "password": "secret1"}, "email"),
    ({"username": "bob", "email": "bob@example.com"}, "password"),
])
def test_register_reports_invalid_field(client, payload, field):
    response = client.post("/auth/register", json=payload)
    assert response.status_code == 400
    assert list(response.json()["errors"]) == [field]


def test_register_reports_every_invalid_field(client):
    response = client.post("/auth/register", json={"username": "", "email": "x", "password": "1"})
    assert response.status_code == 400
    assert set(response.json()["errors"]) == {"username", "email", "password"}


def test_duplicate_email_is_rejected(client):
    register(client)
    response = register(client, username="alice2")
    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"


def test_duplicate_username_is_rejected(client):
    register(client)
    response = register(client, email="other@example.com")
    assert response.status_code == 400
    assert response.json()["detail"] == "Username is taken"


def test_login_issues_token_pair(client):
    register(client)
    response = client.post("/auth/login", json={"email": "alice@example.com", "password": "secret1"})
    assert response.status_code == 200
    body = response.json()
    access = verify_token(body["token"], "access")
    refresh = verify_token(body["refreshToken"], "refresh")
    assert access["username"] == refresh["username"] == "alice"
    assert access["sub"] == refresh["sub"]
    assert "exp" in access and "exp" in refresh


def test_login_failures_are_indistinguishable(client):
    register(client)
    wrong_password = client.post("/auth/login", json={"email": "alice@example.com", "password": "nope123"})
    unknown_email = client.post("/auth/login", json={"email": "nobody@example.com", "password": "secret1"})
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid email or password."}


def test_refresh_token_issues_access_token(client):
    refresh = create_refresh_token({"sub": "42", "username": "alice"})
    response = client.post("/auth/refreshToken", json={"refresh_token": refresh})
    assert response.status_code == 200
    claims = verify_token(response.json()["accessToken"], "access")
    assert claims["sub"] == "42"
    assert claims["username"] == "alice"


def test_refresh_accepts_camel_case_field(client):
    refresh = create_refresh_token({"sub": "42", "username": "alice"})
    response = client.post("/auth/refreshToken", json={"refreshToken": refresh})
    assert response.status_code == 200


@pytest.mark.parametrize("token", [
    "",
    "garbage",
    create_access_token({"sub": "42", "username": "alice"}),
    create_refresh_token({"sub": "42", "username": "alice"}, expires_delta=timedelta(seconds=-5)),
])
def test_refresh_rejects_unusable_tokens(client, token):
    response = client.post("/auth/refreshToken", json={"refresh_token": token})
    assert response.status_code == 401


def test_availability_checks(client):
    register(client)
    assert client.get("/auth/check-email", params={"email": "alice@example.com"}).json() == {"available": False}
    assert client.get("/auth/check-email", params={"email": "new@example.com"}).json() == {"available": True}
    assert client.get("/auth/check-username", params={"username": "alice"}).json() == {"available": False}
    assert client.get("/auth/check-username").status_code == 400
