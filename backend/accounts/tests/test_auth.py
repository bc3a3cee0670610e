import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

User = get_user_model()


@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username="traveller",
        email="traveller@example.com",
        password="examplepass",
    )


def test_register_creates_user_and_returns_tokens(db, client):
    payload = {
        "username": "newbie",
        "email": "New@Example.com",
        "password": "secret1",
        "isHotelOwner": True,
    }
    response = client.post("/api/register", payload, format="json")

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["username"] == "newbie"
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["isHotelOwner"] is True
    assert "access" in body and "refresh" in body
    assert User.objects.get(username="newbie").check_password("secret1")


def test_register_with_existing_username_is_rejected(db, client, user):
    payload = {
        "username": "Traveller",
        "email": "other@example.com",
        "password": "password123",
    }
    response = client.post("/api/register", payload, format="json")

    assert response.status_code == 400
    assert "username" in response.json()


def test_register_requires_valid_email_and_password_length(db, client):
    response = client.post(
        "/api/register",
        {"username": "shorty", "email": "not-an-email", "password": "123"},
        format="json",
    )

    assert response.status_code == 400
    body = response.json()
    assert "email" in body
    assert "password" in body
    assert not User.objects.filter(username="shorty").exists()


def test_login_returns_tokens_and_user_payload(db, client, user):
    response = client.post(
        "/api/login",
        {"username": "traveller", "password": "examplepass"},
        format="json",
    )

    assert response.status_code == 200
    body = response.json()
    assert "access" in body and "refresh" in body
    assert body["user"]["username"] == "traveller"


def test_login_with_wrong_password_is_rejected(db, client, user):
    response = client.post(
        "/api/login",
        {"username": "traveller", "password": "wrong"},
        format="json",
    )

    assert response.status_code == 401


def test_current_user_requires_authentication(db, client):
    response = client.get("/api/user")

    assert response.status_code == 401


def test_current_user_with_bearer_token(db, client, user):
    login = client.post(
        "/api/login",
        {"username": "traveller", "password": "examplepass"},
        format="json",
    )
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.json()['access']}")

    response = client.get("/api/user")

    assert response.status_code == 200
    assert response.json()["email"] == "traveller@example.com"
