import os

import pytest
from fastapi.testclient import TestClient

from badgeshop.config import settings
from badgeshop.main import app

client = TestClient(app)


@pytest.fixture(scope="module")
def account():
    res = client.post(
        "/api/register",
        json={"firstName": "Alan", "lastName": "Turing", "email": "alan@example.com", "password": "enigma"},
    )
    user_id = res.json()["userId"]
    token = client.post("/api/login", json={"email": "alan@example.com", "password": "enigma"}).json()["accessToken"]
    return {"id": user_id, "token": token}


def test_profile_requires_auth():
    res = client.get("/api/users/profile")
    assert res.status_code == 401
    assert res.json()["redirectUrl"] == "/account/login"


def test_profile_rejects_garbage_token():
    res = client.get("/api/users/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


def test_profile_with_bearer_token(account):
    res = client.get("/api/users/profile", headers={"Authorization": f"Bearer {account['token']}"})
    assert res.status_code == 200
    body = res.json()
    assert body["id"] == account["id"]
    assert body["firstName"] == "Alan"
    assert body["email"] == "alan@example.com"
    assert body["address"] == ""


def test_profile_with_user_id_cookie(account):
    c = TestClient(app, cookies={"userId": str(account["id"])})
    res = c.get("/api/users/profile")
    assert res.status_code == 200
    assert res.json()["lastName"] == "Turing"


def test_profile_unknown_user_is_404():
    c = TestClient(app, cookies={"userId": "424242"})
    res = c.get("/api/users/profile")
    assert res.status_code == 404


def test_update_profile(account):
    res = client.post(
        "/api/update-profile",
        json={"userId": account["id"], "firstName": "Alan M.", "lastName": "Turing", "email": "alan@example.com"},
    )
    assert res.status_code == 200
    assert res.json()["user"]["firstName"] == "Alan M."


def test_update_profile_new_password_needs_current(account):
    base = {"userId": account["id"], "firstName": "Alan", "lastName": "Turing", "email": "alan@example.com"}
    res = client.post("/api/update-profile", json=dict(base, newPassword="bombe"))
    assert res.status_code == 400
    res = client.post("/api/update-profile", json=dict(base, newPassword="bombe", currentPassword="wrong"))
    assert res.status_code == 401
    res = client.post("/api/update-profile", json=dict(base, newPassword="bombe", currentPassword="enigma"))
    assert res.status_code == 200
    assert client.post("/api/login", json={"email": "alan@example.com", "password": "bombe"}).status_code == 200


def test_update_profile_email_taken(account):
    client.post(
        "/api/register",
        json={"firstName": "Joan", "lastName": "Clarke", "email": "joan@example.com", "password": "x"},
    )
    res = client.post(
        "/api/update-profile",
        json={"userId": account["id"], "firstName": "Alan", "lastName": "Turing", "email": "joan@example.com"},
    )
    assert res.status_code == 409


def test_update_profile_unknown_user():
    res = client.post(
        "/api/update-profile",
        json={"userId": 999999, "firstName": "A", "lastName": "B", "email": "ab@example.com"},
    )
    assert res.status_code == 404


def test_upload_profile_image(account):
    res = client.post(
        "/api/upload-profile-image",
        data={"userId": str(account["id"])},
        files={"profileImage": ("my photo.png", b"\x89PNG fake bytes", "image/png")},
    )
    assert res.status_code == 200
    url = res.json()["imageUrl"]
    assert url.startswith(f"/uploads/profiles/{account['id']}-")
    assert url.endswith("-my-photo.png")
    stored = os.path.join(settings.UPLOAD_DIR, "profiles", url.rsplit("/", 1)[1])
    assert os.path.exists(stored)

    profile = client.get("/api/users/profile", headers={"Authorization": f"Bearer {account['token']}"}).json()
    assert profile["profileImageUrl"] == url


def test_upload_rejects_non_image(account):
    res = client.post(
        "/api/upload-profile-image",
        data={"userId": str(account["id"])},
        files={"profileImage": ("notes.txt", b"hello", "text/plain")},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "File must be an image"}


def test_upload_rejects_large_file(account):
    big = b"0" * (settings.PROFILE_IMAGE_MAX_BYTES + 1)
    res = client.post(
        "/api/upload-profile-image",
        data={"userId": str(account["id"])},
        files={"profileImage": ("big.jpg", big, "image/jpeg")},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "File size exceeds 2MB limit"}


def test_upload_without_file():
    res = client.post("/api/upload-profile-image", data={"userId": "1"})
    assert res.status_code == 400
