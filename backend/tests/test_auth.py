import hashlib

from fastapi.testclient import TestClient

from badgeshop.db import SessionLocal
from badgeshop.main import app
from badgeshop.models.user import User
from badgeshop.services.auth_service import AuthService
from badgeshop.utils.security import decode_token

client = TestClient(app)


def _register(email, password="s3cret!"):
    return client.post(
        "/api/register",
        json={"firstName": "Marie", "lastName": "Curie", "email": email, "password": password},
    )


def test_register_and_login():
    res = _register("marie@example.com")
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "User registered successfully"
    assert body["role"] == "user"

    res = client.post("/api/login", json={"email": "marie@example.com", "password": "s3cret!"})
    assert res.status_code == 200
    body = res.json()
    assert body["firstName"] == "Marie"
    assert body["tokenType"] == "bearer"
    assert decode_token(body["accessToken"])["sub"] == str(body["userId"])


def test_password_is_not_stored_in_clear():
    _register("pierre@example.com", "radium")
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == "pierre@example.com").one()
        assert user.password != "radium"
        assert user.password.startswith("$pbkdf2-sha256$")
    finally:
        db.close()


def test_duplicate_email_is_409():
    _register("irene@example.com")
    res = _register("irene@example.com")
    assert res.status_code == 409
    assert res.json() == {"error": "Email already registered"}


def test_register_missing_fields_is_400():
    res = client.post("/api/register", json={"email": "nobody@example.com"})
    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "Invalid request"
    assert "firstName" in body["fields"]


def test_wrong_password_is_401_without_token():
    _register("eve@example.com", "right")
    res = client.post("/api/login", json={"email": "eve@example.com", "password": "wrong"})
    assert res.status_code == 401
    assert res.json() == {"error": "Invalid credentials"}
    assert "accessToken" not in res.json()


def test_unknown_email_is_401():
    res = client.post("/api/login", json={"email": "ghost@example.com", "password": "boo"})
    assert res.status_code == 401
    assert "accessToken" not in res.json()


def test_login_missing_password_is_400():
    res = client.post("/api/login", json={"email": "eve@example.com"})
    assert res.status_code == 400


def test_legacy_scrypt_hash_still_verifies():
    salt = "a1b2c3d4e5f60718"
    key = hashlib.scrypt(b"old-password", salt=salt.encode(), n=16384, r=8, p=1, dklen=64).hex()
    db = SessionLocal()
    try:
        db.add(User(first_name="Old", last_name="Timer", email="legacy@example.com", password=f"{salt}:{key}"))
        db.commit()
    finally:
        db.close()

    ok = client.post("/api/login", json={"email": "legacy@example.com", "password": "old-password"})
    assert ok.status_code == 200
    bad = client.post("/api/login", json={"email": "legacy@example.com", "password": "new-password"})
    assert bad.status_code == 401


def test_legacy_sha256_hash_still_verifies():
    db = SessionLocal()
    try:
        db.add(
            User(
                first_name="Older",
                last_name="Timer",
                email="sha@example.com",
                password=hashlib.sha256(b"plain-old").hexdigest(),
            )
        )
        db.commit()
    finally:
        db.close()

    assert client.post("/api/login", json={"email": "sha@example.com", "password": "plain-old"}).status_code == 200
    assert client.post("/api/login", json={"email": "sha@example.com", "password": "plain-new"}).status_code == 401


def test_reset_password_flow():
    _register("reset@example.com", "before")
    res = client.post("/api/reset-password", json={"email": "reset@example.com"})
    assert res.status_code == 200
    unknown = client.post("/api/reset-password", json={"email": "missing@example.com"})
    assert unknown.status_code == 200
    assert unknown.json() == res.json()

    db = SessionLocal()
    try:
        token = AuthService(db).request_password_reset("reset@example.com")
    finally:
        db.close()
    assert token

    res = client.post("/api/reset-password/confirm", json={"token": token, "newPassword": "after"})
    assert res.status_code == 200
    assert client.post("/api/login", json={"email": "reset@example.com", "password": "after"}).status_code == 200
    assert client.post("/api/login", json={"email": "reset@example.com", "password": "before"}).status_code == 401


def test_reset_confirm_rejects_access_token():
    _register("sneaky@example.com", "pw")
    login = client.post("/api/login", json={"email": "sneaky@example.com", "password": "pw"}).json()
    res = client.post(
        "/api/reset-password/confirm", json={"token": login["accessToken"], "newPassword": "hijack"}
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid or expired reset token"}
