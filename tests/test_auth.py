import pytest

from dentalbill.core.config import settings
from dentalbill.core.exceptions import AUTH_ERROR_MESSAGES, GENERIC_AUTH_MESSAGE, auth_error_message
from dentalbill.core.security import create_access_token, decode_access_token, get_password_hash, verify_password


def test_error_messages():
    assert auth_error_message("auth/weak-password") == "Password should be at least 6 characters."
    assert auth_error_message("auth/something-new") == GENERIC_AUTH_MESSAGE
    assert auth_error_message(None) == GENERIC_AUTH_MESSAGE


def test_password_hashing():
    hashed = get_password_hash("secret123")
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("secret123", None)


def test_token_round_trip():
    token = create_access_token({"sub": "abc"})
    assert decode_access_token(token)["sub"] == "abc"
    assert decode_access_token(token + "x") is None


@pytest.mark.asyncio
async def test_signup_login_me_logout(client):
    # 1. Signup
    res = await client.post("/api/v1/auth/signup", json={
        "name": "Dr. Asha", "email": "Asha@Example.com", "password": "secret123",
    })
    assert res.status_code == 200
    assert res.json()["dentist"]["email"] == "asha@example.com"
    assert res.cookies.get("dentist_id") == res.json()["dentist"]["id"]

    # 2. Login
    res = await client.post("/api/v1/auth/login", json={"email": "asha@example.com", "password": "secret123"})
    assert res.status_code == 200
    token = res.json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    # 3. Me
    res = await client.get("/api/v1/auth/me", headers=headers)
    assert res.status_code == 200
    assert res.json()["name"] == "Dr. Asha"

    # 4. Logout revokes the token
    res = await client.post("/api/v1/auth/logout", headers=headers)
    assert res.status_code == 200
    res = await client.get("/api/v1/auth/me", headers=headers)
    assert res.status_code == 401
    assert res.json() == {"error": "Could not validate credentials"}


@pytest.mark.asyncio
@pytest.mark.parametrize("payload, code, status_code", [
    ({"name": "", "email": "a@b.com", "password": "secret123"}, "auth/missing-fields", 400),
    ({"name": "A", "email": "not-an-email", "password": "secret123"}, "auth/invalid-email", 400),
    ({"name": "A", "email": "a@b.com", "password": "123"}, "auth/weak-password", 400),
])
async def test_signup_errors(client, payload, code, status_code):
    res = await client.post("/api/v1/auth/signup", json=payload)
    assert res.status_code == status_code
    assert res.json() == {"error": AUTH_ERROR_MESSAGES[code]}


@pytest.mark.asyncio
async def test_signup_duplicate_email(client, dentist):
    res = await client.post("/api/v1/auth/signup", json={
        "name": "Copy", "email": dentist.email, "password": "secret123",
    })
    assert res.status_code == 409
    assert res.json() == {"error": AUTH_ERROR_MESSAGES["auth/email-already-in-use"]}


@pytest.mark.asyncio
async def test_wrong_password_then_lockout(client, dentist):
    for _ in range(settings.LOGIN_MAX_ATTEMPTS):
        res = await client.post("/api/v1/auth/login", json={"email": dentist.email, "password": "nope"})
        assert res.status_code == 401
        assert res.json() == {"error": AUTH_ERROR_MESSAGES["auth/invalid-credential"]}

    # Even the right password is refused while locked out
    res = await client.post("/api/v1/auth/login", json={"email": dentist.email, "password": "secret123"})
    assert res.status_code == 429
    assert res.json() == {"error": AUTH_ERROR_MESSAGES["auth/too-many-requests"]}


@pytest.mark.asyncio
async def test_successful_login_clears_failures(client, dentist, fake_redis):
    await client.post("/api/v1/auth/login", json={"email": dentist.email, "password": "nope"})
    res = await client.post("/api/v1/auth/login", json={"email": dentist.email, "password": "secret123"})
    assert res.status_code == 200
    assert await fake_redis.keys("login_failures:*") == []


@pytest.mark.asyncio
async def test_disabled_account(client, session, dentist):
    dentist.is_active = False
    session.add(dentist)
    await session.commit()

    res = await client.post("/api/v1/auth/login", json={"email": dentist.email, "password": "secret123"})
    assert res.status_code == 403
    assert res.json() == {"error": AUTH_ERROR_MESSAGES["auth/user-disabled"]}
