"""Tests for the auth endpoints and the bearer dependency."""
from datetime import timedelta
from uuid import uuid4

from core.security import create_access_token


async def register(client, email="new@example.com", password="password123"):
    return await client.post("/api/auth/register", json={"email": email, "password": password})


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_register_starts_at_n5(client):
    response = await register(client)
    assert response.status_code == 201
    body = response.json()
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["current_level"] == "N5"
    assert body["token"]

    headers = {"Authorization": f"Bearer {body['token']}"}
    stats = await client.get("/api/progress", headers=headers)
    assert stats.status_code == 200
    assert stats.json()["current_vocab_index"] == 0
    assert stats.json()["streak_days"] == 0


async def test_duplicate_email_conflicts(client):
    await register(client)
    response = await register(client, email="NEW@example.com")
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "E4011_DUPLICATE_KEY"


async def test_short_password_rejected(client):
    response = await register(client, password="short")
    assert response.status_code == 400


async def test_login(client):
    await register(client)
    response = await client.post("/api/auth/login", json={"email": "new@example.com", "password": "password123"})
    assert response.status_code == 200
    token = response.json()["token"]

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "new@example.com"


async def test_bad_login_messages_match(client):
    await register(client)
    wrong_password = await client.post("/api/auth/login", json={"email": "new@example.com", "password": "wrongpass1"})
    wrong_email = await client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "password123"})

    assert wrong_password.status_code == wrong_email.status_code == 401
    assert wrong_password.json()["error"]["message"] == wrong_email.json()["error"]["message"]


async def test_missing_token(client):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "E3004_TOKEN_MISSING"


async def test_garbage_token(client):
    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "E3003_TOKEN_INVALID"


async def test_expired_token(client):
    token = create_access_token({"sub": str(uuid4())}, expires_delta=timedelta(seconds=-5))
    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "E3002_TOKEN_EXPIRED"


async def test_token_for_deleted_user(client):
    token = create_access_token({"sub": str(uuid4())})
    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 404


async def test_password_over_bcrypt_limit_rejected(client):
    # 30 kana are 90 bytes in UTF-8
    response = await register(client, password="あ" * 30)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "E2002_INVALID_FORMAT"


async def test_multibyte_password_within_limit(client):
    password = "あ" * 24
    assert (await register(client, password=password)).status_code == 201
    response = await client.post("/api/auth/login", json={"email": "new@example.com", "password": password})
    assert response.status_code == 200


async def test_error_body_carries_generated_correlation_id(client):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.headers["X-Correlation-ID"]
    assert response.json()["error"]["correlation_id"] == response.headers["X-Correlation-ID"]


async def test_error_body_echoes_client_correlation_id(client):
    response = await client.get("/api/auth/me", headers={"X-Correlation-ID": "req-42"})
    assert response.json()["error"]["correlation_id"] == "req-42"
    assert response.headers["X-Correlation-ID"] == "req-42"
