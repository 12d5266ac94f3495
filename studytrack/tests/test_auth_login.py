import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studytrack import models
from studytrack.app import app
from studytrack.config import settings
from studytrack.database import Base
from studytrack.dependencies import get_db
from studytrack.routers.auth import hash_password


@pytest.fixture()
def client_env(monkeypatch):
    monkeypatch.setattr(settings, "jwt_secret", "test-secret")
    monkeypatch.setattr(settings, "refresh_cookie_secure", False)
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    with TestingSessionLocal() as db:
        user = models.User(
            email="user@example.com",
            name="Test User",
            hashed_password=hash_password("correct-password"),
            is_active=True,
            token_version=0,
        )
        db.add(user)
        db.commit()

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)

    yield client, TestingSessionLocal

    app.dependency_overrides.clear()


def test_login_rejects_wrong_password_and_sets_no_cookie(client_env):
    client, _ = client_env
    res = client.post("/api/v1/auth/login", json={"email": "user@example.com", "password": "wrong-password"})
    assert res.status_code == 401
    assert "access_token" not in res.json()
    set_cookie = res.headers.get("set-cookie", "").lower()
    assert "refresh_token" not in set_cookie


def test_login_returns_token_and_refresh_cookie(client_env):
    client, _ = client_env
    res = client.post("/api/v1/auth/login", json={"email": "user@example.com", "password": "correct-password"})
    assert res.status_code == 200, res.text
    token = res.json()["access_token"]
    assert "refresh_token" in res.headers.get("set-cookie", "")

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "user@example.com"

    refreshed = client.post("/api/v1/auth/refresh")
    assert refreshed.status_code == 200, refreshed.text
    assert refreshed.json()["user"]["name"] == "Test User"


def test_signup_creates_settings_and_rejects_duplicates(client_env):
    client, session_factory = client_env
    payload = {"email": "new@example.com", "name": "New Student", "password": "secret-pass"}

    res = client.post("/api/v1/auth/signup", json=payload)
    assert res.status_code == 200, res.text
    token = res.json()["access_token"]

    settings_res = client.get("/api/v1/settings/", headers={"Authorization": f"Bearer {token}"})
    assert settings_res.json()["planning_days"] == 7
    with session_factory() as db:
        assert db.query(models.UserSettings).count() == 1

    assert client.post("/api/v1/auth/signup", json=payload).status_code == 409


def test_logout_invalidates_existing_tokens(client_env):
    client, _ = client_env
    token = client.post(
        "/api/v1/auth/login", json={"email": "user@example.com", "password": "correct-password"}
    ).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    assert client.post("/api/v1/auth/logout", headers=headers).status_code == 200
    assert client.get("/api/v1/subjects/", headers=headers).status_code == 401
    assert client.get("/api/v1/subjects/").status_code == 401
