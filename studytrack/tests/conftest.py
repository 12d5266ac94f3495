import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studytrack import models
from studytrack.app import app
from studytrack.assistant import AIServiceError
from studytrack.database import Base
from studytrack.dependencies import get_ai_client, get_current_user, get_db


class FakeAIClient:
    """Stands in for GenerativeClient; replies are handed out in order."""

    model = "fake-model"

    def __init__(self):
        self.replies = []
        self.prompts = []
        self.fail = False

    def generate(self, prompt, temperature=0.4):
        self.prompts.append(prompt)
        if self.fail:
            raise AIServiceError("upstream unavailable")
        if not self.replies:
            return "OK"
        return self.replies.pop(0)

    def test_connection(self):
        return {"success": not self.fail, "message": f"Successfully connected with model {self.model}."}


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture()
def client_env(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    with session_factory() as db:
        user = models.User(
            email="student@example.com",
            name="Test Student",
            hashed_password="not-used",
            is_active=True,
            token_version=0,
        )
        other = models.User(email="other@example.com", name="Other", hashed_password="not-used")
        db.add_all([user, other])
        db.commit()
        user_id = user.id
        other_id = other.id

    def override_get_current_user(db=Depends(get_db)):
        return db.get(models.User, user_id)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    client = TestClient(app)

    yield client, session_factory, other_id

    app.dependency_overrides.clear()


@pytest.fixture()
def client(client_env):
    return client_env[0]


@pytest.fixture()
def fake_ai(client_env):
    fake = FakeAIClient()
    app.dependency_overrides[get_ai_client] = lambda: fake
    return fake


@pytest.fixture()
def subject(client):
    res = client.post("/api/v1/subjects/", json={"name": "Calculus", "daily_goal_hours": 1.0, "category": "Maths"})
    assert res.status_code == 200, res.text
    return res.json()


def add_task(client, subject_id, name, **fields):
    res = client.post(f"/api/v1/subjects/{subject_id}/tasks", json={"name": name, **fields})
    assert res.status_code == 200, res.text
    return res.json()
