"""
Shared fixtures.

Under pytest ``pulseboard.db.database`` binds an in-memory SQLite engine
shared through ``StaticPool``, so the app and the fixtures below see the same
database. Tables are created once per session and emptied after each test.
"""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from pulseboard.api.main import app
from pulseboard.db import models
from pulseboard.db.database import SessionLocal, engine
from pulseboard.utils.feature_flags import refresh_feature_flag_cache
from pulseboard.utils.passwords import generate_session_token

_ENV_VARS = (
    "ADMIN_EMAILS",
    "REGISTRATION_ENABLED",
    "EXPORTS_ENABLED",
    "CHART_RENDERING_ENABLED",
    "SESSION_TTL_HOURS",
    "REMEMBER_ME_TTL_MULTIPLIER",
    "DEFAULT_USER_PASSWORD",
)


@pytest.fixture(scope="session", autouse=True)
def _schema():
    models.Base.metadata.create_all(bind=engine)
    yield
    models.Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(models.Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    refresh_feature_flag_cache()
    yield
    refresh_feature_flag_cache()


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# Backwards compatibility: some tests use the shorter 'db' fixture name
@pytest.fixture
def db(db_session):
    return db_session


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "name": f"User {counter['n']}",
            "email": f"user{counter['n']}@example.com",
            "position": "Engineer",
            "status": "active",
            "role": "member",
        }
        data.update(overrides)
        user = models.User(**data)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_category(db_session):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {"name": f"Category {counter['n']}", "color": "#E6E6FA"}
        data.update(overrides)
        category = models.TaskCategory(**data)
        db_session.add(category)
        db_session.commit()
        db_session.refresh(category)
        return category

    return _make


@pytest.fixture
def make_task(db_session):
    def _make(**overrides):
        data = {"title": "Task", "status": "todo", "priority": "medium", "points": 1}
        data.update(overrides)
        task = models.Task(**data)
        db_session.add(task)
        db_session.commit()
        db_session.refresh(task)
        return task

    return _make


@pytest.fixture
def auth_headers(db_session):
    """Factory: create an auth identity + master user + live session, return headers."""

    def _headers(role: str = "admin", email: str = None, status: str = "active"):
        email = email or f"{role}-{generate_session_token(6).lower()}@example.com"
        auth_user = models.AuthUser(name=email.split("@")[0], email=email, role=role)
        db_session.add(auth_user)
        db_session.flush()
        if db_session.query(models.User).filter(models.User.email == email).first() is None:
            db_session.add(models.User(name=auth_user.name, email=email, role=role, status=status))
        token = generate_session_token()
        db_session.add(
            models.AuthSession(
                token=token,
                user_id=auth_user.id,
                expires_at=models.now_utc() + timedelta(hours=1),
            )
        )
        db_session.commit()
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin_headers(auth_headers):
    return auth_headers("admin")


@pytest.fixture
def manager_headers(auth_headers):
    return auth_headers("manager")


@pytest.fixture
def member_headers(auth_headers):
    return auth_headers("member")
