"""Shared fixtures: a throwaway SQLite store and two signed-in users."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from workout_logger.auth import (
    IdentityProvider,
    InvalidTokenError,
    UserIdentity,
    get_identity_provider,
)
from workout_logger.database import enable_sqlite_foreign_keys, get_db
from workout_logger.main import app
from workout_logger.models import Base

USER_A = UserIdentity(id="0a0a0a0a-0000-4000-8000-00000000000a", email="a@example.com")
USER_B = UserIdentity(id="0b0b0b0b-0000-4000-8000-00000000000b", email="b@example.com")

TOKENS = {
    "token-a": USER_A,
    "token-b": USER_B,
}


class StaticIdentityProvider(IdentityProvider):
    """Resolves a fixed set of tokens."""

    def __init__(self, users):
        self.users = users

    def verify(self, token: str) -> UserIdentity:
        try:
            return self.users[token]
        except KeyError:
            raise InvalidTokenError("unknown token")


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def session_override(url: str):
    engine = create_async_engine(url, poolclass=NullPool)
    enable_sqlite_foreign_keys(engine.sync_engine)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    return override_get_db


@pytest.fixture
def database_path(tmp_path):
    path = tmp_path / "workouts.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    engine.dispose()
    return path


@pytest.fixture
def count_rows(database_path):
    """Count rows in a table straight from the store, bypassing the API."""
    def _count(table: str) -> int:
        engine = create_engine(f"sqlite:///{database_path}")
        try:
            with engine.connect() as conn:
                return conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar()
        finally:
            engine.dispose()
    return _count


@pytest.fixture
def identity_provider():
    return StaticIdentityProvider(TOKENS)


@pytest.fixture
def client(database_path, identity_provider):
    app.dependency_overrides[get_db] = session_override(f"sqlite+aiosqlite:///{database_path}")
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_a():
    return bearer("token-a")


@pytest.fixture
def auth_b():
    return bearer("token-b")


@pytest.fixture
def make_workout(client, auth_a):
    def _make(name="Leg Day", workout_date="2024-01-01", notes=None, headers=None):
        response = client.post(
            "/api/workouts",
            json={"name": name, "workout_date": workout_date, "notes": notes},
            headers=headers or auth_a,
        )
        assert response.status_code == 201, response.text
        return response.json()["workout"]
    return _make


@pytest.fixture
def make_exercise(client, auth_a):
    def _make(workout_id, exercise_name="Squat", sets=3, reps=10, weight=100, headers=None):
        response = client.post(
            f"/api/workouts/{workout_id}/exercises",
            json={"exercise_name": exercise_name, "sets": sets, "reps": reps, "weight": weight},
            headers=headers or auth_a,
        )
        assert response.status_code == 201, response.text
        return response.json()["exercise"]
    return _make
