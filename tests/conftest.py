from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

import pytest

_DB_DIR = Path(tempfile.mkdtemp(prefix="sysviz-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR / 'test.db'}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["RELAY_GLOBAL_DISCONNECT_NOTICE"] = "false"

from fastapi.testclient import TestClient  # noqa: E402

from sysviz.core.db import drop_models, init_models  # noqa: E402
from sysviz.main import app  # noqa: E402


@pytest.fixture
def database():
    async def reset() -> None:
        await drop_models()
        await init_models()

    asyncio.run(reset())
    yield


@pytest.fixture
def client(database):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(client: TestClient):
    """Регистрирует пользователя и возвращает заголовки авторизации"""

    def _make(username: str) -> dict:
        response = client.post(
            "/api/auth/register",
            json={"username": username, "email": f"{username}@example.com", "password": "secret123"},
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _make
