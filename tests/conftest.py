"""
Shared pytest fixtures and in-memory storage doubles.
"""
import time
from contextlib import asynccontextmanager
from typing import Any, Callable, Optional

import jwt
import pytest
from fastapi.testclient import TestClient

TEST_JWT_SECRET = "test-secret"


class FakeStorageError(Exception):
    """Stands in for a driver/database error raised by asyncpg."""


class FakeTransaction:
    def __init__(self, conn: "FakeConnection"):
        self.conn = conn

    async def __aenter__(self) -> "FakeTransaction":
        self.conn.pending = []
        self.conn.pool.begins += 1
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        pool = self.conn.pool
        if exc_type is None:
            pool.rows.extend(self.conn.pending)
            pool.commits += 1
        else:
            pool.rollbacks += 1
        self.conn.pending = None
        return False


class FakeConnection:
    def __init__(self, pool: "FakePool"):
        self.pool = pool
        self.pending: Optional[list] = None

    def transaction(self) -> FakeTransaction:
        return FakeTransaction(self)

    async def execute(self, sql: str, *args: Any) -> str:
        self.pool.executed.append((sql, args))
        if self.pool.reject is not None:
            error = self.pool.reject(args)
            if error is not None:
                raise error
        if self.pending is None:
            self.pool.rows.append(args)
        else:
            self.pending.append(args)
        return "INSERT 0 1"


class FakePool:
    """
    The slice of the asyncpg.Pool surface the service relies on.

    Inserted rows are the positional argument tuples passed to `execute`;
    they only land in `rows` when the surrounding transaction commits.
    """

    def __init__(self):
        self.rows: list[tuple] = []
        self.executed: list[tuple[str, tuple]] = []
        self.fetch_calls: list[tuple[str, tuple]] = []
        self.fetch_result: list[dict] = []
        self.reject: Optional[Callable[[tuple], Optional[BaseException]]] = None
        self.fail_fetch = False
        self.fail_acquire = False
        self.ping_value: Any = 1
        self.acquired = 0
        self.released = 0
        self.begins = 0
        self.commits = 0
        self.rollbacks = 0

    @asynccontextmanager
    async def acquire(self):
        if self.fail_acquire:
            raise FakeStorageError("connection refused")
        self.acquired += 1
        try:
            yield FakeConnection(self)
        finally:
            self.released += 1

    async def fetch(self, sql: str, *args: Any) -> list[dict]:
        self.fetch_calls.append((sql, args))
        if self.fail_fetch:
            raise FakeStorageError("relation does not exist")
        return [dict(row) for row in self.fetch_result]

    async def fetchval(self, sql: str, *args: Any) -> Any:
        if self.fail_fetch:
            raise FakeStorageError("connection refused")
        return self.ping_value

    @property
    def storage_calls(self) -> int:
        return self.acquired + len(self.fetch_calls)


@pytest.fixture(autouse=True)
def jwt_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("JWT_ALG", "HS256")


@pytest.fixture
def make_token() -> Callable[..., str]:
    def _make(secret: str = TEST_JWT_SECRET, expires_in: int = 300, **claims: Any) -> str:
        payload = {"exp": int(time.time()) + expires_in, **claims}
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture
def client(fake_pool: FakePool):
    from core import db
    from main import app

    async def _override_pool() -> FakePool:
        return fake_pool

    app.dependency_overrides[db.get_pool] = _override_pool
    # No context manager: the lifespan (real pool) is not started.
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(make_token) -> dict:
    return {"Authorization": f"Bearer {make_token(id='user-1', email='scanner@example.com')}"}
