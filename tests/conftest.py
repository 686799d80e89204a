# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Shared fixtures. Nothing here needs a running database: pools and models
# are in-memory fakes that record what they were asked to do.
# =============================================================================

import io
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from chunks.repository import NoRecordError
from chunks.schemas import Chunk
from core.context import Application
from core.log import new_error_logger, new_info_logger


NOW = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)


def make_row(chunk_id=1, title="An old silent pond", content="A frog jumps in."):
    return {
        "id": chunk_id,
        "title": title,
        "content": content,
        "created": NOW,
        "expires": NOW + timedelta(days=365),
    }


class FakePool:
    """Stands in for asyncpg.Pool: canned results, recorded calls."""

    def __init__(self, *, fetchval=None, fetchrow=None, fetch=None, ping_error=None):
        self.calls = []
        self.fetchval_result = fetchval
        self.fetchrow_result = fetchrow
        self.fetch_result = fetch if fetch is not None else []
        self.ping_error = ping_error
        self.close_count = 0
        self._closing = False

    async def fetchval(self, sql, *args):
        self.calls.append(("fetchval", sql, args))
        if sql == "SELECT 1":
            if self.ping_error is not None:
                raise self.ping_error
            return 1
        return self.fetchval_result

    async def fetchrow(self, sql, *args):
        self.calls.append(("fetchrow", sql, args))
        if isinstance(self.fetchrow_result, BaseException):
            raise self.fetchrow_result
        return self.fetchrow_result

    async def fetch(self, sql, *args):
        self.calls.append(("fetch", sql, args))
        return self.fetch_result

    def is_closing(self):
        return self._closing

    async def close(self):
        if self._closing:
            raise AssertionError("pool closed twice")
        self._closing = True
        self.close_count += 1


class FakeChunkModel:
    """In-memory ChunkModel with the same method surface."""

    def __init__(self):
        self.rows = {}
        self.calls = []
        self.error = None
        self._next_id = 1

    def _check(self, name):
        self.calls.append(name)
        if self.error is not None:
            raise self.error

    async def insert(self, title, content, expires):
        self._check("insert")
        chunk_id = self._next_id
        self._next_id += 1
        self.rows[chunk_id] = make_row(chunk_id, title, content)
        return chunk_id

    async def get(self, chunk_id):
        self._check("get")
        if chunk_id not in self.rows:
            raise NoRecordError(chunk_id)
        return Chunk(**self.rows[chunk_id])

    async def latest(self):
        self._check("latest")
        return [Chunk(**self.rows[k]) for k in sorted(self.rows, reverse=True)][:10]

    async def update(self, chunk_id, title, content):
        self._check("update")
        if chunk_id not in self.rows:
            raise NoRecordError(chunk_id)
        self.rows[chunk_id].update(title=title, content=content)
        return Chunk(**self.rows[chunk_id])

    async def delete(self, chunk_id):
        self._check("delete")
        if self.rows.pop(chunk_id, None) is None:
            raise NoRecordError(chunk_id)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def info_stream():
    return io.StringIO()


@pytest.fixture
def error_stream():
    return io.StringIO()


@pytest.fixture
def info_log(info_stream):
    return new_info_logger(info_stream, name="chunkbox.test.info")


@pytest.fixture
def error_log(error_stream):
    return new_error_logger(error_stream, name="chunkbox.test.error")


@pytest.fixture
def chunk_model():
    return FakeChunkModel()


@pytest.fixture
def application(info_log, error_log, chunk_model):
    return Application(info_log=info_log, error_log=error_log, chunks=chunk_model)


@pytest.fixture
def client(application):
    from main import routes

    with TestClient(routes(application)) as c:
        yield c
