"""
Chunk persistence (raw SQL).

Schema:
- chunks(id serial, title varchar(100), content text, created timestamptz,
  expires timestamptz)

Every method is one statement against the pool; asyncpg handles connection
checkout and concurrency. Driver errors are not caught here.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from .schemas import Chunk

LATEST_LIMIT = 10

_COLUMNS = "id, title, content, created, expires"


class NoRecordError(LookupError):
    """No matching (non-expired) chunk."""

    def __init__(self, chunk_id: int | None = None):
        super().__init__(f"No matching record found: {chunk_id}")
        self.chunk_id = chunk_id


def _to_chunk(record: asyncpg.Record | dict[str, Any]) -> Chunk:
    return Chunk(**dict(record))


class ChunkModel:
    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def insert(self, title: str, content: str, expires: int) -> int:
        """
        Insert a chunk that expires `expires` days from now. Returns its id.
        """
        chunk_id = await self.pool.fetchval(
            """
            INSERT INTO chunks (title, content, created, expires)
            VALUES ($1, $2, now(), now() + make_interval(days => $3))
            RETURNING id
            """,
            title,
            content,
            expires,
        )
        if chunk_id is None:
            raise RuntimeError("Failed to insert chunk.")
        return int(chunk_id)

    async def get(self, chunk_id: int) -> Chunk:
        row = await self.pool.fetchrow(
            f"""
            SELECT {_COLUMNS}
            FROM chunks
            WHERE id = $1
              AND expires > now()
            """,
            chunk_id,
        )
        if row is None:
            raise NoRecordError(chunk_id)
        return _to_chunk(row)

    async def latest(self) -> list[Chunk]:
        """
        Most recently created non-expired chunks, newest first.
        """
        rows = await self.pool.fetch(
            f"""
            SELECT {_COLUMNS}
            FROM chunks
            WHERE expires > now()
            ORDER BY id DESC
            LIMIT $1
            """,
            LATEST_LIMIT,
        )
        return [_to_chunk(r) for r in rows]

    async def update(self, chunk_id: int, title: str, content: str) -> Chunk:
        row = await self.pool.fetchrow(
            f"""
            UPDATE chunks
            SET title = $2,
                content = $3
            WHERE id = $1
              AND expires > now()
            RETURNING {_COLUMNS}
            """,
            chunk_id,
            title,
            content,
        )
        if row is None:
            raise NoRecordError(chunk_id)
        return _to_chunk(row)

    async def delete(self, chunk_id: int) -> None:
        row = await self.pool.fetchrow(
            """
            DELETE FROM chunks
            WHERE id = $1
            RETURNING id
            """,
            chunk_id,
        )
        if row is None:
            raise NoRecordError(chunk_id)
