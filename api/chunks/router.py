"""
HTTP handlers for chunks.

Handlers are closures over the `Application` passed to `build_router`, so a
router only ever talks to the model and loggers it was built with.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Path, Response, status

from core.context import Application

from . import schemas
from .repository import NoRecordError


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chunk not found.")


def build_router(app: Application) -> APIRouter:
    router = APIRouter()

    @router.get("/chunks", name="list_chunks")
    async def list_chunks() -> schemas.ChunkList:
        """
        Latest non-expired chunks, newest first.
        """
        chunks = await app.chunks.latest()
        return schemas.ChunkList(chunks=chunks, count=len(chunks))

    @router.get("/", name="home")
    async def home() -> schemas.ChunkList:
        return await list_chunks()

    @router.post("/chunks", name="create_chunk", status_code=status.HTTP_201_CREATED)
    async def create_chunk(request: schemas.ChunkCreate, response: Response) -> dict:
        chunk_id = await app.chunks.insert(request.title, request.content, request.expires)
        app.info_log.info("Created chunk %s", chunk_id)
        response.headers["Location"] = f"/chunks/{chunk_id}"
        return {"id": chunk_id}

    @router.get("/chunks/{chunk_id}", name="view_chunk")
    async def view_chunk(chunk_id: int = Path(..., ge=1)) -> schemas.Chunk:
        try:
            return await app.chunks.get(chunk_id)
        except NoRecordError as e:
            raise _not_found() from e

    @router.put("/chunks/{chunk_id}", name="update_chunk")
    async def update_chunk(
        request: schemas.ChunkUpdate,
        chunk_id: int = Path(..., ge=1),
    ) -> schemas.Chunk:
        try:
            return await app.chunks.update(chunk_id, request.title, request.content)
        except NoRecordError as e:
            raise _not_found() from e

    @router.delete(
        "/chunks/{chunk_id}",
        name="delete_chunk",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
    )
    async def delete_chunk(chunk_id: int = Path(..., ge=1)) -> None:
        try:
            await app.chunks.delete(chunk_id)
        except NoRecordError as e:
            raise _not_found() from e
        app.info_log.info("Deleted chunk %s", chunk_id)

    return router
