"""
Pydantic schemas for chunk endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

# Allowed lifetimes, in days.
ExpiresDays = Literal[1, 7, 365]


class Chunk(BaseModel):
    id: int
    title: str
    content: str
    # str when the pool was opened with parseTime=false.
    created: datetime | str
    expires: datetime | str


class ChunkCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1)
    expires: ExpiresDays = 365


class ChunkUpdate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1)


class ChunkList(BaseModel):
    chunks: list[Chunk]
    count: int
