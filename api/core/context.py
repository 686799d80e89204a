"""
Application-wide dependencies shared by every request handler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chunks.repository import ChunkModel


# Built once in main(); handlers only read it.
@dataclass(frozen=True)
class Application:
    info_log: logging.Logger
    error_log: logging.Logger
    chunks: ChunkModel
