"""Locate and parse the File API reply index.

CMake writes a new ``index-<timestamp>.json`` on every configure and may
leave older ones behind until the next run cleans them up.  Names sort in
creation order, so the lexicographically greatest name is the current one.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from cppforge.fileapi.errors import (
    IndexFileMissingError,
    ReplyDirectoryMissingError,
    ReplyDocumentInvalidError,
)
from cppforge.fileapi.models import ReplyIndex
from cppforge.fileapi.query import reply_dir as reply_dir_for
from cppforge.utils import load_json_async

INDEX_GLOB = "index-*.json"

M = TypeVar("M", bound=BaseModel)


def _describe(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()[:3]
        )
    return str(exc)


async def read_document(path: Path, model: type[M]) -> M:
    """Read a reply document and validate it into *model*.

    Raises:
        ReplyDocumentInvalidError: If the file is unreadable, is not JSON, or
            lacks a required field.
    """
    try:
        data = await load_json_async(path)
        return model.model_validate(data)
    except (OSError, ValueError) as exc:
        raise ReplyDocumentInvalidError(path, _describe(exc)) from exc


def _index_candidates(directory: Path) -> list[Path]:
    return sorted(
        (p for p in directory.glob(INDEX_GLOB) if p.is_file()),
        key=lambda p: p.name,
    )


async def latest_index_file(reply_dir: Path) -> Path:
    """Return the authoritative index file inside *reply_dir*.

    Raises:
        ReplyDirectoryMissingError: If *reply_dir* is not a directory.
        IndexFileMissingError: If it holds no ``index-*.json`` file.
    """
    if not await asyncio.to_thread(reply_dir.is_dir):
        raise ReplyDirectoryMissingError(reply_dir)

    candidates = await asyncio.to_thread(_index_candidates, reply_dir)
    if not candidates:
        raise IndexFileMissingError(reply_dir)
    return candidates[-1]


class IndexReader:
    """Reads the reply index of a configured build directory."""

    def __init__(self, build_dir: str | Path) -> None:
        self.build_dir = Path(build_dir)
        self.reply_dir = reply_dir_for(self.build_dir)
        self.index_file: Path | None = None

    async def read(self) -> ReplyIndex:
        self.index_file = await latest_index_file(self.reply_dir)
        return await read_document(self.index_file, ReplyIndex)


async def read_reply_index(build_dir: str | Path) -> ReplyIndex:
    """Parse the newest reply index of *build_dir*."""
    return await IndexReader(build_dir).read()
