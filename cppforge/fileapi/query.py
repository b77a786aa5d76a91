"""Locations inside a build directory used by the CMake File API v1."""

from __future__ import annotations

import asyncio
from pathlib import Path

from cppforge.fileapi.models import CODEMODEL_KIND


def api_root(build_dir: str | Path) -> Path:
    return Path(build_dir) / ".cmake" / "api" / "v1"


def query_dir(build_dir: str | Path) -> Path:
    return api_root(build_dir) / "query"


def reply_dir(build_dir: str | Path) -> Path:
    return api_root(build_dir) / "reply"


def _touch_query(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")


async def write_codemodel_query(build_dir: str | Path) -> Path:
    """Create the empty ``codemodel-v2`` query file.

    Must exist before ``cmake`` configures *build_dir*, otherwise no reply is
    written.  Returns the query file path.
    """
    query_file = query_dir(build_dir) / CODEMODEL_KIND
    await asyncio.to_thread(_touch_query, query_file)
    return query_file
