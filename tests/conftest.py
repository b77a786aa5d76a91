"""Shared pytest fixtures for the cppforge test suite.

Provides reusable fixtures for:
- Fake CMake File API reply trees (index, codemodel and target documents)
- A canned single-configuration reply matching the scaffolded project
- Mock subprocess helpers
- Fake Visual Studio install trees and vswhere output
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from cppforge.toolchain.detector import ProcessOutput


# ---------------------------------------------------------------------------
# File API reply builder
# ---------------------------------------------------------------------------


class ReplyBuilder:
    """Writes File API reply documents under ``<build_dir>/.cmake/api/v1/reply``.

    Usage::

        reply = ReplyBuilder(tmp_path / "build")
        app = reply.target("app", "EXECUTABLE", ["app"])
        reply.codemodel({"Release": [app]}, build_root="/repo/build")
        reply.index()
    """

    def __init__(self, build_dir: Path) -> None:
        self.build_dir = build_dir
        self.reply_dir = build_dir / ".cmake" / "api" / "v1" / "reply"
        self.reply_dir.mkdir(parents=True, exist_ok=True)
        self.codemodel_file: str | None = None
        self._counter = 0

    def write(self, name: str, data: Any) -> str:
        (self.reply_dir / name).write_text(json.dumps(data, indent=2), encoding="utf-8")
        return name

    def target(
        self,
        name: str,
        target_type: str,
        artifacts: list[str] | None = None,
        *,
        json_file: str | None = None,
        write: bool = True,
    ) -> dict[str, Any]:
        """Write a target document and return the codemodel reference to it."""
        self._counter += 1
        target_id = f"{name}::@{self._counter:04x}"
        json_file = json_file or f"target-{name}-{self._counter}.json"
        if write:
            document: dict[str, Any] = {
                "name": name,
                "id": target_id,
                "type": target_type,
                "sources": [{"path": f"src/{name}.cpp"}],
            }
            if artifacts is not None:
                document["artifacts"] = [{"path": p} for p in artifacts]
            self.write(json_file, document)
        return {"name": name, "id": target_id, "jsonFile": json_file, "type": target_type}

    def codemodel(
        self,
        configurations: dict[str, list[dict[str, Any]]],
        build_root: str = "/repo/build",
        source_root: str = "/repo",
        major: int = 2,
        minor: int = 6,
        json_file: str = "codemodel-v2-0123456789abcdef.json",
    ) -> str:
        self.codemodel_file = self.write(
            json_file,
            {
                "kind": "codemodel",
                "version": {"major": major, "minor": minor},
                "paths": {"source": source_root, "build": build_root},
                "configurations": [
                    {"name": name, "targets": targets, "directories": [], "projects": []}
                    for name, targets in configurations.items()
                ],
            },
        )
        return self.codemodel_file

    def index(
        self,
        name: str = "index-2026-01-15T10-30-00-0000.json",
        codemodel_file: str | None = None,
        include_codemodel: bool = True,
        extra_reply: dict[str, Any] | None = None,
    ) -> Path:
        reply: dict[str, Any] = {}
        if include_codemodel:
            reply["codemodel-v2"] = {
                "kind": "codemodel",
                "version": {"major": 2, "minor": 6},
                "jsonFile": codemodel_file or self.codemodel_file or "missing.json",
            }
        reply.update(extra_reply or {})
        self.write(
            name,
            {
                "cmake": {
                    "version": {"major": 3, "minor": 28, "patch": 1, "string": "3.28.1"},
                    "generator": {"multiConfig": False, "name": "Unix Makefiles"},
                },
                "objects": list(v for v in reply.values() if "jsonFile" in v),
                "reply": reply,
            },
        )
        return self.reply_dir / name


@pytest.fixture
def reply_builder(tmp_path: Path) -> ReplyBuilder:
    """An empty reply directory under ``tmp_path/build``."""
    return ReplyBuilder(tmp_path / "build")


@pytest.fixture
def sample_reply(reply_builder: ReplyBuilder) -> ReplyBuilder:
    """Reply for the scaffolded project layout, single ``Release`` configuration.

    Contains an executable, a static library, a shared library with an import
    library, an object library and an interface library.
    """
    targets = [
        reply_builder.target("my_app", "EXECUTABLE", ["my_app"]),
        reply_builder.target("my_app_core", "STATIC_LIBRARY", ["libmy_app_core.a"]),
        reply_builder.target(
            "my_app_utils", "SHARED_LIBRARY", ["libmy_app_utils.so", "libmy_app_utils.so.1"]
        ),
        reply_builder.target("my_app_objs", "OBJECT_LIBRARY", None),
        reply_builder.target("my_app_headers", "INTERFACE_LIBRARY", []),
        reply_builder.target("my_app_plugin", "MODULE_LIBRARY", ["my_app_plugin.so"]),
    ]
    reply_builder.codemodel({"Release": targets}, build_root="/repo/build")
    reply_builder.index()
    return reply_builder


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_subprocess():
    """Factory for mock asyncio subprocesses.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


# ---------------------------------------------------------------------------
# Visual Studio fakes
# ---------------------------------------------------------------------------


VSWHERE_TWO_INSTANCES = textwrap.dedent(
    """\
    instanceId: 1a2b3c4d
    installDate: 3/1/2024 10:00:00 AM
    installationName: VisualStudio/17.9.2+34616.47
    installationPath: C:\\Program Files\\Microsoft Visual Studio\\2022\\Community
    installationVersion: 17.9.34616.47
    productId: Microsoft.VisualStudio.Product.Community
    isPrerelease: 0
    displayName: Visual Studio Community 2022
    catalog_productLineVersion: 2022

    instanceId: 5e6f7a8b
    installationPath: C:\\Program Files (x86)\\Microsoft Visual Studio\\2019\\Professional
    installationVersion: 16.11.34601.136
    isPrerelease: 0
    displayName: Visual Studio Professional 2019
    catalog_productLineVersion: 2019
    """
)


@pytest.fixture
def vswhere_output() -> str:
    """vswhere text output listing a 2022 Community and a 2019 Professional."""
    return VSWHERE_TWO_INSTANCES


@pytest.fixture
def vswhere_exe(tmp_path: Path) -> Path:
    """An (empty) file standing in for vswhere.exe so the existence check passes."""
    path = tmp_path / "Installer" / "vswhere.exe"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"")
    return path


@pytest.fixture
def canned_runner():
    """Factory for ProcessRunner doubles that record their calls."""
    def factory(stdout: str = "", exit_code: int = 0, stderr: str = "", raises: Exception | None = None):
        calls: list[tuple[str, list[str]]] = []

        async def runner(path: str, args: list[str]) -> ProcessOutput:
            calls.append((path, args))
            if raises is not None:
                raise raises
            return ProcessOutput(exit_code=exit_code, stdout=stdout, stderr=stderr)

        runner.calls = calls  # type: ignore[attr-defined]
        return runner

    return factory


@pytest.fixture
def program_files(tmp_path: Path):
    """Factory creating fake ``<root>/Microsoft Visual Studio/<folder>/<edition>`` trees."""
    root = tmp_path / "ProgramFiles"
    root.mkdir()

    def install(folder: str, edition: str, with_msvc: bool = True) -> Path:
        install_dir = root / "Microsoft Visual Studio" / folder / edition
        install_dir.mkdir(parents=True)
        if with_msvc:
            (install_dir / "VC" / "Tools" / "MSVC" / "14.39.33519").mkdir(parents=True)
        return install_dir

    install.root = root  # type: ignore[attr-defined]
    return install
