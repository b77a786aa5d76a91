"""Turn the CMake codemodel into a flat list of build artifacts.

Every target of every configuration is read.  Executables, static libraries
and shared libraries contribute one :class:`BuildArtifact` per declared
artifact (a Windows DLL typically yields both the ``.dll`` and its import
``.lib``).  Other target kinds, and targets without artifacts, contribute
nothing.

Output order follows the codemodel (configuration, then target reference).
CMake does not promise that order across versions, so group by ``type``
rather than relying on positions.
"""

from __future__ import annotations

import os
from pathlib import Path

from rich.table import Table

from cppforge.fileapi.codemodel import resolve_code_model
from cppforge.fileapi.errors import ReplyDocumentInvalidError, TargetDescriptorUnreadableError
from cppforge.fileapi.index import IndexReader, read_document
from cppforge.fileapi.models import (
    ARTIFACT_TARGET_TYPES,
    BuildArtifact,
    CodeModel,
    TargetDescriptor,
    TargetReference,
    TargetType,
)
from cppforge.utils import console

# Side files that ship next to an executable but are not runnable.
_NON_RUNNABLE_SUFFIXES = frozenset({".pdb", ".lib", ".exp", ".ilk", ".manifest"})


def resolve_artifact_path(build_root: str, artifact_path: str) -> Path:
    """Make an artifact path absolute against the codemodel's build root.

    CMake writes forward slashes; they are unified before joining and the
    result is normalized for the host.  An artifact path that is already
    absolute (CMake emits those for outputs outside the build tree) is kept
    and only normalized.
    """
    unified = artifact_path.replace("\\", "/")
    return Path(os.path.normpath(os.path.join(build_root, unified)))


async def read_target(reply_dir: str | Path, reference: TargetReference) -> TargetDescriptor:
    """Read one target document.

    Raises:
        TargetDescriptorUnreadableError: If the document is missing or invalid.
    """
    path = Path(reply_dir) / reference.json_file
    try:
        return await read_document(path, TargetDescriptor)
    except ReplyDocumentInvalidError as exc:
        raise TargetDescriptorUnreadableError(reference.id, path, exc.reason) from exc


async def extract_artifacts(reply_dir: str | Path, code_model: CodeModel) -> list[BuildArtifact]:
    """Collect the artifacts of every executable and library target.

    Any unreadable target aborts the whole extraction; partial lists are
    never returned.
    """
    artifacts: list[BuildArtifact] = []

    for configuration in code_model.configurations:
        for reference in configuration.targets:
            target = await read_target(reply_dir, reference)
            if target.type not in ARTIFACT_TARGET_TYPES:
                continue

            for artifact in target.artifacts:
                artifacts.append(
                    BuildArtifact(
                        name=target.name,
                        type=target.type,
                        path=resolve_artifact_path(code_model.paths.build, artifact.path),
                        configuration=configuration.name,
                    )
                )

    return artifacts


async def read_build_artifacts(build_dir: str | Path) -> list[BuildArtifact]:
    """Read the File API reply of *build_dir* and return its artifacts.

    Raises:
        FileApiError: Any of its subclasses, see :mod:`cppforge.fileapi.errors`.
    """
    reader = IndexReader(build_dir)
    index = await reader.read()
    code_model = await resolve_code_model(reader.reply_dir, index, reader.index_file)
    return await extract_artifacts(reader.reply_dir, code_model)


# ---------------------------------------------------------------------------
# Helpers for callers
# ---------------------------------------------------------------------------


def group_by_type(artifacts: list[BuildArtifact]) -> dict[str, list[BuildArtifact]]:
    """Group artifacts by target type, keeping first-seen order."""
    grouped: dict[str, list[BuildArtifact]] = {}
    for artifact in artifacts:
        grouped.setdefault(artifact.type, []).append(artifact)
    return grouped


def select_executable(
    artifacts: list[BuildArtifact], configuration: str
) -> BuildArtifact | None:
    """Pick the executable to run for *configuration*.

    Multi-config generators report one set of targets per configuration, so
    the configuration name is matched first, then its appearance in the
    path (``build/Release/app.exe``), then any executable at all.
    """
    executables = [
        a
        for a in artifacts
        if a.type == TargetType.EXECUTABLE.value
        and a.path.suffix.lower() not in _NON_RUNNABLE_SUFFIXES
    ]
    for artifact in executables:
        if artifact.configuration == configuration:
            return artifact
    for artifact in executables:
        if configuration in artifact.path.parts:
            return artifact
    return executables[0] if executables else None


def print_artifacts(artifacts: list[BuildArtifact]) -> None:
    """Print artifacts grouped by type as a Rich table."""
    if not artifacts:
        console.print("[yellow]No build artifacts reported by CMake.[/yellow]")
        return

    table = Table(title="Build Artifacts", show_header=True, header_style="bold cyan")
    table.add_column("Type", style="bold")
    table.add_column("Target")
    table.add_column("Config", style="dim")
    table.add_column("Path")

    for artifact_type, items in group_by_type(artifacts).items():
        for artifact in items:
            table.add_row(artifact_type, artifact.name, artifact.configuration, str(artifact.path))

    console.print(table)
