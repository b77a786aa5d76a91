"""Typed views of the CMake File API v1 documents cppforge reads.

Only the fields the artifact resolver consumes are declared; everything else
CMake writes is ignored.  CMake's camelCase keys are mapped with aliases so
the Python side stays snake_case.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

CODEMODEL_KIND = "codemodel-v2"
CODEMODEL_MAJOR_VERSION = 2


class FileApiModel(BaseModel):
    """Common model settings for reply documents."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class TargetType(str, Enum):
    """Target kinds CMake reports in the codemodel."""
    EXECUTABLE = "EXECUTABLE"
    STATIC_LIBRARY = "STATIC_LIBRARY"
    SHARED_LIBRARY = "SHARED_LIBRARY"
    MODULE_LIBRARY = "MODULE_LIBRARY"
    OBJECT_LIBRARY = "OBJECT_LIBRARY"
    INTERFACE_LIBRARY = "INTERFACE_LIBRARY"
    UTILITY = "UTILITY"


# Kinds this list does not name, including ones added by newer CMake
# releases, are read but contribute no artifacts.
ARTIFACT_TARGET_TYPES: frozenset[str] = frozenset(
    {
        TargetType.EXECUTABLE.value,
        TargetType.STATIC_LIBRARY.value,
        TargetType.SHARED_LIBRARY.value,
    }
)


# ---------------------------------------------------------------------------
# Reply index
# ---------------------------------------------------------------------------

class ObjectVersion(FileApiModel):
    major: int
    minor: int = 0


class ReplyReference(FileApiModel):
    """Pointer from the index to an object document in the reply directory."""
    kind: str
    version: ObjectVersion
    json_file: str = Field(..., alias="jsonFile")


class ReplyError(FileApiModel):
    """Written by CMake in place of a reference when a query failed."""
    error: str


# Client-stateful query replies are nested dicts; they are kept as-is.
ReplyEntry = Annotated[
    Union[ReplyReference, ReplyError, dict[str, Any]],
    Field(union_mode="left_to_right"),
]


class ReplyIndex(FileApiModel):
    """The ``index-*.json`` document."""
    cmake: dict[str, Any] = Field(default_factory=dict)
    objects: list[ReplyReference] = Field(default_factory=list)
    reply: dict[str, ReplyEntry]


# ---------------------------------------------------------------------------
# Codemodel
# ---------------------------------------------------------------------------

class CodeModelPaths(FileApiModel):
    source: str
    build: str


class TargetReference(FileApiModel):
    name: str
    id: str
    json_file: str = Field(..., alias="jsonFile")
    type: Optional[str] = None


class Configuration(FileApiModel):
    name: str
    targets: list[TargetReference] = Field(default_factory=list)


class CodeModel(FileApiModel):
    """The ``codemodel-v2-*.json`` document: every configuration and its targets."""
    version: ObjectVersion
    paths: CodeModelPaths
    configurations: list[Configuration]


# ---------------------------------------------------------------------------
# Target
# ---------------------------------------------------------------------------

class ArtifactPath(FileApiModel):
    path: str


class TargetDescriptor(FileApiModel):
    """A ``target-*.json`` document."""
    name: str
    id: str = ""
    type: str
    artifacts: list[ArtifactPath] = Field(default_factory=list)
    name_on_disk: Optional[str] = Field(default=None, alias="nameOnDisk")
    sources: list[dict[str, Any]] = Field(default_factory=list)
    dependencies: list[dict[str, Any]] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildArtifact:
    """One file produced by the build.

    ``path`` is absolute and normalized for the host.  ``configuration`` is
    the codemodel configuration the target belongs to (``"Release"`` etc.,
    empty for single-config generators that leave it blank).
    """

    name: str
    type: str
    path: Path
    configuration: str = ""
