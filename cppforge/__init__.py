"""cppforge: C++/CMake project scaffolding and CMake File API artifact resolution.

Top-level re-exports cover the two core services:

* reading build artifacts from the CMake File API reply
  (:func:`read_build_artifacts`), and
* Visual Studio detection and generator selection
  (:func:`detect_installed_versions`, :func:`get_latest_version`,
  :func:`resolve_generator`, :func:`is_supported_version`).
"""

from cppforge.fileapi import (
    BuildArtifact,
    CodeModelKindMissingError,
    FileApiError,
    IndexFileMissingError,
    ReplyDirectoryMissingError,
    ReplyDocumentInvalidError,
    TargetDescriptorUnreadableError,
    UnsupportedSchemaVersionError,
    read_build_artifacts,
)
from cppforge.toolchain import (
    DetectedToolchain,
    InvalidVersionRequestedError,
    detect_installed_versions,
    get_latest_version,
    is_supported_version,
    resolve_generator,
)

__version__ = "0.1.0"

__all__ = [
    "BuildArtifact",
    "DetectedToolchain",
    "read_build_artifacts",
    "detect_installed_versions",
    "get_latest_version",
    "resolve_generator",
    "is_supported_version",
    "FileApiError",
    "ReplyDirectoryMissingError",
    "IndexFileMissingError",
    "CodeModelKindMissingError",
    "UnsupportedSchemaVersionError",
    "TargetDescriptorUnreadableError",
    "ReplyDocumentInvalidError",
    "InvalidVersionRequestedError",
]
