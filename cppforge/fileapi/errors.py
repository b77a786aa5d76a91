"""Exceptions raised while reading the CMake File API reply.

Two families:

* configuration-state errors, meaning cmake was not run or was run without
  the codemodel query: :class:`ReplyDirectoryMissingError`,
  :class:`IndexFileMissingError`, :class:`CodeModelKindMissingError`;
* schema errors, meaning the reply exists but does not look like what we
  read: :class:`UnsupportedSchemaVersionError`,
  :class:`TargetDescriptorUnreadableError`, :class:`ReplyDocumentInvalidError`.
"""

from __future__ import annotations

from pathlib import Path

RUN_CONFIGURE_HINT = "Run cmake configure first."


class FileApiError(Exception):
    """Base class for every File API reply failure."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class ReplyDirectoryMissingError(FileApiError):
    def __init__(self, reply_dir: Path) -> None:
        super().__init__(
            f"CMake File API reply directory not found: {reply_dir}\n{RUN_CONFIGURE_HINT}",
            path=reply_dir,
        )


class IndexFileMissingError(FileApiError):
    def __init__(self, reply_dir: Path) -> None:
        super().__init__(
            f"CMake File API index file not found in {reply_dir}\n{RUN_CONFIGURE_HINT}",
            path=reply_dir,
        )


class CodeModelKindMissingError(FileApiError):
    """The index has no usable ``codemodel-v2`` entry."""

    def __init__(self, index_file: Path | None, reason: str | None = None) -> None:
        message = "codemodel-v2 not found in File API response"
        if reason:
            message += f" ({reason})"
        if index_file is not None:
            message += f": {index_file}"
        message += "\nWrite the codemodel-v2 query file and run cmake configure again."
        super().__init__(message, path=index_file)


class UnsupportedSchemaVersionError(FileApiError):
    def __init__(self, path: Path, major: int, minor: int, expected_major: int) -> None:
        self.major = major
        self.minor = minor
        self.expected_major = expected_major
        super().__init__(
            f"Unsupported codemodel version {major}.{minor} in {path} "
            f"(expected major version {expected_major})",
            path=path,
        )


class TargetDescriptorUnreadableError(FileApiError):
    def __init__(self, target_id: str, path: Path, reason: str) -> None:
        self.target_id = target_id
        super().__init__(
            f"Cannot read target '{target_id}' from {path}: {reason}", path=path
        )


class ReplyDocumentInvalidError(FileApiError):
    """An index or codemodel document could not be read or did not validate."""

    def __init__(self, path: Path, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid CMake File API document {path}: {reason}", path=path)
