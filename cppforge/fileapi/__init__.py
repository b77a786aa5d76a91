"""CMake File API v1 reader.

Reads the reply CMake writes into ``<build>/.cmake/api/v1/reply`` after a
configure that was preceded by a ``codemodel-v2`` query, and turns it into a
typed list of build artifacts.

Quick usage::

    from cppforge.fileapi import read_build_artifacts, write_codemodel_query

    await write_codemodel_query("build")
    # ... cmake -B build ... && cmake --build build
    artifacts = await read_build_artifacts("build")
"""

from .artifacts import (
    extract_artifacts,
    group_by_type,
    print_artifacts,
    read_build_artifacts,
    resolve_artifact_path,
    select_executable,
)
from .codemodel import codemodel_reference, resolve_code_model
from .errors import (
    CodeModelKindMissingError,
    FileApiError,
    IndexFileMissingError,
    ReplyDirectoryMissingError,
    ReplyDocumentInvalidError,
    TargetDescriptorUnreadableError,
    UnsupportedSchemaVersionError,
)
from .index import IndexReader, latest_index_file, read_reply_index
from .models import BuildArtifact, CodeModel, ReplyIndex, TargetDescriptor, TargetType
from .query import query_dir, reply_dir, write_codemodel_query

__all__ = [
    # Reading
    "read_build_artifacts",
    "read_reply_index",
    "resolve_code_model",
    "extract_artifacts",
    "IndexReader",
    "latest_index_file",
    "codemodel_reference",
    "resolve_artifact_path",
    # Query setup
    "write_codemodel_query",
    "query_dir",
    "reply_dir",
    # Reporting
    "group_by_type",
    "print_artifacts",
    "select_executable",
    # Models
    "BuildArtifact",
    "CodeModel",
    "ReplyIndex",
    "TargetDescriptor",
    "TargetType",
    # Errors
    "FileApiError",
    "ReplyDirectoryMissingError",
    "IndexFileMissingError",
    "CodeModelKindMissingError",
    "UnsupportedSchemaVersionError",
    "TargetDescriptorUnreadableError",
    "ReplyDocumentInvalidError",
]
