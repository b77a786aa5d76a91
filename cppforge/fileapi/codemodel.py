"""Follow the reply index to the codemodel document."""

from __future__ import annotations

from pathlib import Path

from cppforge.fileapi.errors import CodeModelKindMissingError, UnsupportedSchemaVersionError
from cppforge.fileapi.index import read_document
from cppforge.fileapi.models import (
    CODEMODEL_KIND,
    CODEMODEL_MAJOR_VERSION,
    CodeModel,
    ReplyError,
    ReplyIndex,
    ReplyReference,
)


def codemodel_reference(index: ReplyIndex, index_file: Path | None = None) -> ReplyReference:
    """Return the ``codemodel-v2`` reference from *index*.

    Raises:
        CodeModelKindMissingError: If the kind is absent, or CMake replaced
            it with an error entry.
    """
    entry = index.reply.get(CODEMODEL_KIND)
    if isinstance(entry, ReplyReference):
        return entry
    if isinstance(entry, ReplyError):
        raise CodeModelKindMissingError(index_file, reason=entry.error)
    raise CodeModelKindMissingError(index_file)


async def resolve_code_model(
    reply_dir: str | Path,
    index: ReplyIndex,
    index_file: Path | None = None,
) -> CodeModel:
    """Read the codemodel referenced by *index*.

    Raises:
        CodeModelKindMissingError: See :func:`codemodel_reference`.
        ReplyDocumentInvalidError: If the document cannot be read or parsed.
        UnsupportedSchemaVersionError: If its major version is not 2.
    """
    reference = codemodel_reference(index, index_file)
    path = Path(reply_dir) / reference.json_file
    code_model = await read_document(path, CodeModel)

    if code_model.version.major != CODEMODEL_MAJOR_VERSION:
        raise UnsupportedSchemaVersionError(
            path,
            code_model.version.major,
            code_model.version.minor,
            CODEMODEL_MAJOR_VERSION,
        )
    return code_model
