"""``$MeshFormat`` section validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gmshreader.errors import (
    InvalidToken,
    MalformedHeader,
    TruncatedStream,
    UnsupportedEncoding,
    UnsupportedVersion,
)
from gmshreader.tokens import TokenStream

logger = logging.getLogger(__name__)

MIN_SUPPORTED_VERSION = 4.0


@dataclass(frozen=True)
class MeshFormatHeader:
    """Parsed ``$MeshFormat`` section.

    Parameters
    ----------
    version : MSH format version (e.g. 4.1)
    is_ascii : True when the file-type flag is 0
    data_size : size of ``size_t`` on the writing machine, in bytes
    """

    version: float
    is_ascii: bool
    data_size: int


def _expect_marker(tokens: TokenStream, marker: str) -> None:
    try:
        token = tokens.next_token(marker)
    except TruncatedStream:
        raise MalformedHeader(f"Expected {marker}, reached end of input") from None
    if token != marker:
        raise MalformedHeader(
            f"Expected {marker} on line {tokens.line_number}, got {token!r}"
        )


def parse_header(tokens: TokenStream) -> MeshFormatHeader:
    """Read and validate the ``$MeshFormat`` section from *tokens*.

    The stream is left positioned just after ``$EndMeshFormat``.
    """
    _expect_marker(tokens, "$MeshFormat")

    try:
        version = tokens.read_float("format version")
        file_type = tokens.read_int("file type")
        data_size = tokens.read_int("data size")
    except InvalidToken as exc:
        raise MalformedHeader(str(exc)) from exc

    if not version >= MIN_SUPPORTED_VERSION:
        raise UnsupportedVersion(
            f"Can only read MSH file format version {MIN_SUPPORTED_VERSION} "
            f"and up, got {version}"
        )
    if file_type != 0:
        raise UnsupportedEncoding(
            f"Can only read ASCII formatted files, got file type {file_type}"
        )

    _expect_marker(tokens, "$EndMeshFormat")

    header = MeshFormatHeader(version=version, is_ascii=True, data_size=data_size)
    logger.debug("MSH header: version %s, data size %d", version, data_size)
    return header
