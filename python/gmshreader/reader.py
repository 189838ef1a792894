"""Public entry points for reading Gmsh MSH 4.x ASCII files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from gmshreader.elements import parse_elements
from gmshreader.errors import MshDecodeError
from gmshreader.header import MeshFormatHeader, parse_header
from gmshreader.mesh import Mesh, assemble, normalize_consistency_checks
from gmshreader.nodes import NodeIndex, normalize_node_indexing, parse_nodes
from gmshreader.tokens import TokenStream

logger = logging.getLogger(__name__)

_MSH_EXTENSIONS = {".msh"}


@dataclass
class DecodeConfig:
    """Options for :func:`decode` and :func:`read_msh`.

    Parameters
    ----------
    node_indexing : "map" resolves node tags through an explicit tag->slot
        dict (points in file order); "offset" uses ``slot = tag - 1`` and
        requires tags to be a dense permutation of ``1..N``
    consistency_checks : "warn" logs and records declared/observed tag range
        and count mismatches, "strict" raises on them, "off" skips them
    """

    node_indexing: str = "map"
    consistency_checks: str = "warn"

    def __post_init__(self):
        self.node_indexing = normalize_node_indexing(self.node_indexing)
        self.consistency_checks = normalize_consistency_checks(self.consistency_checks)


def validate_header(stream: Iterable[str]) -> MeshFormatHeader:
    """Read and validate the ``$MeshFormat`` section at the start of *stream*.

    Raises
    ------
    MalformedHeader
        If ``$MeshFormat`` / ``$EndMeshFormat`` is missing or a value is not numeric.
    UnsupportedVersion
        If the format version is below 4.0.
    UnsupportedEncoding
        If the file is binary.
    """
    return parse_header(TokenStream(stream))


def decode(stream: Iterable[str], config: DecodeConfig | None = None) -> Mesh:
    """Decode an MSH 4.x ASCII mesh from a text stream.

    Parameters
    ----------
    stream : iterable of text lines (an open file, ``io.StringIO``, ...)
    config : decoding options (None uses defaults)

    Returns
    -------
    Mesh
        Points in node order and cells in element order as they appear in
        the file.

    Raises
    ------
    MshDecodeError
        On any fatal problem; no partial mesh is returned.
    """
    if config is None:
        config = DecodeConfig()

    tokens = TokenStream(stream)
    header = parse_header(tokens)
    nodes = parse_nodes(tokens)
    node_index = NodeIndex.build(nodes, config.node_indexing)
    elements = parse_elements(tokens, node_index)
    return assemble(header, nodes, node_index, elements, config.consistency_checks)


def _validate_msh_path(filepath: str | Path) -> Path:
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Mesh file not found: {filepath}")
    ext = filepath.suffix.lower()
    if ext not in _MSH_EXTENSIONS:
        raise ValueError(
            f"Unsupported mesh format '{ext}'. Supported: {sorted(_MSH_EXTENSIONS)}"
        )
    return filepath


def read_msh(filepath: str | Path, config: DecodeConfig | None = None) -> Mesh:
    """Load a Gmsh ``.msh`` file (format 4.x, ASCII).

    Parameters
    ----------
    filepath : path to the ``.msh`` file
    config : decoding options (None uses defaults)
    """
    filepath = _validate_msh_path(filepath)
    logger.info("Reading %s", filepath)
    with open(filepath, "r", encoding="ascii", errors="replace") as f:
        return decode(f, config)


def can_decode(filepath: str | Path) -> bool:
    """Return True if *filepath* starts with a supported ``$MeshFormat`` section.

    Only the header is inspected; the node and element sections may still
    fail to decode.
    """
    try:
        with open(filepath, "r", encoding="ascii", errors="replace") as f:
            validate_header(f)
    except (OSError, MshDecodeError) as exc:
        logger.debug("Cannot decode %s: %s", filepath, exc)
        return False
    return True
