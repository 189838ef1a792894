"""gmshreader: decoder for Gmsh MSH 4.x ASCII mesh files."""

from gmshreader.element_types import (
    ELEMENT_TYPES,
    CellKind,
    ElementType,
    classify,
    element_type,
)
from gmshreader.elements import Cell
from gmshreader.errors import (
    ConsistencyError,
    CountMismatch,
    DanglingNodeReference,
    HeaderError,
    InvalidToken,
    MalformedHeader,
    MissingSection,
    MshDecodeError,
    TagRangeMismatch,
    TruncatedStream,
    UnknownElementType,
    UnsupportedEncoding,
    UnsupportedVersion,
)
from gmshreader.header import MeshFormatHeader
from gmshreader.mesh import Mesh
from gmshreader.reader import DecodeConfig, can_decode, decode, read_msh, validate_header

__version__ = "0.1.0"

__all__ = [
    # Reading
    "validate_header",
    "decode",
    "read_msh",
    "can_decode",
    "DecodeConfig",
    # Mesh model
    "Mesh",
    "Cell",
    "CellKind",
    "MeshFormatHeader",
    # Element registry
    "ELEMENT_TYPES",
    "ElementType",
    "classify",
    "element_type",
    # Errors
    "MshDecodeError",
    "HeaderError",
    "MalformedHeader",
    "UnsupportedVersion",
    "UnsupportedEncoding",
    "UnknownElementType",
    "DanglingNodeReference",
    "TruncatedStream",
    "MissingSection",
    "InvalidToken",
    "ConsistencyError",
    # Consistency records
    "TagRangeMismatch",
    "CountMismatch",
]
