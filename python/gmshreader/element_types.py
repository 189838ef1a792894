"""Gmsh element type registry.

Maps each supported Gmsh element type code to a canonical cell kind and to
the number of node tags one element of that type consumes from the
``$Elements`` section.  Gmsh codes follow no derivable pattern across
shapes and orders (e.g. codes 20-25 are all triangles with 9-21 nodes), so
the table is spelled out in full.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType

from gmshreader.errors import UnknownElementType


class CellKind(IntEnum):
    """Canonical cell shapes, valued by their VTK cell type id."""

    VERTEX = 1
    LINE = 3
    POLY_LINE = 4
    TRIANGLE = 5
    QUAD = 9
    TETRA = 10
    HEXAHEDRON = 12
    WEDGE = 13
    PYRAMID = 14
    QUADRATIC_EDGE = 21
    QUADRATIC_TRIANGLE = 22
    QUADRATIC_QUAD = 23
    QUADRATIC_TETRA = 24
    QUADRATIC_HEXAHEDRON = 25
    QUADRATIC_WEDGE = 26
    QUADRATIC_PYRAMID = 27
    BIQUADRATIC_QUAD = 28
    TRIQUADRATIC_HEXAHEDRON = 29
    BIQUADRATIC_QUADRATIC_WEDGE = 32


@dataclass(frozen=True)
class ElementType:
    """One row of the registry.

    Parameters
    ----------
    code : Gmsh element type code
    kind : canonical cell kind the code collapses onto
    num_vertices : node tags per element in the file
    name : Gmsh's name for the type
    meshio_type : cell type name used by meshio
    """

    code: int
    kind: CellKind
    num_vertices: int
    name: str
    meshio_type: str


_K = CellKind

_TABLE = (
    ElementType(1, _K.LINE, 2, "Line 2", "line"),
    ElementType(2, _K.TRIANGLE, 3, "Triangle 3", "triangle"),
    ElementType(3, _K.QUAD, 4, "Quadrilateral 4", "quad"),
    ElementType(4, _K.TETRA, 4, "Tetrahedron 4", "tetra"),
    ElementType(5, _K.HEXAHEDRON, 8, "Hexahedron 8", "hexahedron"),
    ElementType(6, _K.WEDGE, 6, "Prism 6", "wedge"),
    ElementType(7, _K.PYRAMID, 5, "Pyramid 5", "pyramid"),
    ElementType(8, _K.QUADRATIC_EDGE, 3, "Line 3", "line3"),
    ElementType(9, _K.QUADRATIC_TRIANGLE, 6, "Triangle 6", "triangle6"),
    ElementType(10, _K.BIQUADRATIC_QUAD, 9, "Quadrilateral 9", "quad9"),
    ElementType(11, _K.QUADRATIC_TETRA, 10, "Tetrahedron 10", "tetra10"),
    ElementType(12, _K.TRIQUADRATIC_HEXAHEDRON, 27, "Hexahedron 27", "hexahedron27"),
    ElementType(13, _K.BIQUADRATIC_QUADRATIC_WEDGE, 18, "Prism 18", "wedge18"),
    # Second pyramid encoding; same canonical kind as code 7.
    ElementType(14, _K.PYRAMID, 14, "Pyramid 14", "pyramid14"),
    ElementType(15, _K.VERTEX, 1, "Point", "vertex"),
    ElementType(16, _K.QUADRATIC_QUAD, 8, "Quadrilateral 8", "quad8"),
    ElementType(17, _K.QUADRATIC_HEXAHEDRON, 20, "Hexahedron 20", "hexahedron20"),
    ElementType(18, _K.QUADRATIC_WEDGE, 15, "Prism 15", "wedge15"),
    ElementType(19, _K.QUADRATIC_PYRAMID, 13, "Pyramid 13", "pyramid13"),
    ElementType(20, _K.TRIANGLE, 9, "Triangle 9", "triangle9"),
    ElementType(21, _K.TRIANGLE, 10, "Triangle 10", "triangle10"),
    ElementType(22, _K.TRIANGLE, 12, "Triangle 12", "triangle12"),
    ElementType(23, _K.TRIANGLE, 15, "Triangle 15", "triangle15"),
    ElementType(24, _K.TRIANGLE, 15, "Triangle 15I", "triangle15"),
    ElementType(25, _K.TRIANGLE, 21, "Triangle 21", "triangle21"),
    ElementType(26, _K.POLY_LINE, 4, "Line 4", "line4"),
    ElementType(27, _K.POLY_LINE, 5, "Line 5", "line5"),
    ElementType(28, _K.POLY_LINE, 6, "Line 6", "line6"),
    ElementType(29, _K.TETRA, 20, "Tetrahedron 20", "tetra20"),
    ElementType(30, _K.TETRA, 35, "Tetrahedron 35", "tetra35"),
    ElementType(31, _K.TETRA, 56, "Tetrahedron 56", "tetra56"),
    ElementType(92, _K.HEXAHEDRON, 64, "Hexahedron 64", "hexahedron64"),
    ElementType(93, _K.HEXAHEDRON, 125, "Hexahedron 125", "hexahedron125"),
)

ELEMENT_TYPES = MappingProxyType({et.code: et for et in _TABLE})


def element_type(code: int) -> ElementType:
    """Return the registry entry for a Gmsh element type code."""
    try:
        return ELEMENT_TYPES[code]
    except KeyError:
        raise UnknownElementType(code) from None


def classify(code: int) -> tuple[CellKind, int]:
    """Return ``(kind, num_vertices)`` for a Gmsh element type code.

    Raises
    ------
    UnknownElementType
        If *code* is not in the supported table.
    """
    et = element_type(code)
    return et.kind, et.num_vertices
