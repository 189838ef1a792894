"""Mesh assembly and conversion to meshio / PyVista."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union

import numpy as np

from gmshreader.element_types import CellKind, element_type
from gmshreader.elements import Cell, ElementSection
from gmshreader.errors import ConsistencyError, CountMismatch, TagRangeMismatch
from gmshreader.header import MeshFormatHeader
from gmshreader.nodes import NodeIndex, NodeSection

logger = logging.getLogger(__name__)

VALID_CONSISTENCY_CHECK_MODES = {"strict", "warn", "off"}

ConsistencyRecord = Union[TagRangeMismatch, CountMismatch]

# Gmsh -> VTK node order for the quadratic types whose mid-edge and face
# nodes are numbered differently.  meshio stores cells in VTK order too.
_HEX20_ORDER = [0, 1, 2, 3, 4, 5, 6, 7, 8, 11, 13, 9, 16, 18, 19, 17, 10, 12, 14, 15]
_WEDGE15_ORDER = [0, 1, 2, 3, 4, 5, 6, 9, 7, 12, 14, 13, 8, 10, 11]
_GMSH_TO_VTK_ORDER = {
    11: [0, 1, 2, 3, 4, 5, 6, 7, 9, 8],
    12: _HEX20_ORDER + [22, 23, 21, 24, 20, 25, 26],
    13: _WEDGE15_ORDER + [15, 17, 16],
    17: _HEX20_ORDER,
    18: _WEDGE15_ORDER,
    19: [0, 1, 2, 3, 4, 5, 8, 10, 6, 7, 9, 11, 12],
}

# Linear VTK kinds that higher-order Gmsh types collapse onto.  Gmsh lists
# corner nodes first, so the corners are a prefix of the vertex list.
_CORNER_COUNTS = {
    CellKind.TRIANGLE: 3,
    CellKind.QUAD: 4,
    CellKind.TETRA: 4,
    CellKind.HEXAHEDRON: 8,
    CellKind.PYRAMID: 5,
}


def normalize_consistency_checks(value: Any) -> str:
    mode = str(value or "warn").strip().lower()
    if mode not in VALID_CONSISTENCY_CHECK_MODES:
        raise ValueError(
            f"consistency_checks must be one of: {', '.join(sorted(VALID_CONSISTENCY_CHECK_MODES))}."
        )
    return mode


@dataclass(frozen=True, eq=False)
class Mesh:
    """Decoded MSH mesh: a point array and cells indexing into it.

    Parameters
    ----------
    header : parsed ``$MeshFormat`` section
    points : (N, 3) float64 coordinates, read-only
    cells : cells in file order
    point_tags : (N,) node tag of each point slot
    warnings : advisory consistency records raised while decoding
    """

    header: MeshFormatHeader
    points: np.ndarray
    cells: tuple[Cell, ...]
    point_tags: np.ndarray
    warnings: tuple[ConsistencyRecord, ...] = field(default_factory=tuple)

    @property
    def num_points(self) -> int:
        return len(self.points)

    @property
    def num_cells(self) -> int:
        return len(self.cells)

    def cells_of_kind(self, kind: CellKind) -> list[Cell]:
        return [c for c in self.cells if c.kind == kind]

    def to_pyvista(self):
        """Convert to a PyVista UnstructuredGrid.

        Higher-order cells that collapse onto a linear kind keep only their
        corner nodes; quadratic cells are reordered to VTK numbering.
        """
        import pyvista as pv

        flat: list[int] = []
        celltypes = np.empty(len(self.cells), dtype=np.uint8)
        for i, cell in enumerate(self.cells):
            conn = _vtk_connectivity(cell)
            flat.append(len(conn))
            flat.extend(conn)
            celltypes[i] = int(cell.kind)

        cells = np.array(flat, dtype=np.int64)
        return pv.UnstructuredGrid(cells, celltypes, np.array(self.points))

    def to_meshio(self):
        """Convert to a ``meshio.Mesh``.

        Consecutive cells of the same Gmsh type form one cell block.  The
        element tags are attached as the ``gmsh:element_tag`` cell data.
        """
        import meshio

        blocks = []
        block_tags = []
        for cell in self.cells:
            if not blocks or blocks[-1][0] != cell.element_type:
                blocks.append((cell.element_type, []))
                block_tags.append([])
            order = _GMSH_TO_VTK_ORDER.get(cell.element_type)
            conn = [cell.vertices[k] for k in order] if order else list(cell.vertices)
            blocks[-1][1].append(conn)
            block_tags[-1].append(cell.tag)

        cells = [
            (element_type(code).meshio_type, np.array(conn, dtype=np.int64))
            for code, conn in blocks
        ]
        cell_data = {
            "gmsh:element_tag": [np.array(t, dtype=np.int64) for t in block_tags]
        }
        return meshio.Mesh(np.array(self.points), cells, cell_data=cell_data)


def _vtk_connectivity(cell: Cell) -> list[int]:
    vertices = cell.vertices
    order = _GMSH_TO_VTK_ORDER.get(cell.element_type)
    if order:
        return [vertices[k] for k in order]
    if cell.kind == CellKind.POLY_LINE:
        # Gmsh lists both end nodes first, then the interior nodes.
        return [vertices[0], *vertices[2:], vertices[1]]
    n_corners = _CORNER_COUNTS.get(cell.kind)
    if n_corners is not None and len(vertices) > n_corners:
        return list(vertices[:n_corners])
    return list(vertices)


def _check_tag_range(section: str, declared_min: int, declared_max: int,
                     observed_min, observed_max) -> list[ConsistencyRecord]:
    if declared_min == observed_min and declared_max == observed_max:
        return []
    return [TagRangeMismatch(section, declared_min, declared_max,
                             observed_min, observed_max)]


def _check_count(section: str, declared: int, observed: int) -> list[ConsistencyRecord]:
    if declared == observed:
        return []
    return [CountMismatch(section, declared, observed)]


def assemble(
    header: MeshFormatHeader,
    nodes: NodeSection,
    node_index: NodeIndex,
    elements: ElementSection,
    consistency_checks: str = "warn",
) -> Mesh:
    """Aggregate parsed sections into a :class:`Mesh`.

    Declared section totals and min/max tags are compared with what was
    actually read.  In ``"warn"`` mode mismatches are logged and recorded
    on ``Mesh.warnings``; ``"strict"`` raises :class:`ConsistencyError`;
    ``"off"`` skips the checks.  The mesh content is the same either way.
    """
    mode = normalize_consistency_checks(consistency_checks)

    records: list[ConsistencyRecord] = []
    if mode != "off":
        # Empty sections declare min/max as 0 and observe none.
        if len(nodes.tags):
            records += _check_tag_range(
                "node", nodes.declared_min_tag, nodes.declared_max_tag,
                nodes.observed_min_tag, nodes.observed_max_tag,
            )
        records += _check_count("$Nodes", nodes.declared_count, len(nodes.tags))
        if len(elements.tags):
            records += _check_tag_range(
                "element", elements.declared_min_tag, elements.declared_max_tag,
                elements.observed_min_tag, elements.observed_max_tag,
            )
        records += _check_count("$Elements", elements.declared_count, len(elements.tags))

    if records and mode == "strict":
        raise ConsistencyError(str(records[0]))
    for record in records:
        logger.warning("%s", record)

    mesh = Mesh(
        header=header,
        points=node_index.points,
        cells=elements.cells,
        point_tags=node_index.point_tags,
        warnings=tuple(records),
    )
    logger.info("Assembled mesh: %d points, %d cells", mesh.num_points, mesh.num_cells)
    return mesh
