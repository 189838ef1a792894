"""``$Elements`` section parsing."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from gmshreader.element_types import CellKind, element_type
from gmshreader.errors import InvalidToken
from gmshreader.nodes import NodeIndex
from gmshreader.tokens import TokenStream

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    """One element of the mesh.

    Parameters
    ----------
    kind : canonical cell kind
    vertices : point slot indices, in the element's file order
    element_type : Gmsh element type code the cell was read as
    tag : element tag from the file
    """

    kind: CellKind
    vertices: tuple[int, ...]
    element_type: int
    tag: int


@dataclass(frozen=True, eq=False)
class ElementSection:
    """Immutable contents of an ``$Elements`` section, in file order."""

    cells: tuple[Cell, ...]
    tags: np.ndarray
    declared_count: int
    declared_min_tag: int
    declared_max_tag: int
    num_blocks: int

    @property
    def observed_min_tag(self) -> int | None:
        return int(self.tags.min()) if len(self.tags) else None

    @property
    def observed_max_tag(self) -> int | None:
        return int(self.tags.max()) if len(self.tags) else None


def parse_elements(tokens: TokenStream, node_index: NodeIndex) -> ElementSection:
    """Seek ``$Elements`` and read every entity block that follows.

    Each element is its tag followed by exactly as many node tags as its
    type requires.  Node tags are resolved to point slots through
    *node_index*; vertex order is kept as written.

    Raises
    ------
    UnknownElementType
        If a block declares an unsupported element type.
    DanglingNodeReference
        If an element references a node that was not read.
    """
    tokens.skip_to_marker("$Elements")
    num_blocks, declared_count, min_tag, max_tag = tokens.read_section_header("$Elements")

    cells: list[Cell] = []
    tag_chunks = []
    for _ in range(num_blocks):
        block = tokens.read_block_header("$Elements")
        et = element_type(block.flag)
        width = 1 + et.num_vertices

        raw = tokens.read_ints(block.size * width, f"{et.name} elements")
        rows = raw.reshape(block.size, width)
        if block.size and rows[:, 0].min() <= 0:
            raise InvalidToken(
                f"Element tags must be positive (entity {block.dim}/{block.entity_tag}, "
                f"line {tokens.line_number})"
            )

        for row in rows.tolist():
            cells.append(Cell(
                kind=et.kind,
                vertices=node_index.slots_of(row[1:]),
                element_type=et.code,
                tag=row[0],
            ))
        tag_chunks.append(rows[:, 0])
        logger.debug(
            "Element block dim=%d entity=%d type=%d (%s): %d elements",
            block.dim, block.entity_tag, et.code, et.name, block.size,
        )

    tags = np.concatenate(tag_chunks) if tag_chunks else np.empty(0, dtype=np.int64)
    tags.setflags(write=False)

    logger.info("Read %d elements in %d entity blocks", len(cells), num_blocks)
    return ElementSection(
        cells=tuple(cells),
        tags=tags,
        declared_count=declared_count,
        declared_min_tag=min_tag,
        declared_max_tag=max_tag,
        num_blocks=num_blocks,
    )
