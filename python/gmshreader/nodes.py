"""``$Nodes`` section parsing and node tag resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from gmshreader.errors import DanglingNodeReference, InvalidToken
from gmshreader.tokens import TokenStream

logger = logging.getLogger(__name__)

NODE_INDEXING_SCHEMES = ("map", "offset")

# Most NaN rows the "offset" scheme will allocate for unused tags.
MAX_OFFSET_GAPS = 1_000_000


def normalize_node_indexing(value: str) -> str:
    scheme = str(value or "map").strip().lower()
    if scheme not in NODE_INDEXING_SCHEMES:
        raise ValueError(
            f"node_indexing must be one of: {', '.join(NODE_INDEXING_SCHEMES)}."
        )
    return scheme


@dataclass(frozen=True, eq=False)
class NodeSection:
    """Immutable contents of a ``$Nodes`` section, in file order.

    Parameters
    ----------
    tags : (N,) int64 node tags
    coords : (N, 3) float64 physical coordinates (parametric values dropped)
    declared_count : total node count from the section header
    declared_min_tag, declared_max_tag : tag bounds from the section header
    num_blocks : number of entity blocks read
    """

    tags: np.ndarray
    coords: np.ndarray
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


def parse_nodes(tokens: TokenStream) -> NodeSection:
    """Seek ``$Nodes`` and read every entity block that follows.

    Within a block all node tags come first, then one coordinate tuple per
    node.  Parametric blocks carry ``dim`` extra values per node which are
    consumed and discarded.
    """
    tokens.skip_to_marker("$Nodes")
    num_blocks, declared_count, min_tag, max_tag = tokens.read_section_header("$Nodes")

    tag_chunks = []
    coord_chunks = []
    for _ in range(num_blocks):
        block = tokens.read_block_header("$Nodes")
        values_per_node = 3 + block.dim if block.flag else 3

        tags = tokens.read_ints(block.size, "node tags")
        if block.size and tags.min() <= 0:
            raise InvalidToken(
                f"Node tags must be positive (entity {block.dim}/{block.entity_tag}, "
                f"line {tokens.line_number})"
            )
        raw = tokens.read_floats(block.size * values_per_node, "node coordinates")
        coords = raw.reshape(block.size, values_per_node)[:, :3]

        tag_chunks.append(tags)
        coord_chunks.append(coords)
        logger.debug(
            "Node block dim=%d entity=%d parametric=%d: %d nodes",
            block.dim, block.entity_tag, block.flag, block.size,
        )

    if tag_chunks:
        all_tags = np.concatenate(tag_chunks)
        all_coords = np.ascontiguousarray(np.vstack(coord_chunks))
    else:
        all_tags = np.empty(0, dtype=np.int64)
        all_coords = np.empty((0, 3), dtype=np.float64)
    all_tags.setflags(write=False)
    all_coords.setflags(write=False)

    logger.info("Read %d nodes in %d entity blocks", len(all_tags), num_blocks)
    return NodeSection(
        tags=all_tags,
        coords=all_coords,
        declared_count=declared_count,
        declared_min_tag=min_tag,
        declared_max_tag=max_tag,
        num_blocks=num_blocks,
    )


class NodeIndex:
    """Point array plus node tag -> slot resolution.

    Build with :meth:`build`.  Two slot assignment schemes are supported:

    ``"map"``
        Slots follow file order and tags are resolved through a dict, so
        sparse or unordered tags work.  A repeated tag resolves to its last
        occurrence.
    ``"offset"``
        ``slot = tag - 1``.  Assumes tags are a dense permutation of
        ``1..N``; gaps are left as NaN rows and a repeated tag overwrites
        the earlier coordinates.
    """

    def __init__(self, points: np.ndarray, point_tags: np.ndarray,
                 scheme: str, tag_to_slot: dict[int, int] | None = None,
                 populated: np.ndarray | None = None):
        self.points = points
        self.point_tags = point_tags
        self.scheme = scheme
        self._tag_to_slot = tag_to_slot
        self._populated = populated

    @classmethod
    def build(cls, section: NodeSection, scheme: str = "map") -> "NodeIndex":
        scheme = normalize_node_indexing(scheme)
        if scheme == "map":
            return cls._build_map(section)
        return cls._build_offset(section)

    @classmethod
    def _build_map(cls, section: NodeSection) -> "NodeIndex":
        tag_to_slot = {}
        for slot, tag in enumerate(section.tags.tolist()):
            tag_to_slot[tag] = slot
        n_dup = len(section.tags) - len(tag_to_slot)
        if n_dup:
            logger.warning(
                "%d duplicate node tags in $Nodes; references resolve to the last occurrence",
                n_dup,
            )
        return cls(section.coords, section.tags, "map", tag_to_slot=tag_to_slot)

    @classmethod
    def _build_offset(cls, section: NodeSection) -> "NodeIndex":
        n_points = section.observed_max_tag or 0
        if n_points - len(section.tags) > MAX_OFFSET_GAPS:
            raise InvalidToken(
                f"Node tag {n_points} is too sparse for offset indexing: "
                f"{len(section.tags)} nodes would need {n_points} slots"
            )
        points = np.full((n_points, 3), np.nan, dtype=np.float64)
        populated = np.zeros(n_points, dtype=bool)
        slots = section.tags - 1
        points[slots] = section.coords
        populated[slots] = True

        n_gaps = int(n_points - populated.sum())
        if n_gaps:
            logger.warning(
                "Node tags are not a dense permutation of 1..%d: %d unused slots",
                n_points, n_gaps,
            )
        point_tags = np.arange(1, n_points + 1, dtype=np.int64)
        points.setflags(write=False)
        point_tags.setflags(write=False)
        return cls(points, point_tags, "offset", populated=populated)

    @property
    def num_points(self) -> int:
        return len(self.points)

    def slot_of(self, tag: int) -> int:
        """Return the point slot for a node *tag*.

        Raises
        ------
        DanglingNodeReference
            If no node with that tag was read.
        """
        if self._tag_to_slot is not None:
            slot = self._tag_to_slot.get(tag)
            if slot is None:
                raise DanglingNodeReference(tag)
            return slot

        slot = tag - 1
        if slot < 0 or slot >= len(self.points) or not self._populated[slot]:
            raise DanglingNodeReference(tag)
        return slot

    def slots_of(self, tags) -> tuple[int, ...]:
        return tuple(self.slot_of(t) for t in tags)
