"""
Element Grouping
================

Partition polygon elements by vertex count so that every group can be
processed with uniform-shape array arithmetic.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import List, Tuple, TYPE_CHECKING

from ..errors import InvalidElementError

if TYPE_CHECKING:
    from ..mesh.polygon_mesh import PolygonMesh

log = logging.getLogger(__name__)


@dataclass
class ElementGroup:
    """
    Batch of elements sharing the same vertex count.

    Attributes:
        n_vertices: vertex count Nv shared by the group
        element_indices: shape (NT,), global indices of the grouped elements
        vertices: shape (NT, Nv), node indices
        x1, y1: shape (NT, Nv), coordinates of vertex i
        x2, y2: shape (NT, Nv), coordinates of vertex i+1 (cyclic)
    """
    n_vertices: int
    element_indices: np.ndarray
    vertices: np.ndarray
    x1: np.ndarray
    y1: np.ndarray
    x2: np.ndarray
    y2: np.ndarray

    @property
    def n_elements(self) -> int:
        """Number of elements NT in the group."""
        return len(self.element_indices)

    @property
    def n_entries(self) -> int:
        """Number of local stiffness entries, NT * Nv^2."""
        return self.n_elements * self.n_vertices ** 2

    def oriented_edges(self) -> np.ndarray:
        """
        Oriented sides (v_i, v_{i+1}) of every element in the group.

        Returns:
            edges: shape (NT * Nv, 2)
        """
        successor = np.roll(self.vertices, -1, axis=1)
        return np.column_stack([self.vertices.ravel(), successor.ravel()])


def group_elements(mesh: 'PolygonMesh') -> Tuple[List[ElementGroup], np.ndarray]:
    """
    Group elements by vertex count.

    Every vertex count present in the mesh produces exactly one group,
    ordered by increasing Nv; inside a group elements keep mesh order.
    The oriented sides of every element are collected along the way for
    boundary classification.

    Args:
        mesh: PolygonMesh instance

    Returns:
        groups: list of ElementGroup
        oriented_edges: shape (sum Nv, 2), element sides grouped like the
            elements
    """
    counts = mesh.vertex_counts
    short = np.flatnonzero(counts < 3)
    if len(short) > 0:
        raise InvalidElementError(short[0], counts[short[0]])

    nodes = mesh.nodes
    groups = []
    edge_blocks = []

    for n_vertices in np.unique(counts):
        idx = np.flatnonzero(counts == n_vertices)
        # Gather rows of the flat connectivity without a Python loop
        starts = mesh.element_offsets[idx]
        vertices = mesh.element_nodes[starts[:, None] + np.arange(n_vertices)]
        vertices_next = np.roll(vertices, -1, axis=1)

        group = ElementGroup(
            n_vertices=int(n_vertices),
            element_indices=idx,
            vertices=vertices,
            x1=nodes[vertices, 0],
            y1=nodes[vertices, 1],
            x2=nodes[vertices_next, 0],
            y2=nodes[vertices_next, 1],
        )
        groups.append(group)
        edge_blocks.append(group.oriented_edges())

        log.debug("Group Nv=%d: %d elements", n_vertices, len(idx))

    if edge_blocks:
        oriented_edges = np.vstack(edge_blocks)
    else:
        oriented_edges = np.zeros((0, 2), dtype=np.int64)

    return groups, oriented_edges


def triplet_offsets(groups: List[ElementGroup]) -> np.ndarray:
    """
    Start offset of every group in the global triplet arrays.

    Exclusive prefix sum of the per-group entry counts: group k owns the
    slice ``offsets[k]:offsets[k + 1]``.

    Args:
        groups: list of ElementGroup

    Returns:
        offsets: shape (len(groups) + 1,)
    """
    offsets = np.zeros(len(groups) + 1, dtype=np.int64)
    np.cumsum([g.n_entries for g in groups], out=offsets[1:])
    return offsets
