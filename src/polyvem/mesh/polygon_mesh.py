"""
Polygon Mesh
============

Core mesh class for the virtual element method: nodes plus elements that
are arbitrary simple polygons with a varying number of vertices.
"""

import numpy as np
from typing import Callable, List, Sequence, Union

from ..errors import InvalidElementError


ElementsLike = Union[np.ndarray, Sequence[Sequence[int]]]


class PolygonMesh:
    """
    Mesh of simple polygons with variable vertex counts.

    Each element is an ordered list of node indices, listed
    counterclockwise. Elements do not need to share a common arity; the
    connectivity is stored in a compressed layout (flat node list plus
    offsets) so that per-arity batches can be sliced out cheaply.

    Attributes:
        nodes: np.ndarray, shape (n_nodes, 2)
            Node coordinates (read-only)
        elements: list of np.ndarray
            0-based node indices for each element
        element_nodes: np.ndarray, shape (sum Nv,)
            All element node indices concatenated in element order
        element_offsets: np.ndarray, shape (n_elements + 1,)
            element e owns element_nodes[element_offsets[e]:element_offsets[e+1]]
        vertex_counts: np.ndarray, shape (n_elements,)
            Number of vertices of each element

    Edge Convention:
        Local edge i of an element runs from vertex i to vertex i+1,
        with the last edge wrapping back to vertex 0.
    """

    def __init__(self, nodes: np.ndarray, elements: ElementsLike,
                 index_base: int = 0):
        """
        Initialize mesh and validate connectivity.

        Args:
            nodes: shape (n_nodes, 2), node coordinates
            elements: sequence of node-index sequences, one per element,
                or an integer array of shape (n_elements, Nv)
            index_base: 0 or 1, the numbering used in ``elements``
        """
        if index_base not in (0, 1):
            raise ValueError(f"index_base must be 0 or 1, got {index_base}")

        self.nodes = np.array(nodes, dtype=np.float64)
        if self.nodes.ndim != 2 or self.nodes.shape[1] != 2:
            raise ValueError("nodes must have shape (n_nodes, 2)")
        self.nodes.flags.writeable = False

        self.elements = self._normalize_elements(elements, index_base)
        self.vertex_counts = np.array([len(e) for e in self.elements],
                                      dtype=np.int64)

        # Validate arity before anything downstream relies on it
        for elem_idx, n_vertices in enumerate(self.vertex_counts):
            if n_vertices < 3:
                raise InvalidElementError(elem_idx, n_vertices)

        self.element_offsets = np.zeros(self.n_elements + 1, dtype=np.int64)
        np.cumsum(self.vertex_counts, out=self.element_offsets[1:])
        if self.elements:
            self.element_nodes = np.concatenate(self.elements)
        else:
            self.element_nodes = np.zeros(0, dtype=np.int64)

        if self.element_nodes.size > 0:
            lo, hi = self.element_nodes.min(), self.element_nodes.max()
            if lo < 0 or hi >= self.n_nodes:
                raise ValueError(
                    f"element node indices out of range [0, {self.n_nodes}) "
                    f"after index_base={index_base} shift: found {lo}..{hi}"
                )

    @staticmethod
    def _normalize_elements(elements: ElementsLike,
                            index_base: int) -> List[np.ndarray]:
        """Convert element input to a list of 0-based int64 arrays."""
        if (isinstance(elements, np.ndarray) and elements.dtype != object
                and elements.ndim != 2):
            raise ValueError("element array must have shape (n_elements, Nv)")
        return [np.asarray(row, dtype=np.int64).ravel() - index_base
                for row in elements]

    @property
    def n_nodes(self) -> int:
        """Number of nodes in the mesh."""
        return len(self.nodes)

    @property
    def n_elements(self) -> int:
        """Number of elements in the mesh."""
        return len(self.elements)

    @property
    def n_local_entries(self) -> int:
        """Total number of local stiffness entries, sum of Nv^2."""
        return int(np.sum(self.vertex_counts ** 2))

    def oriented_edges(self) -> np.ndarray:
        """
        Return every element side as an oriented node pair.

        Returns:
            edges: shape (sum Nv, 2), (v_i, v_{i+1}) for every element in
            order, wrap-around included
        """
        successor = np.arange(1, len(self.element_nodes) + 1, dtype=np.int64)
        # Last vertex of each element points back to its first vertex
        successor[self.element_offsets[1:] - 1] = self.element_offsets[:-1]
        return np.column_stack([self.element_nodes,
                                self.element_nodes[successor]])

    def element_areas(self) -> np.ndarray:
        """
        Compute signed area of all elements (shoelace formula).

        Positive for counterclockwise elements.

        Returns:
            areas: shape (n_elements,)
        """
        edges = self.oriented_edges()
        p1 = self.nodes[edges[:, 0]]
        p2 = self.nodes[edges[:, 1]]
        cross = p1[:, 0] * p2[:, 1] - p1[:, 1] * p2[:, 0]
        elem_ids = np.repeat(np.arange(self.n_elements), self.vertex_counts)
        return 0.5 * np.bincount(elem_ids, weights=cross,
                                 minlength=self.n_elements)

    def element_centroids(self) -> np.ndarray:
        """
        Compute polygon centroids.

        Returns:
            centroids: shape (n_elements, 2)
        """
        edges = self.oriented_edges()
        p1 = self.nodes[edges[:, 0]]
        p2 = self.nodes[edges[:, 1]]
        cross = p1[:, 0] * p2[:, 1] - p1[:, 1] * p2[:, 0]
        elem_ids = np.repeat(np.arange(self.n_elements), self.vertex_counts)
        area6 = 6.0 * self.element_areas()
        cx = np.bincount(elem_ids, weights=(p1[:, 0] + p2[:, 0]) * cross,
                         minlength=self.n_elements) / area6
        cy = np.bincount(elem_ids, weights=(p1[:, 1] + p2[:, 1]) * cross,
                         minlength=self.n_elements) / area6
        return np.column_stack([cx, cy])

    def orient_counterclockwise(self) -> 'PolygonMesh':
        """
        Return a copy of the mesh with clockwise elements reversed.

        Returns:
            New PolygonMesh whose elements all have non-negative area
        """
        areas = self.element_areas()
        elements = [elem[::-1].copy() if area < 0 else elem.copy()
                    for elem, area in zip(self.elements, areas)]
        return PolygonMesh(self.nodes.copy(), elements)

    def get_element_nodes(self, elem_idx: int) -> np.ndarray:
        """
        Return coordinates of element nodes.

        Args:
            elem_idx: element index

        Returns:
            coordinates: shape (Nv, 2)
        """
        return self.nodes[self.elements[elem_idx]]

    def get_nodes_in_region(self, region_func: Callable[[float, float], bool]) -> np.ndarray:
        """
        Get indices of nodes satisfying a condition.

        Args:
            region_func: function(x, y) -> bool

        Returns:
            node_indices: array of node indices
        """
        indices = [i for i, (x, y) in enumerate(self.nodes) if region_func(x, y)]
        return np.array(indices, dtype=np.int64)

    def __repr__(self) -> str:
        arities = sorted(set(self.vertex_counts.tolist()))
        return (f"PolygonMesh(n_nodes={self.n_nodes}, "
                f"n_elements={self.n_elements}, vertex_counts={arities})")
