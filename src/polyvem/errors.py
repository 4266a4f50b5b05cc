"""
Errors
======

Exceptions raised while assembling and solving the VEM system.

All geometry and topology errors are detected during assembly, before any
linear solve is attempted, and carry the identity of the offending
element or edge.
"""

import numpy as np
from typing import Sequence


class VEMError(ValueError):
    """Base class for all assembly and solve errors."""


class InvalidElementError(VEMError):
    """
    Element has fewer than 3 vertices.

    Attributes:
        element_index: index of the offending element
        n_vertices: its vertex count
    """

    def __init__(self, element_index: int, n_vertices: int):
        self.element_index = int(element_index)
        self.n_vertices = int(n_vertices)
        super().__init__(
            f"Element {self.element_index} has {self.n_vertices} vertices, "
            f"at least 3 are required"
        )


class DegenerateElementError(VEMError):
    """
    Element has zero or numerically negligible signed area.

    Attributes:
        element_indices: indices of all degenerate elements in the group
        areas: their signed areas
    """

    def __init__(self, element_indices: Sequence[int], areas: Sequence[float]):
        self.element_indices = np.asarray(element_indices, dtype=np.int64)
        self.areas = np.asarray(areas, dtype=np.float64)
        shown = ", ".join(f"{e} (area={a:.3e})"
                          for e, a in zip(self.element_indices[:5], self.areas[:5]))
        more = len(self.element_indices) - 5
        if more > 0:
            shown += f", ... and {more} more"
        super().__init__(f"Degenerate element(s): {shown}")


class NonManifoldMeshError(VEMError):
    """
    An edge is shared by more than two element sides.

    Attributes:
        edges: shape (m, 2), offending edges as sorted node pairs
        counts: shape (m,), number of element sides generating each edge
    """

    def __init__(self, edges: np.ndarray, counts: np.ndarray):
        self.edges = np.asarray(edges, dtype=np.int64).reshape(-1, 2)
        self.counts = np.asarray(counts, dtype=np.int64)
        shown = ", ".join(f"({a}, {b}) x{c}"
                          for (a, b), c in zip(self.edges[:5], self.counts[:5]))
        more = len(self.edges) - 5
        if more > 0:
            shown += f", ... and {more} more"
        super().__init__(f"Non-manifold mesh, edges shared by more than two elements: {shown}")


class SingularSystemError(VEMError):
    """The reduced free-node system is singular."""


class SolverConvergenceError(VEMError):
    """Iterative linear solver stopped before reaching the tolerance."""
