"""
Boundary Conditions
===================

Boundary detection from edge incidence and Dirichlet elimination.
"""

import logging
import numpy as np
from dataclasses import dataclass
from scipy.sparse import coo_matrix, csr_matrix
from typing import Callable, Tuple, TYPE_CHECKING

from ..elements.local_stiffness import evaluate_source
from ..errors import NonManifoldMeshError

if TYPE_CHECKING:
    from ..mesh.polygon_mesh import PolygonMesh

log = logging.getLogger(__name__)


@dataclass
class BoundaryPartition:
    """
    Partition of the mesh into boundary and free parts.

    Attributes:
        boundary_edges: shape (m, 2), edges with one adjacent element,
            as sorted node pairs
        interior_edges: shape (k, 2), edges with two adjacent elements
        boundary_nodes: sorted indices of nodes on boundary edges
        free_nodes: sorted indices of all other nodes
        is_boundary_node: shape (n_nodes,), boolean mask
    """
    boundary_edges: np.ndarray
    interior_edges: np.ndarray
    boundary_nodes: np.ndarray
    free_nodes: np.ndarray
    is_boundary_node: np.ndarray


def edge_incidence(oriented_edges: np.ndarray,
                   n_nodes: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Count how many element sides generate each undirected edge.

    Args:
        oriented_edges: shape (n_sides, 2), element sides
        n_nodes: number of mesh nodes

    Returns:
        edges: shape (n_edges, 2), unique edges (smaller node first)
        counts: shape (n_edges,), incidence count of each edge
    """
    canonical = np.sort(np.asarray(oriented_edges, dtype=np.int64), axis=1)
    counter = coo_matrix(
        (np.ones(len(canonical), dtype=np.int64),
         (canonical[:, 0], canonical[:, 1])),
        shape=(n_nodes, n_nodes),
    ).tocsr()
    counter.sum_duplicates()
    counter = counter.tocoo()
    edges = np.column_stack([counter.row, counter.col]).astype(np.int64)
    return edges, counter.data.astype(np.int64)


def classify_boundary(oriented_edges: np.ndarray,
                      n_nodes: int) -> BoundaryPartition:
    """
    Find boundary edges and nodes.

    An edge is on the boundary if exactly one element side generates it
    and interior if exactly two do. Anything more is a non-manifold mesh.

    Args:
        oriented_edges: shape (n_sides, 2), element sides
        n_nodes: number of mesh nodes

    Returns:
        BoundaryPartition
    """
    edges, counts = edge_incidence(oriented_edges, n_nodes)

    over = counts > 2
    if np.any(over):
        raise NonManifoldMeshError(edges[over], counts[over])

    boundary_edges = edges[counts == 1]
    interior_edges = edges[counts == 2]

    is_boundary_node = np.zeros(n_nodes, dtype=bool)
    is_boundary_node[boundary_edges.ravel()] = True

    partition = BoundaryPartition(
        boundary_edges=boundary_edges,
        interior_edges=interior_edges,
        boundary_nodes=np.flatnonzero(is_boundary_node),
        free_nodes=np.flatnonzero(~is_boundary_node),
        is_boundary_node=is_boundary_node,
    )
    log.info("Boundary: %d edges, %d nodes; %d free nodes",
             len(boundary_edges), len(partition.boundary_nodes),
             len(partition.free_nodes))
    return partition


def get_free_nodes(n_nodes: int, boundary_nodes: np.ndarray) -> np.ndarray:
    """
    Get indices of free (unconstrained) nodes.

    Args:
        n_nodes: total number of nodes
        boundary_nodes: constrained node indices

    Returns:
        free_nodes: sorted indices of free nodes
    """
    mask = np.ones(n_nodes, dtype=bool)
    mask[np.asarray(boundary_nodes, dtype=np.int64)] = False
    return np.flatnonzero(mask)


def apply_dirichlet(A: csr_matrix, b: np.ndarray,
                    mesh: 'PolygonMesh',
                    boundary_nodes: np.ndarray,
                    g_D: Callable[[np.ndarray], np.ndarray]
                    ) -> Tuple[np.ndarray, np.ndarray]:
    """
    Impose Dirichlet values and lift them out of the right-hand side.

    The returned solution vector holds g_D on boundary nodes and zero on
    free nodes, so
        b_lifted = b - A u
    removes exactly the boundary columns from every equation.

    Args:
        A: stiffness matrix, shape (n_nodes, n_nodes)
        b: load vector, shape (n_nodes,), not modified
        mesh: PolygonMesh instance
        boundary_nodes: indices of boundary nodes
        g_D: function(points) -> values, points of shape (n, 2)

    Returns:
        u: shape (n_nodes,), boundary entries set, free entries zero
        b_lifted: shape (n_nodes,)
    """
    boundary_nodes = np.asarray(boundary_nodes, dtype=np.int64)
    u = np.zeros(mesh.n_nodes)
    if len(boundary_nodes) == 0:
        return u, np.array(b, dtype=np.float64)

    u[boundary_nodes] = evaluate_source(g_D, mesh.nodes[boundary_nodes])
    b_lifted = np.asarray(b, dtype=np.float64) - A @ u
    return u, b_lifted
