"""
Global Assembly
===============

Assembly of the global stiffness matrix and load vector from per-group
local contributions.
"""

import logging
import numpy as np
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from scipy.sparse import coo_matrix, csr_matrix
from typing import List, Tuple, TYPE_CHECKING

from ..elements.grouping import ElementGroup, group_elements, triplet_offsets
from ..elements.local_stiffness import SourceFunction, compute_group

if TYPE_CHECKING:
    from ..mesh.polygon_mesh import PolygonMesh

log = logging.getLogger(__name__)


@dataclass
class AssembledSystem:
    """
    Result of the assembly step.

    Attributes:
        A: sparse stiffness matrix, shape (n_nodes, n_nodes)
        b: load vector, shape (n_nodes,)
        oriented_edges: shape (sum Nv, 2), element sides for boundary
            classification
        n_triplets: number of generated triplets, sum of Nv^2
        groups: (Nv, number of elements) for each group
    """
    A: csr_matrix
    b: np.ndarray
    oriented_edges: np.ndarray
    n_triplets: int
    groups: List[Tuple[int, int]] = field(default_factory=list)


def _zero_source(points: np.ndarray) -> np.ndarray:
    return np.zeros(len(points))


def assemble_system(mesh: 'PolygonMesh',
                    source: SourceFunction,
                    n_workers: int = 1,
                    area_tol: float = 1e-12) -> AssembledSystem:
    """
    Assemble global stiffness matrix and load vector.

    A = Σ_e P_e^T K^e P_e,   b = Σ_e P_e^T F^e

    Every group writes its triplets into its own slice of the global
    arrays, located by a prefix sum over group sizes, so groups can be
    computed in any order or concurrently.

    Args:
        mesh: PolygonMesh instance
        source: function(points) -> values, points of shape (n, 2)
        n_workers: number of threads used to process groups
        area_tol: degeneracy tolerance for element areas

    Returns:
        AssembledSystem
    """
    n_nodes = mesh.n_nodes
    groups, oriented_edges = group_elements(mesh)
    offsets = triplet_offsets(groups)
    nnz = int(offsets[-1])

    ii = np.zeros(nnz, dtype=np.int64)
    jj = np.zeros(nnz, dtype=np.int64)
    ss = np.zeros(nnz, dtype=np.float64)

    def process(k: int, group: ElementGroup):
        contribution = compute_group(group, source, area_tol=area_tol)
        start, stop = offsets[k], offsets[k + 1]
        ii[start:stop] = contribution.rows
        jj[start:stop] = contribution.cols
        ss[start:stop] = contribution.values
        return contribution.load_nodes, contribution.load_values

    if n_workers > 1 and len(groups) > 1:
        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            futures = [executor.submit(process, k, g)
                       for k, g in enumerate(groups)]
            loads = [f.result() for f in futures]
    else:
        loads = [process(k, g) for k, g in enumerate(groups)]

    # Single scatter-add for the load vector
    if loads:
        load_nodes = np.concatenate([nodes for nodes, _ in loads])
        load_values = np.concatenate([values for _, values in loads])
        b = np.bincount(load_nodes, weights=load_values, minlength=n_nodes)
    else:
        b = np.zeros(n_nodes)

    # Duplicate (row, col) pairs are summed by the conversion
    A = coo_matrix((ss, (ii, jj)), shape=(n_nodes, n_nodes)).tocsr()

    log.info("Assembled %d x %d system from %d elements in %d groups "
             "(%d triplets, %d nonzeros)",
             n_nodes, n_nodes, mesh.n_elements, len(groups), nnz, A.nnz)

    return AssembledSystem(
        A=A,
        b=b,
        oriented_edges=oriented_edges,
        n_triplets=nnz,
        groups=[(g.n_vertices, g.n_elements) for g in groups],
    )


def assemble_stiffness(mesh: 'PolygonMesh', n_workers: int = 1,
                       area_tol: float = 1e-12) -> csr_matrix:
    """
    Assemble global stiffness matrix only.

    Args:
        mesh: PolygonMesh instance
        n_workers: number of threads used to process groups
        area_tol: degeneracy tolerance for element areas

    Returns:
        A: sparse stiffness matrix, shape (n_nodes, n_nodes)
    """
    return assemble_system(mesh, _zero_source, n_workers=n_workers,
                           area_tol=area_tol).A
