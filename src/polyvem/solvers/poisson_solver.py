"""
Poisson Solver
==============

Virtual element solver for the Poisson problem

    -Δu = f   in Ω
      u = g_D on ∂Ω

on meshes of arbitrary simple polygons.
"""

import logging
import time
from contextlib import nullcontext
import numpy as np
from dataclasses import dataclass
from scipy.sparse import csr_matrix
from typing import Callable, Optional

from ..mesh.polygon_mesh import PolygonMesh, ElementsLike
from ..assembly.global_assembly import assemble_system
from ..assembly.boundary import BoundaryPartition, classify_boundary, apply_dirichlet
from ..log_config import verbose_logging
from .linear import solve_free_system

log = logging.getLogger(__name__)

PointFunction = Callable[[np.ndarray], np.ndarray]


@dataclass
class SolverConfig:
    """Configuration for the Poisson solver."""
    linear_solver: str = 'direct'  # 'direct' (sparse LU) or 'cg'
    rtol: float = 1e-10            # CG relative residual tolerance
    maxiter: Optional[int] = None  # CG iteration cap
    n_workers: int = 1             # Threads used for group assembly
    area_tol: float = 1e-12        # Relative area below which an element is degenerate
    verbose: bool = False          # Print progress messages during solve()


@dataclass
class VEMSolution:
    """Result of a Poisson solve."""
    u: np.ndarray
    A: csr_matrix
    b: np.ndarray
    partition: BoundaryPartition
    n_triplets: int
    assembly_time: float
    solve_time: float


class PoissonVEMSolver:
    """
    Lowest-order virtual element solver for the Poisson equation.

    Algorithm:
        1. Group elements by vertex count and assemble A, b
        2. Classify boundary edges and nodes from edge incidence
        3. Set boundary values of u and lift them out of b
        4. Solve the free-node block (skipped if there are no free nodes)

    Attributes:
        mesh: PolygonMesh instance
        config: SolverConfig instance
    """

    def __init__(self, mesh: PolygonMesh,
                 config: Optional[SolverConfig] = None):
        """
        Initialize solver.

        Args:
            mesh: PolygonMesh instance
            config: SolverConfig (optional)
        """
        self.mesh = mesh
        self.config = config or SolverConfig()

    def solve(self, source: PointFunction, g_D: PointFunction) -> VEMSolution:
        """
        Assemble and solve.

        Args:
            source: function(points) -> f values, points of shape (n, 2)
            g_D: function(points) -> boundary values, same signature

        Returns:
            VEMSolution
        """
        with verbose_logging() if self.config.verbose else nullcontext():
            return self._solve(source, g_D)

    def _solve(self, source: PointFunction, g_D: PointFunction) -> VEMSolution:
        mesh = self.mesh
        cfg = self.config

        t0 = time.perf_counter()
        system = assemble_system(mesh, source, n_workers=cfg.n_workers,
                                 area_tol=cfg.area_tol)
        partition = classify_boundary(system.oriented_edges, mesh.n_nodes)
        assembly_time = time.perf_counter() - t0

        u, b = apply_dirichlet(system.A, system.b, mesh,
                               partition.boundary_nodes, g_D)

        t0 = time.perf_counter()
        free = partition.free_nodes
        if len(free) > 0:
            u[free] = solve_free_system(system.A, b, free,
                                        method=cfg.linear_solver,
                                        rtol=cfg.rtol, maxiter=cfg.maxiter)
        else:
            log.info("All nodes are on the boundary, skipping linear solve")
        solve_time = time.perf_counter() - t0

        log.info("Assembly %.3fs, solve %.3fs (%d free nodes)",
                 assembly_time, solve_time, len(free))

        return VEMSolution(
            u=u,
            A=system.A,
            b=b,
            partition=partition,
            n_triplets=system.n_triplets,
            assembly_time=assembly_time,
            solve_time=solve_time,
        )


def solve_poisson(nodes: np.ndarray, elements: ElementsLike,
                  source: PointFunction, g_D: PointFunction,
                  index_base: int = 0,
                  config: Optional[SolverConfig] = None) -> VEMSolution:
    """
    Convenience function: build the mesh and solve in one call.

    Args:
        nodes: shape (n_nodes, 2), node coordinates
        elements: node-index sequences, one per element
        source: function(points) -> f values
        g_D: function(points) -> Dirichlet values
        index_base: 0 or 1, numbering used in ``elements``
        config: SolverConfig (optional)

    Returns:
        VEMSolution
    """
    mesh = PolygonMesh(nodes, elements, index_base=index_base)
    return PoissonVEMSolver(mesh, config).solve(source, g_D)
