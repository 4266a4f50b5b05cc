"""
Poisson Convergence Example
===========================

Solves -Δu = f on the unit square with mixed polygon meshes of
increasing resolution and reports the observed convergence rates.

Exact solution: u = sin(πx) sin(πy) + x
"""

import numpy as np
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from polyvem.mesh import create_mixed_polygon_mesh
from polyvem.solvers import PoissonVEMSolver, SolverConfig
from polyvem.postprocess import ConvergenceStudy


def exact_u(p):
    return np.sin(np.pi * p[:, 0]) * np.sin(np.pi * p[:, 1]) + p[:, 0]


def source(p):
    return 2 * np.pi ** 2 * np.sin(np.pi * p[:, 0]) * np.sin(np.pi * p[:, 1])


def run_convergence_study(levels=(4, 8, 16, 32)):
    """Solve on a sequence of meshes and print errors."""
    print("=" * 60)
    print("polyvem: Poisson convergence on mixed polygon meshes")
    print("=" * 60)

    study = ConvergenceStudy()
    config = SolverConfig(linear_solver='direct')

    for n in levels:
        mesh = create_mixed_polygon_mesh(n)
        solution = PoissonVEMSolver(mesh, config).solve(source, exact_u)
        study.add_solution(mesh, 1.0 / n, solution.A, solution.u, exact_u)

        print(f"n = {n:3d}: {mesh.n_nodes:6d} nodes, {mesh.n_elements:6d} elements, "
              f"assembly {solution.assembly_time:.3f}s, solve {solution.solve_time:.3f}s")

    print()
    print(study.summary())
    return study


if __name__ == '__main__':
    run_convergence_study()
