"""
Solvers Module
==============

Poisson solver and the reduced linear solve.
"""

from .poisson_solver import PoissonVEMSolver, SolverConfig, VEMSolution, solve_poisson
from .linear import solve_free_system

__all__ = ["PoissonVEMSolver", "SolverConfig", "VEMSolution", "solve_poisson",
           "solve_free_system"]
