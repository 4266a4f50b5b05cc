"""
Error Norms and Convergence
===========================

Discrete error measures against a known exact solution and tracking of
convergence rates under mesh refinement.
"""

import numpy as np
from dataclasses import dataclass
from scipy.sparse import csr_matrix
from typing import Callable, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from ..mesh.polygon_mesh import PolygonMesh


def interpolate(mesh: 'PolygonMesh',
                func: Callable[[np.ndarray], np.ndarray]) -> np.ndarray:
    """
    Nodal interpolant of a function.

    Args:
        mesh: PolygonMesh instance
        func: function(points) -> values, points of shape (n, 2)

    Returns:
        values: shape (n_nodes,)
    """
    return np.asarray(func(mesh.nodes), dtype=np.float64).reshape(-1)


def energy_error(A: csr_matrix, u: np.ndarray, u_interp: np.ndarray) -> float:
    """
    Discrete energy norm of the error.

        ||u - u_I||_A = sqrt((u - u_I)^T A (u - u_I))

    Args:
        A: stiffness matrix (before boundary conditions)
        u: discrete solution
        u_interp: nodal interpolant of the exact solution

    Returns:
        error in the energy norm
    """
    e = np.asarray(u) - np.asarray(u_interp)
    return float(np.sqrt(max(e @ (A @ e), 0.0)))


def max_nodal_error(u: np.ndarray, u_interp: np.ndarray) -> float:
    """Maximum nodal error."""
    return float(np.max(np.abs(np.asarray(u) - np.asarray(u_interp))))


def convergence_rates(h_values: np.ndarray, errors: np.ndarray) -> np.ndarray:
    """
    Observed convergence rates between successive refinements.

        rate_k = log(e_{k+1} / e_k) / log(h_{k+1} / h_k)

    Args:
        h_values: mesh sizes, shape (n,)
        errors: errors, shape (n,)

    Returns:
        rates: shape (n - 1,)
    """
    h = np.asarray(h_values, dtype=np.float64)
    e = np.asarray(errors, dtype=np.float64)
    if len(h) != len(e):
        raise ValueError("h_values and errors must have same length")
    if len(h) < 2:
        return np.array([])
    return np.log(e[1:] / e[:-1]) / np.log(h[1:] / h[:-1])


@dataclass
class ErrorRecord:
    """Errors on a single mesh of a refinement study."""
    h: float
    n_nodes: int
    energy_error: float
    max_error: float


class ConvergenceStudy:
    """
    Collect errors over a sequence of refined meshes.

    Provides tools for:
    - Recording errors of each solve
    - Computing observed convergence rates
    - Printable summary
    """

    def __init__(self):
        """Initialize convergence study."""
        self.records: List[ErrorRecord] = []

    def add_record(self, h: float, n_nodes: int,
                   energy_error: float, max_error: float) -> None:
        """
        Add errors of one mesh.

        Args:
            h: mesh size
            n_nodes: number of nodes
            energy_error: error in the energy norm
            max_error: maximum nodal error
        """
        self.records.append(ErrorRecord(h=h, n_nodes=n_nodes,
                                        energy_error=energy_error,
                                        max_error=max_error))

    def add_solution(self, mesh: 'PolygonMesh', h: float, A: csr_matrix,
                     u: np.ndarray,
                     exact: Callable[[np.ndarray], np.ndarray]) -> None:
        """
        Compute and record the errors of a solution.

        Args:
            mesh: PolygonMesh the solution lives on
            h: mesh size
            A: stiffness matrix
            u: discrete solution
            exact: exact solution, function(points) -> values
        """
        u_interp = interpolate(mesh, exact)
        self.add_record(h, mesh.n_nodes,
                        energy_error(A, u, u_interp),
                        max_nodal_error(u, u_interp))

    def get_arrays(self) -> Dict[str, np.ndarray]:
        """
        Get recorded quantities as numpy arrays.

        Returns:
            Dictionary with keys: 'h', 'n_nodes', 'energy', 'max'
        """
        return {
            'h': np.array([r.h for r in self.records]),
            'n_nodes': np.array([r.n_nodes for r in self.records]),
            'energy': np.array([r.energy_error for r in self.records]),
            'max': np.array([r.max_error for r in self.records]),
        }

    def rates(self) -> Dict[str, np.ndarray]:
        """
        Observed convergence rates of both error measures.

        Returns:
            Dictionary with keys 'energy' and 'max'
        """
        arrays = self.get_arrays()
        return {
            'energy': convergence_rates(arrays['h'], arrays['energy']),
            'max': convergence_rates(arrays['h'], arrays['max']),
        }

    def summary(self) -> str:
        """Return a table of errors and rates."""
        rates = self.rates()
        lines = [f"{'h':>10} {'nodes':>8} {'energy err':>12} {'rate':>6} "
                 f"{'max err':>12} {'rate':>6}"]
        for k, r in enumerate(self.records):
            if k == 0:
                er, mr = "", ""
            else:
                er = f"{rates['energy'][k - 1]:.2f}"
                mr = f"{rates['max'][k - 1]:.2f}"
            lines.append(f"{r.h:10.4e} {r.n_nodes:8d} {r.energy_error:12.4e} "
                         f"{er:>6} {r.max_error:12.4e} {mr:>6}")
        return "\n".join(lines)
