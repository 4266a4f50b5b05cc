"""
Linear Solve
============

Solve the reduced symmetric system on the free nodes.
"""

import logging
import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.linalg import splu, cg
from typing import Optional

from ..errors import SingularSystemError, SolverConvergenceError

log = logging.getLogger(__name__)


def solve_free_system(A: csr_matrix, b: np.ndarray, free_nodes: np.ndarray,
                      method: str = 'direct', rtol: float = 1e-10,
                      maxiter: Optional[int] = None) -> np.ndarray:
    """
    Solve A[free, free] x = b[free].

    Args:
        A: global stiffness matrix
        b: lifted right-hand side, shape (n_nodes,)
        free_nodes: indices of unknown nodes
        method: 'direct' (sparse LU) or 'cg' (conjugate gradients)
        rtol: relative residual tolerance for 'cg'
        maxiter: iteration cap for 'cg'

    Returns:
        x: shape (len(free_nodes),)
    """
    free_nodes = np.asarray(free_nodes, dtype=np.int64)
    A_ff = A[free_nodes][:, free_nodes]
    b_f = np.asarray(b)[free_nodes]

    if method == 'direct':
        x = _solve_direct(A_ff, b_f)
    elif method == 'cg':
        x = _solve_cg(A_ff, b_f, rtol, maxiter)
    else:
        raise ValueError(f"Unknown linear solver: {method}")

    if not np.all(np.isfinite(x)):
        raise SingularSystemError("Linear solve produced non-finite values")
    return x


def _solve_direct(A_ff: csr_matrix, b_f: np.ndarray) -> np.ndarray:
    """Sparse LU factorization and solve."""
    try:
        lu = splu(A_ff.tocsc())
    except RuntimeError as exc:
        raise SingularSystemError(
            f"Free-node matrix ({A_ff.shape[0]} x {A_ff.shape[1]}) is singular"
        ) from exc
    return lu.solve(b_f)


def _solve_cg(A_ff: csr_matrix, b_f: np.ndarray, rtol: float,
              maxiter: Optional[int]) -> np.ndarray:
    """Conjugate gradients; A_ff is symmetric positive definite."""
    x, info = cg(A_ff, b_f, rtol=rtol, maxiter=maxiter)
    if info > 0:
        raise SolverConvergenceError(
            f"CG did not converge to rtol={rtol} within {info} iterations"
        )
    if info < 0:
        raise SingularSystemError(f"CG breakdown (info={info})")
    log.debug("CG converged, residual %.3e",
              np.linalg.norm(A_ff @ x - b_f))
    return x
