"""
Elliptic Projection
===================

Projection of the nodal degrees of freedom onto the local linear
polynomials, and the residual operator (I - Π).
"""

import numpy as np

from .geometry import GroupGeometry


def projection_correction(geom: GroupGeometry) -> np.ndarray:
    """
    Constant part of the projection.

    The projection of basis function φ_j is
        Πφ_j = c_j + B_j · m,   m = (x - c)/h
    and c_j is fixed by requiring the constant nodal vector to project
    onto the constant one:
        c_j = (1 - (Σ_i D_i) · B_j) / Nv

    Args:
        geom: GroupGeometry

    Returns:
        c: shape (NT, Nv)
    """
    n_vertices = geom.n_vertices
    sum_dx = np.sum(geom.Dx, axis=1, keepdims=True)
    sum_dy = np.sum(geom.Dy, axis=1, keepdims=True)
    return (1 - (sum_dx * geom.Bx + sum_dy * geom.By)) / n_vertices


def build_i_minus_pi(geom: GroupGeometry) -> np.ndarray:
    """
    Build the residual matrix (I - Π) for every element of a group.

    Entry (i, j) is the value at vertex i of φ_j - Πφ_j:
        (I - Π)_ij = δ_ij - c_j - Dx_i Bx_j - Dy_i By_j

    Args:
        geom: GroupGeometry

    Returns:
        i_minus_pi: shape (NT, Nv, Nv)
    """
    c = projection_correction(geom)
    pi = (c[:, None, :]
          + geom.Dx[:, :, None] * geom.Bx[:, None, :]
          + geom.Dy[:, :, None] * geom.By[:, None, :])
    return np.eye(geom.n_vertices)[None, :, :] - pi


def consistency_residual(i_minus_pi: np.ndarray) -> np.ndarray:
    """
    Largest deviation of (I - Π) applied to the constant vector from zero.

    Args:
        i_minus_pi: shape (NT, Nv, Nv)

    Returns:
        residual: shape (NT,), max_i |Σ_j (I - Π)_ij|
    """
    return np.max(np.abs(np.sum(i_minus_pi, axis=2)), axis=1)
