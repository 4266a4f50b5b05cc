"""
Local Stiffness and Load
========================

Local VEM bilinear form and load vector for a group of elements.

The local form is split into a consistency part, exact on linear
polynomials, and a stability part acting on the non-polynomial residual:
    a_E(u, v) = (∇Πu, ∇Πv)_E + S((I - Π)u, (I - Π)v)
with the identity as stabilizing form S.
"""

import numpy as np
from dataclasses import dataclass
from typing import Callable

from .grouping import ElementGroup
from .geometry import GroupGeometry, compute_group_geometry
from .projection import build_i_minus_pi


SourceFunction = Callable[[np.ndarray], np.ndarray]


@dataclass
class GroupContribution:
    """
    Global contributions of one element group.

    Attributes:
        rows, cols, values: shape (NT * Nv^2,), stiffness triplets
        load_nodes: shape (NT * Nv,), node receiving each load share
        load_values: shape (NT * Nv,), load shares
    """
    rows: np.ndarray
    cols: np.ndarray
    values: np.ndarray
    load_nodes: np.ndarray
    load_values: np.ndarray


def local_stiffness(geom: GroupGeometry, i_minus_pi: np.ndarray) -> np.ndarray:
    """
    Local stiffness matrices of a group.

        K_ij = B_i · B_j + Σ_k (I - Π)_ki (I - Π)_kj

    Args:
        geom: GroupGeometry
        i_minus_pi: shape (NT, Nv, Nv)

    Returns:
        K: shape (NT, Nv, Nv), symmetric
    """
    consistency = (geom.Bx[:, :, None] * geom.Bx[:, None, :]
                   + geom.By[:, :, None] * geom.By[:, None, :])
    stability = np.einsum('nki,nkj->nij', i_minus_pi, i_minus_pi)
    return consistency + stability


def evaluate_source(source: SourceFunction, points: np.ndarray) -> np.ndarray:
    """
    Evaluate a batch evaluator at points.

    Args:
        source: function(points) -> values, points of shape (n, 2)
        points: shape (n, 2)

    Returns:
        values: shape (n,); scalar results are broadcast
    """
    values = np.asarray(source(points), dtype=np.float64)
    if values.ndim == 0:
        return np.full(len(points), float(values))
    values = values.reshape(-1)
    if values.shape[0] != len(points):
        raise ValueError(
            f"evaluator returned {values.shape[0]} values for {len(points)} points"
        )
    return values


def local_load(geom: GroupGeometry, source: SourceFunction) -> np.ndarray:
    """
    Per-vertex load share of each element.

    The source is evaluated once at the centroid and split equally among
    the vertices (one-point rule, first order):
        F_i = |E| f(c) / Nv

    Args:
        geom: GroupGeometry
        source: function(points) -> values

    Returns:
        shares: shape (NT,), the load given to each vertex
    """
    centroids = np.column_stack([geom.cx, geom.cy])
    f = evaluate_source(source, centroids)
    return geom.area * f / geom.n_vertices


def compute_group(group: ElementGroup, source: SourceFunction,
                  area_tol: float = 1e-12) -> GroupContribution:
    """
    Run geometry, projection, stiffness and load for one group.

    Triplets are laid out entry-major: all elements' (0, 0) entries
    first, then (0, 1), and so on.

    Args:
        group: ElementGroup
        source: function(points) -> values
        area_tol: degeneracy tolerance, see compute_group_geometry

    Returns:
        GroupContribution
    """
    geom = compute_group_geometry(group, area_tol=area_tol)
    i_minus_pi = build_i_minus_pi(geom)
    K = local_stiffness(geom, i_minus_pi)

    n_vertices = group.n_vertices
    vertices = group.vertices
    rows = np.repeat(vertices, n_vertices, axis=1)
    cols = np.tile(vertices, (1, n_vertices))

    shares = local_load(geom, source)

    return GroupContribution(
        rows=rows.T.ravel(),
        cols=cols.T.ravel(),
        values=K.reshape(group.n_elements, -1).T.ravel(),
        load_nodes=vertices.T.ravel(),
        load_values=np.tile(shares, n_vertices),
    )
