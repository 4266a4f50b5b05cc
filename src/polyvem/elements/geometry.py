"""
Element Geometry
================

Batched geometric quantities of polygon groups: area, scale, centroid,
edge normals, gradient projection B and scaled coordinates D.
"""

import numpy as np
from dataclasses import dataclass

from .grouping import ElementGroup
from ..errors import DegenerateElementError


@dataclass
class GroupGeometry:
    """
    Geometric quantities of one element group.

    Per-element arrays have shape (NT,), per-vertex arrays (NT, Nv).

    Attributes:
        area: signed area (positive for counterclockwise elements)
        h: length scale sqrt(|area|), not the diameter
        cx, cy: centroid
        normal_x, normal_y: outward normal of edge i (vertex i to i+1),
            scaled by the edge length
        Bx, By: gradient projection of each vertex basis function
        Dx, Dy: scaled monomials (x - cx)/h, (y - cy)/h at the vertices
    """
    area: np.ndarray
    h: np.ndarray
    cx: np.ndarray
    cy: np.ndarray
    normal_x: np.ndarray
    normal_y: np.ndarray
    Bx: np.ndarray
    By: np.ndarray
    Dx: np.ndarray
    Dy: np.ndarray

    @property
    def n_vertices(self) -> int:
        return self.Bx.shape[1]


def compute_group_geometry(group: ElementGroup,
                           area_tol: float = 1e-12) -> GroupGeometry:
    """
    Compute geometry of every element in a group.

    Area (shoelace):
        A = 1/2 Σ_i (x_i y_{i+1} - y_i x_{i+1})

    Centroid:
        c = 1/(6A) Σ_i (p_i + p_{i+1}) (x_i y_{i+1} - y_i x_{i+1})

    The gradient projection of vertex basis function φ_i only sees the
    two edges incident to vertex i, where φ_i is linear with mean 1/2:
        B_i = (n_{i-1} + n_i) / (2h)

    Args:
        group: ElementGroup
        area_tol: an element is degenerate when
            |A| <= area_tol * (longest edge)^2

    Returns:
        GroupGeometry
    """
    x1, y1, x2, y2 = group.x1, group.y1, group.x2, group.y2

    cross = x1 * y2 - y1 * x2
    area = np.sum(cross, axis=1) / 2

    edge_len_sq = (x2 - x1) ** 2 + (y2 - y1) ** 2
    bad = np.abs(area) <= area_tol * np.max(edge_len_sq, axis=1)
    if np.any(bad):
        raise DegenerateElementError(group.element_indices[bad], area[bad])

    h = np.sqrt(np.abs(area))
    cx = np.sum((x1 + x2) * cross, axis=1) / (6 * area)
    cy = np.sum((y1 + y2) * cross, axis=1) / (6 * area)

    # Edge vector rotated by -90 degrees
    normal_x = y2 - y1
    normal_y = x1 - x2

    h_col = h[:, None]
    Bx = (normal_x + np.roll(normal_x, 1, axis=1)) / (2 * h_col)
    By = (normal_y + np.roll(normal_y, 1, axis=1)) / (2 * h_col)

    Dx = (x1 - cx[:, None]) / h_col
    Dy = (y1 - cy[:, None]) / h_col

    return GroupGeometry(area=area, h=h, cx=cx, cy=cy,
                         normal_x=normal_x, normal_y=normal_y,
                         Bx=Bx, By=By, Dx=Dx, Dy=Dy)
