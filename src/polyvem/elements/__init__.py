"""
Elements Module
===============

Batched virtual element kernels: grouping by vertex count, geometry,
projection and local stiffness.
"""

from .grouping import ElementGroup, group_elements, triplet_offsets
from .geometry import GroupGeometry, compute_group_geometry
from .projection import projection_correction, build_i_minus_pi, consistency_residual
from .local_stiffness import (
    GroupContribution,
    local_stiffness,
    local_load,
    evaluate_source,
    compute_group,
)

__all__ = [
    "ElementGroup",
    "group_elements",
    "triplet_offsets",
    "GroupGeometry",
    "compute_group_geometry",
    "projection_correction",
    "build_i_minus_pi",
    "consistency_residual",
    "GroupContribution",
    "local_stiffness",
    "local_load",
    "evaluate_source",
    "compute_group",
]
