"""
Assembly Module
===============

Global matrix assembly, boundary detection and Dirichlet conditions.
"""

from .global_assembly import (
    AssembledSystem,
    assemble_system,
    assemble_stiffness,
)
from .boundary import (
    BoundaryPartition,
    edge_incidence,
    classify_boundary,
    get_free_nodes,
    apply_dirichlet,
)

__all__ = [
    "AssembledSystem",
    "assemble_system",
    "assemble_stiffness",
    "BoundaryPartition",
    "edge_incidence",
    "classify_boundary",
    "get_free_nodes",
    "apply_dirichlet",
]
