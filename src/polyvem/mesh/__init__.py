"""
Mesh Module
===========

Polygon mesh with variable-arity elements.
"""

from .polygon_mesh import PolygonMesh
from .mesh_io import read_mesh, write_vtk
from .mesh_generators import (
    create_rectangle_quad_mesh,
    create_unit_square_element,
    create_two_square_patch,
    create_mixed_polygon_mesh,
    create_hexagon_patch,
    create_nonmanifold_fan,
    perturb_interior_nodes,
)

__all__ = [
    "PolygonMesh",
    "read_mesh",
    "write_vtk",
    "create_rectangle_quad_mesh",
    "create_unit_square_element",
    "create_two_square_patch",
    "create_mixed_polygon_mesh",
    "create_hexagon_patch",
    "create_nonmanifold_fan",
    "perturb_interior_nodes",
]
