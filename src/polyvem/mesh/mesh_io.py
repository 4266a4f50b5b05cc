"""
Mesh I/O Functions
==================

Read and write polygon meshes through meshio.
"""

import numpy as np
import meshio
from typing import Dict, Optional
from .polygon_mesh import PolygonMesh


# meshio cell types that describe 2D polygons
_POLYGON_TYPES = ("triangle", "quad")


def _is_polygon_block(cell_type: str) -> bool:
    return cell_type in _POLYGON_TYPES or cell_type.startswith("polygon")


def read_mesh(filename: str) -> PolygonMesh:
    """
    Read a 2D polygon mesh file and return a PolygonMesh.

    Any format meshio understands is accepted (Gmsh, VTK, VTU, ...).
    Triangle, quad and polygon cell blocks all become polygon elements;
    lines, vertices and other cell types are ignored.

    Args:
        filename: path to mesh file

    Returns:
        PolygonMesh instance
    """
    mesh_data = meshio.read(filename)

    # Extract nodes, dropping z
    nodes = mesh_data.points[:, :2]

    elements = []
    for cell_block in mesh_data.cells:
        if _is_polygon_block(cell_block.type):
            elements.extend(list(row) for row in cell_block.data)

    if not elements:
        raise ValueError(f"No polygon elements found in mesh file {filename}")

    return PolygonMesh(nodes, elements)


def write_vtk(mesh: PolygonMesh, filename: str,
              point_data: Optional[Dict[str, np.ndarray]] = None) -> None:
    """
    Write polygon mesh and nodal fields for ParaView visualization.

    Elements are written in one cell block per vertex count, so the
    element order in the file is grouped by arity.

    Args:
        mesh: PolygonMesh instance
        filename: output filename (.vtk, .vtu, ...)
        point_data: dict of node-based scalar fields, e.g. the solution
    """
    points = np.column_stack([mesh.nodes, np.zeros(mesh.n_nodes)])

    cells = []
    for n_vertices in np.unique(mesh.vertex_counts):
        idx = np.flatnonzero(mesh.vertex_counts == n_vertices)
        block = np.array([mesh.elements[e] for e in idx], dtype=np.int64)
        if n_vertices == 3:
            cell_type = "triangle"
        elif n_vertices == 4:
            cell_type = "quad"
        else:
            cell_type = "polygon"
        cells.append((cell_type, block))

    meshio_mesh = meshio.Mesh(
        points=points,
        cells=cells,
        point_data=point_data or {},
    )
    meshio.write(filename, meshio_mesh)
