"""
Mesh Generators
===============

Simple polygon mesh generators for testing and benchmarks.
"""

import numpy as np
from typing import Optional
from .polygon_mesh import PolygonMesh


def create_rectangle_quad_mesh(Lx: float, Ly: float,
                               nx: int, ny: int) -> PolygonMesh:
    """
    Create structured quadrilateral mesh on rectangle [0, Lx] × [0, Ly].

    Args:
        Lx, Ly: domain dimensions
        nx, ny: number of divisions in x and y

    Returns:
        PolygonMesh instance with nx*ny four-vertex elements
    """
    xs = np.linspace(0.0, Lx, nx + 1)
    ys = np.linspace(0.0, Ly, ny + 1)
    X, Y = np.meshgrid(xs, ys)
    nodes = np.column_stack([X.ravel(), Y.ravel()])

    def node_idx(i, j):
        return j * (nx + 1) + i

    elements = []
    for j in range(ny):
        for i in range(nx):
            elements.append([node_idx(i, j), node_idx(i + 1, j),
                             node_idx(i + 1, j + 1), node_idx(i, j + 1)])

    return PolygonMesh(nodes, np.array(elements))


def create_unit_square_element() -> PolygonMesh:
    """
    Create mesh with a single unit-square element.

    Useful for unit testing.

    Returns:
        PolygonMesh instance
    """
    nodes = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
    return PolygonMesh(nodes, [[0, 1, 2, 3]])


def create_two_square_patch() -> PolygonMesh:
    """
    Create mesh with two unit squares sharing the edge x = 1.

    Returns:
        PolygonMesh instance
    """
    nodes = np.array([
        [0.0, 0.0],
        [1.0, 0.0],
        [2.0, 0.0],
        [0.0, 1.0],
        [1.0, 1.0],
        [2.0, 1.0],
    ])
    elements = [
        [0, 1, 4, 3],
        [1, 2, 5, 4],
    ]
    return PolygonMesh(nodes, elements)


def create_mixed_polygon_mesh(n: int, L: float = 1.0) -> PolygonMesh:
    """
    Create a conforming mesh of mixed polygons on [0, L] × [0, L].

    Starts from an n × n grid of squares. Interior horizontal edges of
    every even column (except the last) get a midpoint node, turning those
    cells into pentagons (first and last row) and hexagons. The last
    column is split into triangles; the remaining cells stay
    quadrilaterals.

    Args:
        n: number of divisions per side, n >= 2
        L: side length

    Returns:
        PolygonMesh instance
    """
    if n < 2:
        raise ValueError(f"n must be at least 2, got {n}")

    dx = L / n
    nodes = [[i * dx, j * dx] for j in range(n + 1) for i in range(n + 1)]

    def node_idx(i, j):
        return j * (n + 1) + i

    def is_split(i):
        return i % 2 == 0 and i != n - 1

    # Midpoints of split horizontal edges, keyed by (column, row)
    midpoint_idx = {}
    for j in range(1, n):
        for i in range(n):
            if is_split(i):
                midpoint_idx[(i, j)] = len(nodes)
                nodes.append([(i + 0.5) * dx, j * dx])

    elements = []
    for j in range(n):
        for i in range(n):
            n00 = node_idx(i, j)
            n10 = node_idx(i + 1, j)
            n11 = node_idx(i + 1, j + 1)
            n01 = node_idx(i, j + 1)

            if i == n - 1:
                elements.append([n00, n10, n11])
                elements.append([n00, n11, n01])
                continue

            polygon = [n00]
            if (i, j) in midpoint_idx:
                polygon.append(midpoint_idx[(i, j)])
            polygon.extend([n10, n11])
            if (i, j + 1) in midpoint_idx:
                polygon.append(midpoint_idx[(i, j + 1)])
            polygon.append(n01)
            elements.append(polygon)

    return PolygonMesh(np.array(nodes), elements)


def create_hexagon_patch(radius: float = 1.0) -> PolygonMesh:
    """
    Create a regular hexagon surrounded by six quadrilaterals.

    The central hexagon is the only element without boundary vertices,
    so its six vertices are the free nodes of the patch.

    Args:
        radius: circumradius of the inner hexagon; the outer ring has
            twice this radius

    Returns:
        PolygonMesh instance with 7 elements
    """
    angles = np.pi / 3 * np.arange(6)
    inner = radius * np.column_stack([np.cos(angles), np.sin(angles)])
    outer = 2.0 * inner
    nodes = np.vstack([inner, outer])

    elements = [list(range(6))]
    for k in range(6):
        k1 = (k + 1) % 6
        elements.append([k, 6 + k, 6 + k1, k1])

    return PolygonMesh(nodes, elements)


def create_nonmanifold_fan() -> PolygonMesh:
    """
    Create three triangles sharing the single edge (0, 1).

    This is not a valid mesh; it is used to exercise topology checks.

    Returns:
        PolygonMesh instance
    """
    nodes = np.array([
        [0.0, 0.0],
        [1.0, 0.0],
        [0.5, 1.0],
        [0.5, -1.0],
        [0.3, 2.0],
    ])
    elements = [
        [0, 1, 2],
        [1, 0, 3],
        [0, 1, 4],
    ]
    return PolygonMesh(nodes, elements)


def perturb_interior_nodes(mesh: PolygonMesh, magnitude: float = 0.1,
                           seed: Optional[int] = None) -> PolygonMesh:
    """
    Randomly perturb interior nodes for patch test verification.

    Args:
        mesh: input mesh
        magnitude: perturbation magnitude as fraction of the smallest
            element scale sqrt(|area|)
        seed: random seed for reproducibility

    Returns:
        New PolygonMesh with perturbed nodes
    """
    from ..assembly.boundary import classify_boundary

    rng = np.random.default_rng(seed)

    min_scale = np.min(np.sqrt(np.abs(mesh.element_areas())))
    pert = magnitude * min_scale

    partition = classify_boundary(mesh.oriented_edges(), mesh.n_nodes)

    new_nodes = mesh.nodes.copy()
    free = partition.free_nodes
    new_nodes[free] += rng.uniform(-pert, pert, size=(len(free), 2))

    return PolygonMesh(new_nodes, [elem.copy() for elem in mesh.elements])
