"""
Tests for Mesh Module
=====================
"""

import meshio
import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from polyvem.errors import InvalidElementError
from polyvem.mesh.polygon_mesh import PolygonMesh
from polyvem.mesh.mesh_io import read_mesh, write_vtk
from polyvem.mesh.mesh_generators import (
    create_rectangle_quad_mesh, create_unit_square_element,
    create_two_square_patch, create_mixed_polygon_mesh,
    create_hexagon_patch, perturb_interior_nodes
)


class TestPolygonMesh:
    """Tests for PolygonMesh class."""

    def test_unit_square(self):
        """Single element - verify counts."""
        mesh = create_unit_square_element()

        assert mesh.n_nodes == 4
        assert mesh.n_elements == 1
        assert np.array_equal(mesh.vertex_counts, [4])
        assert mesh.n_local_entries == 16

    def test_variable_arity(self):
        """Elements with different vertex counts in one mesh."""
        nodes = np.array([[0, 0], [1, 0], [2, 0], [0, 1], [1, 1], [1.5, 1.5]],
                         dtype=float)
        elements = [[0, 1, 4, 3], [1, 2, 4]]
        mesh = PolygonMesh(nodes, elements)

        assert np.array_equal(mesh.vertex_counts, [4, 3])
        assert mesh.n_local_entries == 16 + 9
        assert np.array_equal(mesh.element_offsets, [0, 4, 7])
        assert np.array_equal(mesh.element_nodes, [0, 1, 4, 3, 1, 2, 4])

    def test_oriented_edges(self):
        """Sides run from vertex i to i+1, wrapping around."""
        mesh = create_two_square_patch()
        edges = mesh.oriented_edges()

        expected = [[0, 1], [1, 4], [4, 3], [3, 0],
                    [1, 2], [2, 5], [5, 4], [4, 1]]
        assert np.array_equal(edges, expected)

    def test_one_based_input(self):
        """1-based numbering is shifted to 0-based."""
        nodes = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float)
        mesh0 = PolygonMesh(nodes, [[0, 1, 2, 3]])
        mesh1 = PolygonMesh(nodes, [[1, 2, 3, 4]], index_base=1)

        assert np.array_equal(mesh0.elements[0], mesh1.elements[0])

    def test_invalid_element(self):
        """Fewer than 3 vertices is rejected with the element index."""
        nodes = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float)
        with pytest.raises(InvalidElementError) as exc_info:
            PolygonMesh(nodes, [[0, 1, 2, 3], [0, 2]])

        assert exc_info.value.element_index == 1
        assert exc_info.value.n_vertices == 2

    def test_index_out_of_range(self):
        """Node indices must reference existing nodes."""
        nodes = np.array([[0, 0], [1, 0], [0, 1]], dtype=float)
        with pytest.raises(ValueError):
            PolygonMesh(nodes, [[0, 1, 3]])

    def test_bad_node_shape(self):
        """Nodes must be two-dimensional points."""
        with pytest.raises(ValueError):
            PolygonMesh(np.zeros((4, 3)), [[0, 1, 2]])

    def test_nodes_read_only(self):
        """Node coordinates cannot be modified after construction."""
        mesh = create_unit_square_element()
        with pytest.raises(ValueError):
            mesh.nodes[0, 0] = 5.0

    def test_area_and_centroid(self):
        """Shoelace area and polygon centroid."""
        mesh = create_two_square_patch()

        assert np.allclose(mesh.element_areas(), [1.0, 1.0])
        assert np.allclose(mesh.element_centroids(), [[0.5, 0.5], [1.5, 0.5]])

    def test_signed_area_clockwise(self):
        """Clockwise elements have negative area."""
        nodes = np.array([[0, 0], [1, 0], [0, 1]], dtype=float)
        mesh = PolygonMesh(nodes, [[0, 2, 1]])

        assert np.isclose(mesh.element_areas()[0], -0.5)

    def test_orient_counterclockwise(self):
        """Clockwise elements are reversed, others kept."""
        nodes = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float)
        mesh = PolygonMesh(nodes, [[0, 1, 2], [0, 3, 2]])
        fixed = mesh.orient_counterclockwise()

        assert np.array_equal(fixed.elements[0], [0, 1, 2])
        assert np.array_equal(fixed.elements[1], [2, 3, 0])
        assert np.all(fixed.element_areas() > 0)

    def test_nodes_in_region(self):
        """Region query on node coordinates."""
        mesh = create_rectangle_quad_mesh(1, 1, 4, 4)
        bottom = mesh.get_nodes_in_region(lambda x, y: y < 1e-8)
        assert len(bottom) == 5


class TestMeshGenerators:
    """Tests for mesh generators."""

    def test_rectangle_quad_mesh(self):
        """Structured quad mesh has correct counts and areas."""
        Lx, Ly, nx, ny = 2.0, 3.0, 4, 6
        mesh = create_rectangle_quad_mesh(Lx, Ly, nx, ny)

        assert mesh.n_nodes == (nx + 1) * (ny + 1)
        assert mesh.n_elements == nx * ny
        assert np.allclose(mesh.element_areas(), Lx * Ly / (nx * ny))

    def test_mixed_polygon_mesh(self):
        """Mixed mesh contains triangles up to hexagons and tiles the square."""
        mesh = create_mixed_polygon_mesh(4)

        assert set(mesh.vertex_counts.tolist()) == {3, 4, 5, 6}
        assert mesh.n_elements == 20
        assert mesh.n_nodes == 25 + 6
        areas = mesh.element_areas()
        assert np.all(areas > 0)
        assert np.isclose(np.sum(areas), 1.0)

    def test_mixed_polygon_mesh_too_small(self):
        with pytest.raises(ValueError):
            create_mixed_polygon_mesh(1)

    def test_hexagon_patch(self):
        """Hexagon patch covers the outer hexagon."""
        mesh = create_hexagon_patch(radius=1.0)

        assert mesh.n_elements == 7
        assert mesh.vertex_counts[0] == 6
        areas = mesh.element_areas()
        assert np.all(areas > 0)
        assert np.isclose(np.sum(areas), 6 * np.sqrt(3))

    def test_perturb_interior_nodes(self):
        """Only interior nodes move."""
        mesh = create_rectangle_quad_mesh(1, 1, 4, 4)
        perturbed = perturb_interior_nodes(mesh, magnitude=0.2, seed=3)

        moved = np.any(perturbed.nodes != mesh.nodes, axis=1)
        on_boundary = ((mesh.nodes[:, 0] < 1e-12) | (mesh.nodes[:, 0] > 1 - 1e-12) |
                       (mesh.nodes[:, 1] < 1e-12) | (mesh.nodes[:, 1] > 1 - 1e-12))
        assert not np.any(moved[on_boundary])
        assert np.all(moved[~on_boundary])
        assert np.isclose(np.sum(perturbed.element_areas()), 1.0)


class TestMeshIO:
    """Tests for meshio-based reading and writing."""

    def test_write_read_round_trip(self, tmp_path):
        """Quad mesh survives a VTU round trip."""
        mesh = create_rectangle_quad_mesh(1, 1, 3, 2)
        filename = str(tmp_path / "quads.vtu")

        write_vtk(mesh, filename, point_data={"u": mesh.nodes[:, 0].copy()})
        loaded = read_mesh(filename)

        assert np.allclose(loaded.nodes, mesh.nodes)
        assert loaded.n_elements == mesh.n_elements
        for a, b in zip(loaded.elements, mesh.elements):
            assert np.array_equal(a, b)

    def test_read_mixed_cells(self, tmp_path):
        """Triangle and quad blocks are both read as polygons."""
        points = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0], [2, 0, 0]],
                          dtype=float)
        cells = [("quad", np.array([[0, 1, 2, 3]])),
                 ("triangle", np.array([[1, 4, 2]]))]
        filename = str(tmp_path / "mixed.vtu")
        meshio.write(filename, meshio.Mesh(points, cells))

        loaded = read_mesh(filename)
        assert sorted(loaded.vertex_counts.tolist()) == [3, 4]

    def test_read_without_polygons(self, tmp_path):
        """Files without polygon cells are rejected."""
        points = np.array([[0, 0, 0], [1, 0, 0]], dtype=float)
        filename = str(tmp_path / "lines.vtu")
        meshio.write(filename, meshio.Mesh(points, [("line", np.array([[0, 1]]))]))

        with pytest.raises(ValueError):
            read_mesh(filename)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
