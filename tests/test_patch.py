"""
Patch Test for the Virtual Element Method
=========================================

This test verifies that affine solutions are reproduced exactly on
arbitrary polygonal meshes. It is the fundamental validation test for
any lowest-order VEM implementation.

Theory:
-------
For an affine exact solution
    u = a + b*x + c*y
we have -Δu = 0. With zero source and boundary data taken from u, the
consistency part of the local form is exact for linear polynomials and
the stability part vanishes on them, so the discrete solution equals
the nodal values of u at every node.

Test Cases:
-----------
1. Structured quadrilaterals
2. Mixed triangles, quadrilaterals, pentagons and hexagons
3. Hexagon surrounded by quadrilaterals
4. Quadrilaterals with randomly perturbed interior nodes

Pass Criteria:
--------------
All nodal values must match the affine function up to solver tolerance
"""

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from polyvem.mesh.mesh_generators import (
    create_rectangle_quad_mesh,
    create_mixed_polygon_mesh,
    create_hexagon_patch,
    create_unit_square_element,
    perturb_interior_nodes,
)
from polyvem.elements.grouping import group_elements
from polyvem.elements.geometry import compute_group_geometry
from polyvem.elements.projection import build_i_minus_pi
from polyvem.solvers.poisson_solver import PoissonVEMSolver, SolverConfig


# =============================================================================
# Test Case Definitions
# =============================================================================

AFFINE_CASES = {
    'constant': (2.5, 0.0, 0.0),
    'x_only': (0.0, 1.0, 0.0),
    'y_only': (0.0, 0.0, -3.0),
    'general': (1.0, 2.0, -3.0),
}

MESHES = {
    'quads': lambda: create_rectangle_quad_mesh(1, 1, 5, 5),
    'mixed': lambda: create_mixed_polygon_mesh(6),
    'hexagon': create_hexagon_patch,
    'perturbed_quads': lambda: perturb_interior_nodes(
        create_rectangle_quad_mesh(2, 1, 8, 4), magnitude=0.3, seed=42),
    'perturbed_mixed': lambda: perturb_interior_nodes(
        create_mixed_polygon_mesh(6), magnitude=0.1, seed=7),
}


# =============================================================================
# Helper Functions
# =============================================================================

def affine(a: float, b: float, c: float):
    """Return evaluator of u = a + b*x + c*y."""
    def u(p):
        return a + b * p[:, 0] + c * p[:, 1]
    return u


def zero_source(p):
    return np.zeros(len(p))


# =============================================================================
# Tests
# =============================================================================

class TestAffinePatch:
    """Affine solutions are reproduced exactly."""

    @pytest.mark.parametrize("mesh_name", sorted(MESHES))
    @pytest.mark.parametrize("case", sorted(AFFINE_CASES))
    def test_affine_reproduction(self, mesh_name, case):
        mesh = MESHES[mesh_name]()
        exact = affine(*AFFINE_CASES[case])

        solution = PoissonVEMSolver(mesh).solve(zero_source, exact)

        assert np.allclose(solution.u, exact(mesh.nodes), atol=1e-10), \
            f"{mesh_name}/{case}: max error {np.max(np.abs(solution.u - exact(mesh.nodes))):.2e}"

    @pytest.mark.parametrize("mesh_name", ['mixed', 'perturbed_quads'])
    def test_affine_reproduction_cg(self, mesh_name):
        """Same result with the iterative solver."""
        mesh = MESHES[mesh_name]()
        exact = affine(*AFFINE_CASES['general'])

        config = SolverConfig(linear_solver='cg', rtol=1e-12)
        solution = PoissonVEMSolver(mesh, config).solve(zero_source, exact)

        assert np.allclose(solution.u, exact(mesh.nodes), atol=1e-8)


class TestConsistencyLaw:
    """(I - Π) maps the constant vector to zero on every element."""

    @pytest.mark.parametrize("mesh_name", sorted(MESHES))
    def test_every_element(self, mesh_name):
        mesh = MESHES[mesh_name]()
        groups, _ = group_elements(mesh)

        checked = 0
        for group in groups:
            i_minus_pi = build_i_minus_pi(compute_group_geometry(group))
            row_sums = np.sum(i_minus_pi, axis=2)
            assert np.allclose(row_sums, 0, atol=1e-12)
            checked += group.n_elements

        assert checked == mesh.n_elements


class TestSingleElement:
    """Single unit-square element."""

    def test_zero_data_gives_zero(self):
        """Zero source and zero boundary data give the zero vector."""
        mesh = create_unit_square_element()
        solution = PoissonVEMSolver(mesh).solve(zero_source, lambda p: np.zeros(len(p)))

        assert np.array_equal(solution.u, np.zeros(4))
        assert len(solution.partition.free_nodes) == 0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
