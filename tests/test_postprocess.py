"""
Tests for Postprocess Module
============================
"""

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from polyvem.mesh.mesh_generators import (
    create_unit_square_element, create_rectangle_quad_mesh
)
from polyvem.assembly.global_assembly import assemble_stiffness
from polyvem.postprocess.error_norms import (
    interpolate, energy_error, max_nodal_error, convergence_rates,
    ConvergenceStudy
)


class TestErrorNorms:
    """Tests for discrete error measures."""

    def test_interpolate(self):
        mesh = create_unit_square_element()
        assert np.allclose(interpolate(mesh, lambda p: p[:, 0]), [0, 1, 1, 0])

    def test_energy_error_zero(self):
        """Identical vectors have zero error."""
        mesh = create_rectangle_quad_mesh(1, 1, 3, 3)
        A = assemble_stiffness(mesh)
        u = np.sin(mesh.nodes[:, 0])

        assert energy_error(A, u, u) == 0.0

    def test_energy_error_ignores_constants(self):
        """A constant shift lies in the kernel of A."""
        mesh = create_rectangle_quad_mesh(1, 1, 3, 3)
        A = assemble_stiffness(mesh)
        u = mesh.nodes[:, 1].copy()

        assert np.isclose(energy_error(A, u + 2.0, u), 0.0, atol=1e-7)

    def test_energy_error_unit_square(self):
        """Checkerboard mode on the unit square: e^T K e = 4."""
        mesh = create_unit_square_element()
        A = assemble_stiffness(mesh)
        e = np.array([1.0, -1.0, 1.0, -1.0])

        assert np.isclose(energy_error(A, e, np.zeros(4)), 2.0)

    def test_max_nodal_error(self):
        assert np.isclose(max_nodal_error(np.array([1.0, 2.0]),
                                          np.array([1.5, 1.0])), 1.0)


class TestConvergenceRates:
    """Tests for observed rates."""

    def test_second_order(self):
        rates = convergence_rates([1.0, 0.5, 0.25], [1.0, 0.25, 0.0625])
        assert np.allclose(rates, [2.0, 2.0])

    def test_first_order(self):
        rates = convergence_rates([0.1, 0.05], [3.0, 1.5])
        assert np.allclose(rates, [1.0])

    def test_single_value(self):
        assert len(convergence_rates([1.0], [1.0])) == 0

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            convergence_rates([1.0, 0.5], [1.0])


class TestConvergenceStudy:
    """Tests for ConvergenceStudy."""

    @pytest.fixture
    def study(self):
        study = ConvergenceStudy()
        for h, n, e in [(1.0, 9, 1.0), (0.5, 25, 0.5), (0.25, 81, 0.25)]:
            study.add_record(h, n, e, e ** 2)
        return study

    def test_arrays(self, study):
        arrays = study.get_arrays()
        assert np.array_equal(arrays['n_nodes'], [9, 25, 81])
        assert np.allclose(arrays['energy'], [1.0, 0.5, 0.25])

    def test_rates(self, study):
        rates = study.rates()
        assert np.allclose(rates['energy'], [1.0, 1.0])
        assert np.allclose(rates['max'], [2.0, 2.0])

    def test_summary(self, study):
        lines = study.summary().splitlines()
        assert len(lines) == 4
        assert "energy err" in lines[0]
        assert "2.00" in lines[-1]

    def test_add_solution(self):
        """Exact nodal values give zero error."""
        mesh = create_rectangle_quad_mesh(1, 1, 2, 2)
        A = assemble_stiffness(mesh)
        exact = lambda p: p[:, 0] * p[:, 1]

        study = ConvergenceStudy()
        study.add_solution(mesh, 0.5, A, exact(mesh.nodes), exact)

        assert study.records[0].max_error == 0.0
        assert study.records[0].energy_error == 0.0
        assert study.records[0].n_nodes == 9


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
