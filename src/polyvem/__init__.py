"""
polyvem
=======

Lowest-order virtual element method for the Poisson equation on meshes
of arbitrary simple polygons.

Modules:
    mesh: Polygon mesh, generators and meshio-based I/O
    elements: Grouping by vertex count, geometry, projection, local stiffness
    assembly: Global sparse assembly, boundary detection, Dirichlet conditions
    solvers: Poisson solver and reduced linear solve
    postprocess: Error norms and convergence studies
"""

from . import errors
from .log_config import verbose_logging
from . import mesh
from . import elements
from . import assembly
from . import solvers
from . import postprocess

from .mesh import PolygonMesh
from .solvers import PoissonVEMSolver, SolverConfig, VEMSolution, solve_poisson

__version__ = "0.1.0"
__all__ = ["errors", "mesh", "elements", "assembly", "solvers", "postprocess",
           "PolygonMesh", "PoissonVEMSolver", "SolverConfig", "VEMSolution",
           "solve_poisson", "verbose_logging"]
