"""
Postprocessing Module
=====================

Error norms and convergence studies.
"""

from .error_norms import (
    interpolate,
    energy_error,
    max_nodal_error,
    convergence_rates,
    ErrorRecord,
    ConvergenceStudy,
)

__all__ = [
    "interpolate",
    "energy_error",
    "max_nodal_error",
    "convergence_rates",
    "ErrorRecord",
    "ConvergenceStudy",
]
