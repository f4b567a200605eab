"""
Utility functions.

Metrics computed over the records of a simulated run.
"""
from .metrics import (
    stack_run,
    compute_mse,
    compute_rmse,
    compute_nees,
    compute_nis,
    compute_symmetry_error,
    compute_min_eigenvalues,
    run_summary,
)

__all__ = [
    'stack_run',
    'compute_mse',
    'compute_rmse',
    'compute_nees',
    'compute_nis',
    'compute_symmetry_error',
    'compute_min_eigenvalues',
    'run_summary',
]
