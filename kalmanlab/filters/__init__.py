"""Filtering algorithm implementations."""
from .kf import kalman_filter, kf_predict, kf_update
from .estimator import KalmanEstimator, StepResult
from .common import (
    joseph_update,
    standard_update,
    symmetrize,
    invert_innovation,
    covariance_drift,
    is_drifted,
    repair_covariance,
    is_psd,
)

__all__ = [
    # Main filters
    'kalman_filter',
    'KalmanEstimator',
    'StepResult',
    # Components
    'kf_predict',
    'kf_update',
    # Utilities
    'joseph_update',
    'standard_update',
    'symmetrize',
    'invert_innovation',
    'covariance_drift',
    'is_drifted',
    'repair_covariance',
    'is_psd',
]
