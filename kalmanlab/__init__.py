"""
kalmanlab: recursive Bayesian state estimation demos.

This package contains implementations of:
- Deterministic noise streams
- State space models (random walk, pendulum)
- Kalman and extended Kalman filtering
- Trajectory simulation producing per-step estimation records
- Scalar Gaussian belief algebra and run metrics
"""
import logging

from .exceptions import (
    KalmanLabError,
    ConfigurationError,
    SingularInnovationError,
    NumericDriftWarning,
)
from .noise import NoiseSource
from .ssm import (
    ProcessModel,
    MeasurementModel,
    ConstantProcess,
    IdentityMeasurement,
    PendulumProcess,
    SineProjection,
)
from .filters import KalmanEstimator, StepResult, kalman_filter
from .config import SimulationConfig, constant_demo, pendulum_demo
from .simulator import EstimationRecord, TrajectorySimulator, chart_rows, simulate

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # errors
    'KalmanLabError',
    'ConfigurationError',
    'SingularInnovationError',
    'NumericDriftWarning',
    # noise
    'NoiseSource',
    # models
    'ProcessModel',
    'MeasurementModel',
    'ConstantProcess',
    'IdentityMeasurement',
    'PendulumProcess',
    'SineProjection',
    # filtering
    'KalmanEstimator',
    'StepResult',
    'kalman_filter',
    # simulation
    'SimulationConfig',
    'constant_demo',
    'pendulum_demo',
    'EstimationRecord',
    'TrajectorySimulator',
    'chart_rows',
    'simulate',
]
