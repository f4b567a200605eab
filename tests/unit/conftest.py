"""Shared pytest fixtures for unit tests."""

import numpy as np
import pytest

from kalmanlab.ssm import ConstantProcess, IdentityMeasurement, PendulumProcess, SineProjection


@pytest.fixture
def scalar_model():
    """Scalar random walk observed directly (Q=0.01, R=0.1)."""
    process = ConstantProcess(dim=1)
    measurement = IdentityMeasurement(dim=1)
    return {
        'process': process,
        'measurement': measurement,
        'Q': process.noise_covariance(0.01),
        'R': measurement.noise_covariance(0.1),
        'x0': np.array([0.0]),
        'P0': np.array([[1.0]]),
    }


@pytest.fixture
def pendulum_model():
    """Pendulum observed through sin(theta)."""
    process = PendulumProcess(g=9.81, dt=0.01)
    measurement = SineProjection(dim=2)
    return {
        'process': process,
        'measurement': measurement,
        'Q': process.noise_covariance(0.01),
        'R': measurement.noise_covariance(0.1),
        'x0': np.array([1.0, -0.1]),
        'P0': np.diag([0.5, 0.5]),
    }


@pytest.fixture
def random_spd():
    """Factory for random symmetric positive definite matrices."""
    def make(rng, n, scale=1.0):
        A = rng.standard_normal((n, n))
        return scale * (A @ A.T + n * np.eye(n))
    return make
