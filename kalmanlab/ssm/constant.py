"""Random-walk dynamics with direct (identity) observations."""
import numpy as np

from .base import ProcessModel, MeasurementModel


class ConstantProcess(ProcessModel):
    """Random walk x' = x + w, w ~ N(0, q I).

    Parameters
    ----------
    dim : int
        State dimension (1 for the scalar demo)
    dt : float
        Time step; only sets the record timestamps, the walk itself ignores it
    """

    linear = True

    def __init__(self, dim=1, dt=1.0):
        super().__init__(dt)
        self.state_dim = dim
        self.noise_dim = dim
        self.state_labels = ('x',) if dim == 1 else tuple(f'x{i}' for i in range(dim))
        self.F = np.eye(dim)

    def advance(self, x, dt, noise_sample):
        return np.asarray(x, dtype=float) + np.asarray(noise_sample, dtype=float)

    def transition(self, x):
        return np.asarray(x, dtype=float).copy()

    def jacobian(self, x):
        """State transition Jacobian (constant identity)."""
        return self.F

    def noise_covariance(self, q):
        return q * np.eye(self.state_dim)


class IdentityMeasurement(MeasurementModel):
    """Full observation z = x + v, v ~ N(0, r I)."""

    linear = True

    def __init__(self, dim=1):
        self.dim = dim
        self.obs_dim = dim
        self.noise_dim = dim
        self.H = np.eye(dim)

    def observe(self, x, noise_sample):
        return np.asarray(x, dtype=float) + np.asarray(noise_sample, dtype=float)

    def jacobian(self, x):
        return self.H

    def noise_covariance(self, r):
        return r * np.eye(self.obs_dim)
