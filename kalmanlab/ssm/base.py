"""Capability contracts shared by process and measurement models."""
import numpy as np


class ProcessModel:
    """Dynamics model: ground-truth propagation plus the filter's linearization.

    Subclasses set `state_dim`, `noise_dim`, `state_labels` and `linear`, and
    implement `advance`, `jacobian` and `noise_covariance`.

    Parameters
    ----------
    dt : float
        Time step used by `transition` and `jacobian`
    """

    state_dim = None
    noise_dim = None
    state_labels = ()
    linear = False

    def __init__(self, dt):
        self.dt = dt

    def advance(self, x, dt, noise_sample):
        """Propagate state `x` by `dt` with the given noise sample."""
        raise NotImplementedError

    def transition(self, x):
        """Noise-free one-step propagation (the filter's f)."""
        return self.advance(x, self.dt, np.zeros(self.noise_dim))

    def jacobian(self, x):
        """State transition Jacobian F evaluated at `x`."""
        raise NotImplementedError

    def noise_covariance(self, q):
        """Per-step process noise covariance Q [n_x, n_x] for intensity `q`."""
        raise NotImplementedError


class MeasurementModel:
    """Observation model: synthesizes observations and supplies H."""

    obs_dim = None
    noise_dim = None
    linear = False

    def observe(self, x, noise_sample):
        """Observation of state `x` corrupted by `noise_sample`."""
        raise NotImplementedError

    def predict_observation(self, x):
        """Noise-free observation (the filter's h)."""
        return self.observe(x, np.zeros(self.noise_dim))

    def jacobian(self, x):
        """Observation Jacobian H [n_y, n_x] evaluated at `x`."""
        raise NotImplementedError

    def noise_covariance(self, r):
        """Observation noise covariance R [n_y, n_y] for variance `r`."""
        raise NotImplementedError
