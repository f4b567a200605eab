"""Simple pendulum state space model."""
import numpy as np

from .base import ProcessModel, MeasurementModel

GRAVITY = 9.81


class PendulumProcess(ProcessModel):
    """Nonlinear pendulum d^2 theta/dt^2 = -g sin(theta), explicit Euler step.

    State: [theta, omega] - angle and angular velocity

    Continuous white noise on the angular acceleration is discretized by
    Euler-Maruyama: the noise sample is scaled by sqrt(dt) and added to omega.

    Parameters
    ----------
    g : float
        Gravitational constant (pendulum length folded in)
    dt : float
        Integration time step
    """

    state_dim = 2
    noise_dim = 1
    state_labels = ('angle', 'angular_velocity')
    linear = False

    def __init__(self, g=GRAVITY, dt=0.01):
        super().__init__(dt)
        self.g = g

    def advance(self, x, dt, noise_sample):
        """Euler step; theta uses the pre-step omega.

        Parameters
        ----------
        x : ndarray [2]
            State [theta, omega]
        dt : float
            Time step
        noise_sample : float or ndarray [1]
            Angular acceleration noise draw

        Returns
        -------
        ndarray [2]
        """
        theta, omega = x[0], x[1]
        w = float(np.ravel(noise_sample)[0])
        omega_next = omega - self.g * np.sin(theta) * dt + w * np.sqrt(dt)
        theta_next = theta + omega * dt
        return np.array([theta_next, omega_next])

    def jacobian(self, x):
        """d[theta', omega']/d[theta, omega] at the estimate."""
        dt = self.dt
        return np.array([
            [1.0, dt],
            [-self.g * np.cos(x[0]) * dt, 1.0]
        ])

    def noise_covariance(self, q):
        # Noise enters omega only, with variance q * dt
        return np.array([
            [0.0, 0.0],
            [0.0, q * self.dt]
        ])


class SineProjection(MeasurementModel):
    """Horizontal projection z = sin(theta) + v of an angle state.

    Only one component is observed, so the 2-D pendulum state is partially
    observable.

    Parameters
    ----------
    dim : int
        State dimension
    index : int
        Index of the angle component
    """

    obs_dim = 1
    noise_dim = 1
    linear = False

    def __init__(self, dim=2, index=0):
        self.dim = dim
        self.index = index

    def observe(self, x, noise_sample):
        v = float(np.ravel(noise_sample)[0])
        return np.array([np.sin(x[self.index]) + v])

    def jacobian(self, x):
        H = np.zeros((1, self.dim))
        H[0, self.index] = np.cos(x[self.index])
        return H

    def noise_covariance(self, r):
        return np.array([[r]])
