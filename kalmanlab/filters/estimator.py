"""Stateful Kalman estimator owning the estimate and covariance of one run."""
import logging
import warnings
from dataclasses import dataclass

import numpy as np

from .common import covariance_drift, is_drifted, repair_covariance, symmetrize
from .kf import kf_predict, kf_update
from ..exceptions import ConfigurationError, NumericDriftWarning

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class StepResult:
    """Predicted and updated moments of one predict/update cycle."""
    step: int
    x_pred: np.ndarray
    P_pred: np.ndarray
    x: np.ndarray
    P: np.ndarray
    innovation: np.ndarray
    S: np.ndarray
    K: np.ndarray


def _as_matrix(name, value, shape):
    arr = np.atleast_2d(np.asarray(value, dtype=float))
    if arr.shape != shape:
        raise ConfigurationError(f"{name} has shape {arr.shape}, expected {shape}")
    if not np.all(np.isfinite(arr)):
        raise ConfigurationError(f"{name} contains non-finite entries")
    return arr


def _check_covariance(name, M, tol=1e-9):
    if not np.allclose(M, M.T, atol=tol):
        raise ConfigurationError(f"{name} must be symmetric")
    if np.linalg.eigvalsh(symmetrize(M)).min() < -tol:
        raise ConfigurationError(f"{name} must be positive semi-definite")


class KalmanEstimator:
    """
    Predict/update recursion over a process/measurement model pair.

    Linear model pairs give the standard KF; nonlinear ones are linearized at
    the running estimate (EKF). Step 0 starts from (x0, P0) directly.

    Parameters
    ----------
    process : ProcessModel
        Dynamics model (transition + Jacobian)
    measurement : MeasurementModel
        Observation model (predicted observation + Jacobian)
    Q : ndarray [n_x, n_x]
        Process noise covariance (symmetric PSD, may be zero)
    R : ndarray [n_y, n_y]
        Observation noise covariance (symmetric PSD, may be zero)
    x0 : ndarray [n_x]
        Initial estimate
    P0 : ndarray [n_x, n_x]
        Initial covariance
    joseph : bool
        Use Joseph form instead of P_pred - K H P_pred
    symmetrize : bool
        Return 0.5 * (P + P') after every update
    drift_tolerance : float
        Asymmetry / negative-eigenvalue tolerance before NumericDriftWarning
    singular_eps : float
        Minimum admissible |det(S)|
    """

    def __init__(self, process, measurement, Q, R, x0, P0, joseph=False, symmetrize=True,
                 drift_tolerance=1e-9, singular_eps=1e-12):
        n_x, n_y = process.state_dim, measurement.obs_dim

        x0 = np.atleast_1d(np.asarray(x0, dtype=float))
        if x0.shape != (n_x,):
            raise ConfigurationError(f"x0 has shape {x0.shape}, expected ({n_x},)")
        if getattr(measurement, 'dim', n_x) != n_x:
            raise ConfigurationError(
                f"Measurement model expects state dimension {measurement.dim}, process has {n_x}"
            )

        self.Q = _as_matrix('Q', Q, (n_x, n_x))
        self.R = _as_matrix('R', R, (n_y, n_y))
        P0 = _as_matrix('P0', P0, (n_x, n_x))
        _check_covariance('Q', self.Q)
        _check_covariance('R', self.R)
        _check_covariance('P0', P0)

        self.process = process
        self.measurement = measurement
        self.joseph = joseph
        self.symmetrize = symmetrize
        self.drift_tolerance = drift_tolerance
        self.singular_eps = singular_eps

        self._x = x0.copy()
        self._P = P0.copy()
        self._x_pred = None
        self._P_pred = None
        self._step = 0

    @property
    def x(self):
        """Current estimate (copy)."""
        return self._x.copy()

    @property
    def P(self):
        """Current covariance (copy)."""
        return self._P.copy()

    @property
    def steps_completed(self):
        return self._step

    def predict(self):
        """
        Propagate the estimate through the process model.

        Returns
        -------
        x_pred : ndarray [n_x]
        P_pred : ndarray [n_x, n_x]
        """
        self._x_pred, self._P_pred = kf_predict(
            self._x, self._P, self.process.transition, self.process.jacobian, self.Q
        )
        return self._x_pred.copy(), self._P_pred.copy()

    def update(self, z):
        """
        Fuse observation `z` into the predicted moments.

        Parameters
        ----------
        z : float or ndarray [n_y]
            Observation

        Returns
        -------
        StepResult

        Raises
        ------
        SingularInnovationError
            If S = H P_pred H' + R is not invertible
        """
        if self._x_pred is None:
            raise RuntimeError("Call predict() before update()")

        z = np.atleast_1d(np.asarray(z, dtype=float))
        if z.shape != (self.measurement.obs_dim,):
            raise ConfigurationError(
                f"Observation has shape {z.shape}, expected ({self.measurement.obs_dim},)"
            )

        step = self._step
        x, P, K, innov, S = kf_update(
            self._x_pred, self._P_pred, z,
            self.measurement.predict_observation, self.measurement.jacobian, self.R,
            joseph=self.joseph, eps=self.singular_eps, step=step
        )

        if is_drifted(P, self.drift_tolerance):
            asymmetry, min_eig = covariance_drift(P)
            warnings.warn(NumericDriftWarning(step, asymmetry, min_eig), stacklevel=2)
            P = repair_covariance(P)
        elif self.symmetrize:
            P = symmetrize(P)

        result = StepResult(
            step=step,
            x_pred=self._x_pred, P_pred=self._P_pred,
            x=x, P=P,
            innovation=innov, S=S, K=K,
        )

        self._x, self._P = x, P
        self._x_pred, self._P_pred = None, None
        self._step += 1
        logger.debug("step %d: innovation=%s, trace(P)=%.6g", step, innov, np.trace(P))
        return result

    def step(self, z):
        """Run predict then update for one observation."""
        self.predict()
        return self.update(z)
