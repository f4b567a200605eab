"""Trajectory simulation: truth propagation, noisy observations and filtering."""
import logging
from dataclasses import dataclass
from itertools import product
from typing import Tuple

import numpy as np

from .exceptions import SingularInnovationError
from .filters import KalmanEstimator
from .noise import NoiseSource

logger = logging.getLogger(__name__)

TRACES = ('true_state', 'observation', 'prediction', 'estimate', 'uncertainty')


def _frozen(arr):
    out = np.array(arr, dtype=float)
    out.setflags(write=False)
    return out


@dataclass(frozen=True, eq=False)
class EstimationRecord:
    """
    One step of a run. Arrays are read-only copies.

    Attributes
    ----------
    step : int
        Zero-based step index
    time : float
        (step + 1) * dt, the time after this step's process advance. The
        first record is stamped dt, not 0.
    true_state : ndarray [n_x]
    observation : ndarray [n_y]
    predicted_state, estimated_state : ndarray [n_x]
    predicted_covariance, estimated_covariance : ndarray [n_x, n_x]
    innovation : ndarray [n_y]
    innovation_covariance : ndarray [n_y, n_y]
    gain : ndarray [n_x, n_y]
    labels : tuple of str
        State component names, used for chart field suffixes
    """
    step: int
    time: float
    true_state: np.ndarray
    observation: np.ndarray
    predicted_state: np.ndarray
    predicted_covariance: np.ndarray
    estimated_state: np.ndarray
    estimated_covariance: np.ndarray
    innovation: np.ndarray
    innovation_covariance: np.ndarray
    gain: np.ndarray
    labels: Tuple[str, ...] = ('x',)

    @property
    def uncertainty(self):
        """Posterior standard deviation per state component."""
        return np.sqrt(np.clip(np.diag(self.estimated_covariance), 0.0, None))

    @property
    def predicted_uncertainty(self):
        """Prior standard deviation per state component."""
        return np.sqrt(np.clip(np.diag(self.predicted_covariance), 0.0, None))

    def as_row(self, traces=TRACES):
        """
        Flatten to a field-name -> number mapping for charting.

        Vector traces get one field per component, suffixed with the state
        label (observations with their index when more than one). Traces not
        in `traces` keep their keys with value None.
        """
        row = {'time': float(self.time)}
        fields = [
            ('true_state', self.true_state, self.labels),
            ('observation', self.observation, self.labels),
            ('prediction', self.predicted_state, self.labels),
            ('estimate', self.estimated_state, self.labels),
            ('uncertainty', self.uncertainty, self.labels),
        ]
        for name, values, labels in fields:
            shown = name in traces
            if len(values) == 1:
                row[name] = float(values[0]) if shown else None
                continue
            if len(labels) != len(values):
                labels = [str(i) for i in range(len(values))]
            for label, value in zip(labels, values):
                row[f"{name}_{label}"] = float(value) if shown else None
        return row


def chart_rows(records, traces=None):
    """Rows for the charting layer, one per record. `traces=None` shows every trace."""
    if traces is None:
        traces = TRACES
    unknown = set(traces) - set(TRACES)
    if unknown:
        raise ValueError(f"Unknown traces {sorted(unknown)}, expected a subset of {TRACES}")
    return [record.as_row(traces) for record in records]


class TrajectorySimulator:
    """
    Drives truth, observations and the estimator over a full run.

    Every call to `run` starts from t = 0 with fresh models, noise streams and
    estimator; nothing carries over between runs.

    Parameters
    ----------
    symmetrize : bool
        Passed to KalmanEstimator
    drift_tolerance : float
        Passed to KalmanEstimator
    singular_eps : float
        Passed to KalmanEstimator
    """

    def __init__(self, symmetrize=True, drift_tolerance=1e-9, singular_eps=1e-12):
        self.symmetrize = symmetrize
        self.drift_tolerance = drift_tolerance
        self.singular_eps = singular_eps

    def run(self, config):
        """
        Simulate and filter one trajectory.

        Parameters
        ----------
        config : SimulationConfig
            Validated run configuration

        Returns
        -------
        tuple of EstimationRecord
            `config.n_steps` records in time order

        Raises
        ------
        SingularInnovationError
            If any update hits a singular S; no partial output is returned
        """
        process, measurement = config.build_models()
        Q = process.noise_covariance(config.process_noise)
        R = measurement.noise_covariance(config.measurement_noise)

        estimator = KalmanEstimator(
            process, measurement, Q, R, config.x0, config.P0,
            joseph=config.joseph, symmetrize=self.symmetrize,
            drift_tolerance=self.drift_tolerance, singular_eps=self.singular_eps,
        )
        process_stream = NoiseSource(config.process_seed)
        measurement_stream = NoiseSource(config.measurement_seed)
        q_std = np.sqrt(config.process_noise)
        r_std = np.sqrt(config.measurement_noise)

        n_steps = config.n_steps
        labels = tuple(process.state_labels)
        logger.info("Running %s/%s model for %d steps (Q=%g, R=%g)",
                    config.process_model, config.measurement_model, n_steps,
                    config.process_noise, config.measurement_noise)

        x_true = config.true_x0
        records = []
        for k in range(n_steps):
            w = process_stream.gaussian_vector(process.noise_dim, 0.0, q_std)
            x_true = process.advance(x_true, config.dt, w)

            v = measurement_stream.gaussian_vector(measurement.noise_dim, 0.0, r_std)
            z = measurement.observe(x_true, v)

            try:
                result = estimator.step(z)
            except SingularInnovationError as err:
                logger.error("Run aborted at step %d of %d: %s", k, n_steps, err)
                raise

            records.append(EstimationRecord(
                step=k,
                time=(k + 1) * config.dt,
                true_state=_frozen(x_true),
                observation=_frozen(z),
                predicted_state=_frozen(result.x_pred),
                predicted_covariance=_frozen(result.P_pred),
                estimated_state=_frozen(result.x),
                estimated_covariance=_frozen(result.P),
                innovation=_frozen(result.innovation),
                innovation_covariance=_frozen(result.S),
                gain=_frozen(result.K),
                labels=labels,
            ))

        logger.info("Run complete: %d records", len(records))
        return tuple(records)

    def run_grid(self, config, process_noise=None, measurement_noise=None):
        """
        Independent fresh runs over every (Q, R) combination.

        Parameters
        ----------
        config : SimulationConfig
            Base configuration; only the noise levels vary
        process_noise, measurement_noise : sequence of float, optional
            Values to sweep; default to the base config's value

        Returns
        -------
        dict
            {(q, r): tuple of EstimationRecord}
        """
        qs = (config.process_noise,) if process_noise is None else tuple(process_noise)
        rs = (config.measurement_noise,) if measurement_noise is None else tuple(measurement_noise)

        runs = {}
        for q, r in product(qs, rs):
            runs[(q, r)] = self.run(config.with_noise(q, r))
        return runs


def simulate(config, **kwargs):
    """Shorthand for TrajectorySimulator(**kwargs).run(config)."""
    return TrajectorySimulator(**kwargs).run(config)
