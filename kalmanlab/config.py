"""Immutable run configuration and demo presets."""
import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

import numpy as np

from .exceptions import ConfigurationError
from .ssm import GRAVITY, build_measurement_model, build_process_model

# Guards floor(duration / dt) against values like 0.3 / 0.1 = 2.9999999999999996
STEP_COUNT_TOL = 1e-9


def _as_vector(value):
    arr = np.atleast_1d(np.asarray(value, dtype=float))
    if arr.ndim != 1:
        raise ConfigurationError(f"Expected a state vector, got shape {arr.shape}")
    return tuple(float(v) for v in arr)


def _as_square(value):
    arr = np.atleast_2d(np.asarray(value, dtype=float))
    if arr.ndim != 2:
        raise ConfigurationError(f"Expected a covariance matrix, got shape {arr.shape}")
    return tuple(tuple(float(v) for v in row) for row in arr)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Everything a run depends on. Any change means a new config and a new run.

    Vectors and matrices are stored as tuples so the config is hashable;
    `x0`, `P0` and `true_x0` give numpy views. Validation runs on construction
    and raises ConfigurationError.

    Parameters
    ----------
    process_noise : float
        Process noise intensity q (> 0)
    measurement_noise : float
        Measurement noise variance r (> 0)
    initial_state : sequence of float
        Filter's initial estimate x0
    initial_covariance : sequence of sequences
        Filter's initial covariance P0
    true_initial_state : sequence of float, optional
        Ground-truth initial state; defaults to `initial_state`
    process_seed, measurement_seed : int
        Seeds of the two independent noise streams (must differ)
    dt : float
        Time step
    duration : float
        Run length in time units; the run has floor(duration / dt) steps
    steps : int, optional
        Explicit step count overriding `duration`
    process_model : {'constant', 'pendulum'}
    measurement_model : {'identity', 'sine'}
    gravity : float
        Pendulum gravitational constant
    joseph : bool
        Use the Joseph covariance update
    """
    process_noise: float = 0.01
    measurement_noise: float = 0.1
    initial_state: Tuple[float, ...] = (0.0,)
    initial_covariance: Tuple[Tuple[float, ...], ...] = ((1.0,),)
    true_initial_state: Optional[Tuple[float, ...]] = None
    process_seed: int = 42
    measurement_seed: int = 24
    dt: float = 1.0
    duration: float = 100.0
    steps: Optional[int] = None
    process_model: str = 'constant'
    measurement_model: str = 'identity'
    gravity: float = GRAVITY
    joseph: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'initial_state', _as_vector(self.initial_state))
        object.__setattr__(self, 'initial_covariance', _as_square(self.initial_covariance))
        if self.true_initial_state is None:
            object.__setattr__(self, 'true_initial_state', self.initial_state)
        else:
            object.__setattr__(self, 'true_initial_state', _as_vector(self.true_initial_state))
        self.validate()

    def validate(self):
        """Reject the configuration before any stepping if it is malformed."""
        for name in ('process_noise', 'measurement_noise', 'dt'):
            value = getattr(self, name)
            if not np.isfinite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive finite number, got {value}")

        if self.steps is None:
            if not np.isfinite(self.duration) or self.duration <= 0:
                raise ConfigurationError(f"duration must be positive, got {self.duration}")
        elif isinstance(self.steps, bool) or not isinstance(self.steps, (int, np.integer)) \
                or self.steps < 0:
            raise ConfigurationError(f"steps must be a non-negative integer, got {self.steps}")

        for name in ('process_seed', 'measurement_seed'):
            seed = getattr(self, name)
            if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
                raise ConfigurationError(f"{name} must be an integer, got {seed!r}")
        if self.process_seed == self.measurement_seed:
            raise ConfigurationError("process_seed and measurement_seed must differ")

        process, measurement = self.build_models()
        n_x = process.state_dim

        if len(self.initial_state) != n_x:
            raise ConfigurationError(
                f"initial_state has dimension {len(self.initial_state)}, "
                f"{self.process_model} model expects {n_x}"
            )
        if len(self.true_initial_state) != n_x:
            raise ConfigurationError(
                f"true_initial_state has dimension {len(self.true_initial_state)}, expected {n_x}"
            )
        if not (np.all(np.isfinite(self.x0)) and np.all(np.isfinite(self.true_x0))):
            raise ConfigurationError("Initial states must be finite")

        P0 = self.P0
        if P0.shape != (n_x, n_x):
            raise ConfigurationError(f"initial_covariance has shape {P0.shape}, expected ({n_x}, {n_x})")
        if not np.all(np.isfinite(P0)) or not np.allclose(P0, P0.T):
            raise ConfigurationError("initial_covariance must be finite and symmetric")
        if np.linalg.eigvalsh(P0).min() < -1e-12:
            raise ConfigurationError("initial_covariance must be positive semi-definite")

    @property
    def x0(self):
        return np.array(self.initial_state)

    @property
    def true_x0(self):
        return np.array(self.true_initial_state)

    @property
    def P0(self):
        return np.array(self.initial_covariance)

    @property
    def n_steps(self):
        """Number of records a run produces."""
        if self.steps is not None:
            return int(self.steps)
        return int(math.floor(self.duration / self.dt + STEP_COUNT_TOL))

    def build_models(self):
        """Fresh (process, measurement) model pair for this configuration."""
        dim = len(self.initial_state)
        process = build_process_model(self.process_model, dim=dim, dt=self.dt, g=self.gravity)
        measurement = build_measurement_model(self.measurement_model, dim=process.state_dim)
        return process, measurement

    def with_noise(self, process_noise=None, measurement_noise=None):
        """Copy with new Q and/or R (a slider change)."""
        changes = {}
        if process_noise is not None:
            changes['process_noise'] = process_noise
        if measurement_noise is not None:
            changes['measurement_noise'] = measurement_noise
        return replace(self, **changes)


def constant_demo(**overrides):
    """Scalar random walk observed directly (Q=0.01, R=0.1, 100 unit steps)."""
    params = dict(
        process_noise=0.01,
        measurement_noise=0.1,
        initial_state=(0.0,),
        initial_covariance=((1.0,),),
        process_seed=42,
        measurement_seed=24,
        dt=1.0,
        duration=100.0,
        process_model='constant',
        measurement_model='identity',
    )
    params.update(overrides)
    return SimulationConfig(**params)


def pendulum_demo(**overrides):
    """Pendulum observed through sin(theta) only, 10 s at dt = 0.01."""
    params = dict(
        process_noise=0.01,
        measurement_noise=0.1,
        initial_state=(0.8, 0.0),
        initial_covariance=((0.5, 0.0), (0.0, 0.5)),
        true_initial_state=(1.0, -0.1),
        process_seed=42,
        measurement_seed=24,
        dt=0.01,
        duration=10.0,
        process_model='pendulum',
        measurement_model='sine',
    )
    params.update(overrides)
    return SimulationConfig(**params)
