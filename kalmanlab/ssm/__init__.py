"""State space model implementations."""
from .base import ProcessModel, MeasurementModel
from .constant import ConstantProcess, IdentityMeasurement
from .pendulum import PendulumProcess, SineProjection, GRAVITY
from ..exceptions import ConfigurationError

PROCESS_MODELS = {
    'constant': ConstantProcess,
    'pendulum': PendulumProcess,
}

MEASUREMENT_MODELS = {
    'identity': IdentityMeasurement,
    'sine': SineProjection,
}


def build_process_model(name, dim=1, dt=1.0, g=GRAVITY):
    """Instantiate a registered process model by name."""
    if name == 'constant':
        return ConstantProcess(dim=dim, dt=dt)
    elif name == 'pendulum':
        return PendulumProcess(g=g, dt=dt)
    raise ConfigurationError(
        f"Unknown process model '{name}', expected one of {sorted(PROCESS_MODELS)}"
    )


def build_measurement_model(name, dim=1):
    """Instantiate a registered measurement model by name."""
    if name == 'identity':
        return IdentityMeasurement(dim=dim)
    elif name == 'sine':
        return SineProjection(dim=dim)
    raise ConfigurationError(
        f"Unknown measurement model '{name}', expected one of {sorted(MEASUREMENT_MODELS)}"
    )


__all__ = [
    'ProcessModel',
    'MeasurementModel',
    'ConstantProcess',
    'IdentityMeasurement',
    'PendulumProcess',
    'SineProjection',
    'GRAVITY',
    'PROCESS_MODELS',
    'MEASUREMENT_MODELS',
    'build_process_model',
    'build_measurement_model',
]
