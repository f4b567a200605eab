"""
Scalar Gaussian beliefs: densities, curves and Bayesian fusion.

Covers the one-dimensional picture of a Kalman step: a prior is shifted and
widened by the dynamics, then multiplied with the measurement likelihood to
give a narrower posterior.
"""
from collections import namedtuple

import numpy as np
from scipy.stats import norm

from .exceptions import ConfigurationError

Gaussian = namedtuple('Gaussian', ['mean', 'variance'])

BayesCycle = namedtuple('BayesCycle', ['prior', 'predicted', 'measurement', 'posterior', 'next_prior'])


def _check(g):
    """Coerce `g` (a Gaussian or a plain (mean, variance) pair) and validate it."""
    g = Gaussian(*g)
    if not np.isfinite(g.mean) or not np.isfinite(g.variance) or g.variance <= 0:
        raise ConfigurationError(f"Invalid Gaussian {g}: variance must be positive and finite")
    return g


def _check_variance(variance):
    if not np.isfinite(variance) or variance <= 0:
        raise ConfigurationError(f"variance must be positive and finite, got {variance}")


def gaussian_pdf(x, mean, variance):
    """Density of N(mean, variance) at `x` (scalar or array)."""
    _check_variance(variance)
    return norm.pdf(x, loc=mean, scale=np.sqrt(variance))


def gaussian_curve(mean, variance, n_sigma=4.0, step=0.1):
    """
    Sample the density on [mean - n_sigma*sd, mean + n_sigma*sd].

    Parameters
    ----------
    mean, variance : float
        Distribution parameters
    n_sigma : float
        Half-width of the support in standard deviations
    step : float
        Grid spacing

    Returns
    -------
    xs : ndarray [N]
    ys : ndarray [N]
    """
    _check_variance(variance)
    sd = np.sqrt(variance)
    xs = np.arange(mean - n_sigma * sd, mean + n_sigma * sd + 0.5 * step, step)
    return xs, gaussian_pdf(xs, mean, variance)


def predict(belief, shift=0.0, process_variance=0.0):
    """Prediction: mean moves by `shift`, variance grows by `process_variance`."""
    belief = _check(belief)
    if process_variance < 0:
        raise ConfigurationError(f"process_variance must be non-negative, got {process_variance}")
    return Gaussian(belief.mean + shift, belief.variance + process_variance)


def fuse(prior, measurement):
    """
    Product of two Gaussian densities (renormalized).

    posterior variance = 1 / (1/v1 + 1/v2)
    posterior mean     = variance * (m1/v1 + m2/v2)
    """
    prior = _check(prior)
    measurement = _check(measurement)
    variance = 1.0 / (1.0 / prior.variance + 1.0 / measurement.variance)
    mean = variance * (prior.mean / prior.variance + measurement.mean / measurement.variance)
    return Gaussian(mean, variance)


def kalman_gain(predicted, measurement):
    """Scalar gain K = P / (P + R)."""
    predicted, measurement = _check(predicted), _check(measurement)
    return predicted.variance / (predicted.variance + measurement.variance)


def bayes_cycle(prior, shift, process_variance, measurement):
    """All stages of one predict/measure/update cycle.

    The posterior becomes the prior of the next cycle.
    """
    prior = _check(prior)
    measurement = _check(measurement)
    predicted = predict(prior, shift, process_variance)
    posterior = fuse(predicted, measurement)
    return BayesCycle(
        prior=prior,
        predicted=predicted,
        measurement=measurement,
        posterior=posterior,
        next_prior=posterior,
    )


def sequential_fusion(prior, shifts, process_variance, measurements):
    """
    Repeat `bayes_cycle` over a sequence of measurements.

    Returns
    -------
    list of BayesCycle
    """
    if len(shifts) != len(measurements):
        raise ConfigurationError("shifts and measurements must have the same length")

    cycles = []
    belief = prior
    for shift, z in zip(shifts, measurements):
        cycle = bayes_cycle(belief, shift, process_variance, z)
        cycles.append(cycle)
        belief = cycle.next_prior
    return cycles
