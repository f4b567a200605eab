"""Deterministic pseudorandom noise streams."""
import numpy as np

# Linear congruential recurrence: state' = (A * state + C) % M
LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


class NoiseSource:
    """
    Reproducible uniform and Gaussian samples from an integer seed.

    The recurrence has full period, so every state (zero included) is visited
    once per cycle. Two sources with the same seed produce the same sequence
    for the same call order.

    Parameters
    ----------
    seed : int
        Initial state, reduced modulo 233280
    """

    def __init__(self, seed):
        if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
            raise TypeError(f"seed must be an integer, got {type(seed).__name__}")
        self.seed = int(seed)
        self._state = self.seed % LCG_MODULUS

    @property
    def state(self):
        """Current recurrence state."""
        return self._state

    def next(self):
        """Advance the recurrence and return a uniform value in [0, 1)."""
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MODULUS

    def gaussian(self, mean=0.0, stddev=1.0):
        """
        Normal sample via Box-Muller from two consecutive uniform draws.

        A zero first draw is replaced by 1/M so the log stays finite.
        """
        u1 = self.next()
        u2 = self.next()
        if u1 == 0.0:
            u1 = 1.0 / LCG_MODULUS
        z0 = np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)
        return z0 * stddev + mean

    def gaussian_vector(self, size, mean=0.0, stddev=1.0):
        """Draw `size` consecutive Gaussian samples as an array."""
        return np.array([self.gaussian(mean, stddev) for _ in range(size)])

    def copy(self):
        """Independent source at the same position in the sequence."""
        clone = NoiseSource(self.seed)
        clone._state = self._state
        return clone

    def __repr__(self):
        return f"NoiseSource(seed={self.seed}, state={self._state})"
