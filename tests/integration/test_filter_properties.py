"""Randomized checks of covariance properties over many runs."""

import numpy as np
import pytest

from kalmanlab import KalmanEstimator, constant_demo, pendulum_demo, simulate
from kalmanlab.filters.common import is_psd
from kalmanlab.ssm import ConstantProcess, IdentityMeasurement

N_SEQUENCES = 1000


def random_spd(rng, n, scale):
    A = rng.standard_normal((n, n))
    return scale * (A @ A.T + 0.1 * np.eye(n))


class TestRandomSequences:
    """Symmetry and PSD hold for every step of randomly drawn problems."""

    def test_estimator_covariance_stays_valid(self):
        rng = np.random.default_rng(2024)

        for _ in range(N_SEQUENCES):
            n = int(rng.integers(1, 4))
            Q = random_spd(rng, n, rng.uniform(1e-4, 1.0))
            R = random_spd(rng, n, rng.uniform(1e-4, 1.0))
            P0 = random_spd(rng, n, rng.uniform(1e-2, 10.0))
            est = KalmanEstimator(ConstantProcess(dim=n), IdentityMeasurement(dim=n), Q, R,
                                  rng.standard_normal(n), P0)

            for z in rng.standard_normal((10, n)) * 3.0:
                result = est.step(z)
                np.testing.assert_array_equal(result.P, result.P.T)
                assert is_psd(result.P)
                assert np.trace(result.P) <= np.trace(result.P_pred) + 1e-12

    def test_simulated_runs_stay_valid(self):
        rng = np.random.default_rng(7)

        for i in range(N_SEQUENCES):
            seed = int(rng.integers(0, 233280))
            demo = pendulum_demo if i % 2 else constant_demo
            cfg = demo(
                process_noise=float(rng.uniform(1e-3, 1.0)),
                measurement_noise=float(rng.uniform(1e-3, 1.0)),
                process_seed=seed,
                measurement_seed=seed + 1,
                steps=15,
            )

            for r in simulate(cfg):
                P = r.estimated_covariance
                assert np.all(np.isfinite(P))
                np.testing.assert_array_equal(P, P.T)
                assert is_psd(P)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
