"""Unit tests for scalar Gaussian belief algebra."""

import numpy as np
import pytest
from scipy.integrate import trapezoid

from kalmanlab import ConfigurationError
from kalmanlab.gaussian import (
    Gaussian, bayes_cycle, fuse, gaussian_curve, gaussian_pdf, kalman_gain, predict,
    sequential_fusion,
)


class TestDensity:
    """Tests for pdf evaluation and sampled curves."""

    def test_peak_value(self):
        np.testing.assert_allclose(gaussian_pdf(2.0, 2.0, 4.0), 1.0 / np.sqrt(2 * np.pi * 4.0))

    def test_vectorized(self):
        xs = np.linspace(-1, 1, 5)

        assert gaussian_pdf(xs, 0.0, 1.0).shape == (5,)

    @pytest.mark.parametrize("variance", [0.0, -1.0, float('nan'), float('inf')])
    def test_pdf_rejects_invalid_variance(self, variance):
        with pytest.raises(ConfigurationError):
            gaussian_pdf(0.0, 0.0, variance)

    @pytest.mark.parametrize("variance", [0.0, -1.0, float('nan')])
    def test_curve_rejects_invalid_variance(self, variance):
        with pytest.raises(ConfigurationError):
            gaussian_curve(0.0, variance)

    def test_curve_support_and_mass(self):
        """Curve spans +/- 4 sd and integrates to ~1."""
        xs, ys = gaussian_curve(20.0, 9.0, n_sigma=4.0, step=0.1)

        np.testing.assert_allclose(xs[0], 8.0)
        assert xs[-1] == pytest.approx(32.0, abs=0.1)
        assert trapezoid(ys, xs) == pytest.approx(1.0, abs=1e-3)


class TestFusion:
    """Tests for prediction and Bayesian fusion."""

    def test_predict_shifts_and_widens(self):
        predicted = predict(Gaussian(0.0, 1.0), shift=0.5, process_variance=0.3)

        assert predicted.mean == pytest.approx(0.5)
        assert predicted.variance == pytest.approx(1.3)

    def test_fuse_known_values(self):
        """Posterior of N(0.5, 1.3) and N(1.2, 0.5)."""
        posterior = fuse(Gaussian(0.5, 1.3), Gaussian(1.2, 0.5))

        assert posterior.variance == pytest.approx(0.65 / 1.8)
        assert posterior.mean == pytest.approx(1.81 / 1.8)

    def test_fuse_matches_kalman_update(self):
        """Product of Gaussians equals the scalar Kalman update."""
        predicted = Gaussian(5.0, 2.0)
        measurement = Gaussian(7.0, 1.5)
        K = kalman_gain(predicted, measurement)

        posterior = fuse(predicted, measurement)

        assert posterior.mean == pytest.approx(predicted.mean + K * (measurement.mean - predicted.mean))
        assert posterior.variance == pytest.approx((1 - K) * predicted.variance)

    def test_posterior_narrower_than_both(self):
        posterior = fuse(Gaussian(20.0, 9.0), Gaussian(40.0, 4.0))

        assert posterior.variance < 4.0
        assert 20.0 < posterior.mean < 40.0

    def test_rejects_invalid(self):
        with pytest.raises(ConfigurationError):
            fuse(Gaussian(0.0, -1.0), Gaussian(0.0, 1.0))
        with pytest.raises(ConfigurationError):
            predict(Gaussian(0.0, 1.0), process_variance=-0.1)


class TestBayesCycle:
    """Tests for the prior -> predicted -> posterior cycle."""

    def test_stages(self):
        cycle = bayes_cycle(Gaussian(0.0, 1.0), 0.5, 0.3, Gaussian(1.2, 0.5))

        assert cycle.prior == Gaussian(0.0, 1.0)
        assert cycle.predicted.variance == pytest.approx(1.3)
        assert cycle.measurement == Gaussian(1.2, 0.5)
        assert cycle.next_prior == cycle.posterior

    def test_sequential_fusion_chains_posteriors(self):
        cycles = sequential_fusion(
            Gaussian(5.0, 2.5), [0.0, 1.0, 1.0], 0.1,
            [Gaussian(6.0, 1.5), Gaussian(7.0, 1.5), Gaussian(6.5, 1.2)]
        )

        assert len(cycles) == 3
        for prev, nxt in zip(cycles, cycles[1:]):
            assert nxt.prior == prev.posterior
        variances = [c.posterior.variance for c in cycles]
        assert variances[-1] < variances[0]

    def test_plain_tuples_accepted(self):
        """(mean, variance) pairs are coerced to Gaussian."""
        cycle = bayes_cycle((0.0, 1.0), 0.0, 0.01, (1.0, 0.1))
        expected = bayes_cycle(Gaussian(0.0, 1.0), 0.0, 0.01, Gaussian(1.0, 0.1))

        assert cycle == expected
        assert isinstance(cycle.measurement, Gaussian)
        assert fuse((0.5, 1.3), (1.2, 0.5)) == fuse(Gaussian(0.5, 1.3), Gaussian(1.2, 0.5))
        assert kalman_gain((5.0, 2.0), (7.0, 2.0)) == pytest.approx(0.5)

    def test_sequential_length_mismatch(self):
        with pytest.raises(ConfigurationError):
            sequential_fusion(Gaussian(0.0, 1.0), [0.0], 0.1, [])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
