"""Unit tests for shared filter numerics."""

import numpy as np
import pytest

from kalmanlab import SingularInnovationError
from kalmanlab.filters.common import (
    covariance_drift, invert_innovation, is_drifted, is_psd, joseph_update, repair_covariance,
    standard_update, symmetrize,
)


class TestCovarianceUpdates:
    """Tests for the subtractive and Joseph covariance updates."""

    def test_joseph_matches_standard_for_optimal_gain(self, rng, random_spd):
        """Both forms agree when K is the optimal gain."""
        P_pred = random_spd(rng, 3)
        H = rng.standard_normal((2, 3))
        R = random_spd(rng, 2, scale=0.1)
        K = P_pred @ H.T @ np.linalg.inv(H @ P_pred @ H.T + R)

        P_std = standard_update(P_pred, K, H)
        P_jos = joseph_update(P_pred, K, H, R)

        np.testing.assert_allclose(P_std, P_jos, rtol=1e-8, atol=1e-12)

    def test_scalar_standard_update(self):
        """P = (1 - K) P_pred for the scalar case."""
        P_pred = np.array([[1.01]])
        K = np.array([[1.01 / 1.11]])

        P = standard_update(P_pred, K, np.eye(1))

        np.testing.assert_allclose(P, [[0.1 * 1.01 / 1.11]])

    def test_joseph_psd_for_suboptimal_gain(self, rng, random_spd):
        """Joseph form stays PSD for any gain."""
        P_pred = random_spd(rng, 2)
        H = np.eye(2)
        R = 0.1 * np.eye(2)
        K = 3.0 * np.eye(2)

        assert is_psd(joseph_update(P_pred, K, H, R))


class TestInvertInnovation:
    """Tests for closed-form and general inversion of S."""

    def test_scalar(self):
        np.testing.assert_allclose(invert_innovation(np.array([[1.11]])), [[1 / 1.11]])

    def test_two_by_two(self, rng, random_spd):
        S = random_spd(rng, 2)

        np.testing.assert_allclose(invert_innovation(S) @ S, np.eye(2), atol=1e-12)

    @pytest.mark.parametrize("n", [3, 5])
    def test_general(self, rng, random_spd, n):
        S = random_spd(rng, n)

        np.testing.assert_allclose(invert_innovation(S), np.linalg.inv(S), rtol=1e-10)

    @pytest.mark.parametrize("S", [
        np.zeros((1, 1)),
        np.array([[1.0, 1.0], [1.0, 1.0]]),
        np.zeros((3, 3)),
        np.array([[1e-14]]),
    ])
    def test_singular_raises(self, S):
        with pytest.raises(SingularInnovationError):
            invert_innovation(S)

    def test_non_finite_raises(self):
        with pytest.raises(SingularInnovationError):
            invert_innovation(np.array([[np.nan]]))

    def test_error_reports_step(self):
        with pytest.raises(SingularInnovationError) as excinfo:
            invert_innovation(np.zeros((1, 1)), step=17)

        assert excinfo.value.step == 17
        assert excinfo.value.determinant == 0.0
        assert "step 17" in str(excinfo.value)

    def test_custom_eps(self):
        S = np.array([[1e-3]])

        with pytest.raises(SingularInnovationError):
            invert_innovation(S, eps=1e-2)
        np.testing.assert_allclose(invert_innovation(S, eps=1e-6), [[1e3]])


class TestDrift:
    """Tests for symmetry / PSD diagnostics and repair."""

    def test_symmetric_psd_not_drifted(self, rng, random_spd):
        P = random_spd(rng, 3)

        asymmetry, min_eig = covariance_drift(P)

        assert asymmetry == pytest.approx(0.0, abs=1e-15)
        assert min_eig > 0
        assert not is_drifted(P)

    def test_asymmetry_detected(self):
        P = np.array([[1.0, 0.1], [0.0, 1.0]])

        asymmetry, _ = covariance_drift(P)

        assert asymmetry > 0.05
        assert is_drifted(P)

    def test_indefinite_detected(self):
        P = np.array([[1.0, 2.0], [2.0, 1.0]])

        _, min_eig = covariance_drift(P)

        assert min_eig == pytest.approx(-1.0)
        assert is_drifted(P)

    def test_zero_matrix(self):
        assert covariance_drift(np.zeros((2, 2))) == (0.0, 0.0)
        assert not is_drifted(np.zeros((2, 2)))

    def test_repair(self):
        P = np.array([[1.0, 2.1], [1.9, 1.0]])

        fixed = repair_covariance(P)

        np.testing.assert_array_equal(fixed, fixed.T)
        assert is_psd(fixed)

    def test_symmetrize(self):
        P = np.array([[1.0, 0.2], [0.0, 1.0]])

        np.testing.assert_allclose(symmetrize(P), [[1.0, 0.1], [0.1, 1.0]])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
