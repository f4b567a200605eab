"""Common numerics for Kalman filter variants."""
import numpy as np
from scipy import linalg as sla

from ..exceptions import SingularInnovationError


def joseph_update(P_pred, K, H, R):
    """
    Compute Joseph-stabilized covariance update.

    Parameters
    ----------
    P_pred : ndarray [n_x, n_x]
        Predicted covariance
    K : ndarray [n_x, n_y]
        Kalman gain
    H : ndarray [n_y, n_x]
        Observation matrix/Jacobian
    R : ndarray [n_y, n_y]
        Observation noise covariance

    Returns
    -------
    ndarray [n_x, n_x]
        Updated covariance
    """
    IKH = np.eye(P_pred.shape[0]) - K @ H
    return IKH @ P_pred @ IKH.T + K @ R @ K.T


def standard_update(P_pred, K, H):
    """
    Compute the subtractive covariance update: P = P_pred - K H P_pred.

    Parameters
    ----------
    P_pred : ndarray [n_x, n_x]
        Predicted covariance
    K : ndarray [n_x, n_y]
        Kalman gain
    H : ndarray [n_y, n_x]
        Observation matrix/Jacobian

    Returns
    -------
    ndarray [n_x, n_x]
        Updated covariance
    """
    return P_pred - K @ H @ P_pred


def symmetrize(P):
    """Return 0.5 * (P + P^T)."""
    return 0.5 * (P + P.T)


def invert_innovation(S, eps=1e-12, step=None):
    """
    Invert the innovation covariance S.

    Closed form for 1x1 and 2x2, scipy.linalg.inv otherwise. A near-singular
    S is rejected rather than producing NaN/Inf.

    Parameters
    ----------
    S : ndarray [n_y, n_y]
        Innovation covariance
    eps : float
        Minimum admissible |det(S)|
    step : int, optional
        Step index reported in the error

    Returns
    -------
    ndarray [n_y, n_y]
        S^{-1}

    Raises
    ------
    SingularInnovationError
        If |det(S)| < eps or the inverse is not finite
    """
    n_y = S.shape[0]

    if n_y == 1:
        det = S[0, 0]
    elif n_y == 2:
        det = S[0, 0] * S[1, 1] - S[0, 1] * S[1, 0]
    else:
        det = sla.det(S)

    if not np.isfinite(det) or abs(det) < eps:
        raise SingularInnovationError(step, det)

    if n_y == 1:
        S_inv = np.array([[1.0 / det]])
    elif n_y == 2:
        S_inv = np.array([
            [S[1, 1], -S[0, 1]],
            [-S[1, 0], S[0, 0]]
        ]) / det
    else:
        try:
            S_inv = sla.inv(S)
        except (sla.LinAlgError, ValueError) as err:
            raise SingularInnovationError(step, det) from err

    if not np.all(np.isfinite(S_inv)):
        raise SingularInnovationError(step, det)

    return S_inv


def covariance_drift(P):
    """
    Measure loss of symmetry and positive semi-definiteness.

    Parameters
    ----------
    P : ndarray [n_x, n_x]
        Covariance matrix

    Returns
    -------
    asymmetry : float
        ||P - P'||_F / ||P||_F (0 for the zero matrix)
    min_eigenvalue : float
        Smallest eigenvalue of the symmetric part of P
    """
    norm_P = np.linalg.norm(P, 'fro')
    asymmetry = np.linalg.norm(P - P.T, 'fro') / norm_P if norm_P > 0 else 0.0
    min_eigenvalue = np.linalg.eigvalsh(symmetrize(P)).min()
    return float(asymmetry), float(min_eigenvalue)


def is_drifted(P, tol=1e-9):
    """True if P is asymmetric or indefinite beyond `tol` (relative to its scale)."""
    asymmetry, min_eig = covariance_drift(P)
    scale = max(np.max(np.abs(np.diag(P))), 1.0)
    return asymmetry > tol or min_eig < -tol * scale


def repair_covariance(P):
    """Symmetrize P and clip negative eigenvalues to zero."""
    vals, vecs = np.linalg.eigh(symmetrize(P))
    vals = np.maximum(vals, 0.0)
    return symmetrize(vecs @ np.diag(vals) @ vecs.T)


def is_psd(P, tol=1e-10):
    """Check if matrix is positive semi-definite."""
    return bool(np.all(np.linalg.eigvalsh(symmetrize(P)) >= -tol))
