"""Kalman Filter (KF) and its linearized (extended) predict/update steps."""
import numpy as np

from .common import invert_innovation, joseph_update, standard_update, symmetrize


def kf_predict(m, P, f, F_jacobian, Q):
    """
    Prediction step.

    The Jacobian is taken at the previous estimate `m`; for linear models it
    is the exact transition matrix and this is the plain KF predict.

    Parameters
    ----------
    m : ndarray [n_x]
        Previous estimate
    P : ndarray [n_x, n_x]
        Previous covariance
    f : callable
        State transition: f(x) -> x_next
    F_jacobian : callable
        F_jacobian(x) -> [n_x, n_x]
    Q : ndarray [n_x, n_x]
        Process noise covariance

    Returns
    -------
    m_pred : ndarray [n_x]
    P_pred : ndarray [n_x, n_x]
    """
    F = F_jacobian(m)
    m_pred = f(m)
    P_pred = F @ P @ F.T + Q

    return m_pred, P_pred


def kf_update(m_pred, P_pred, y, h, H_jacobian, R, joseph=False, eps=1e-12, step=None):
    """
    Update step.

    Parameters
    ----------
    m_pred : ndarray [n_x]
        Predicted mean
    P_pred : ndarray [n_x, n_x]
        Predicted covariance
    y : ndarray [n_y]
        Observation
    h : callable
        Observation function: h(x) -> y
    H_jacobian : callable
        H_jacobian(x) -> [n_y, n_x], evaluated at m_pred
    R : ndarray [n_y, n_y]
        Observation noise covariance
    joseph : bool
        Use Joseph stabilized covariance update instead of P_pred - K H P_pred
    eps : float
        Minimum admissible |det(S)|
    step : int, optional
        Step index reported if S is singular

    Returns
    -------
    m : ndarray [n_x]
        Updated mean
    P : ndarray [n_x, n_x]
        Updated covariance
    K : ndarray [n_x, n_y]
        Kalman gain
    innov : ndarray [n_y]
        Innovation y - h(m_pred)
    S : ndarray [n_y, n_y]
        Innovation covariance
    """
    H = H_jacobian(m_pred)
    S = H @ P_pred @ H.T + R
    K = P_pred @ H.T @ invert_innovation(S, eps=eps, step=step)

    innov = np.atleast_1d(y) - h(m_pred)
    m = m_pred + K @ innov
    P = joseph_update(P_pred, K, H, R) if joseph else standard_update(P_pred, K, H)

    return m, P, K, innov, S


def kalman_filter(process, measurement, Q, R, m0, P0, ys, joseph=False):
    """
    Kalman Filter over a whole observation sequence.

    Uses the model pair's exact matrices when both are linear and their
    Jacobians at the running estimate otherwise (EKF).

    Parameters
    ----------
    process : ProcessModel
        Supplies transition(x) and jacobian(x)
    measurement : MeasurementModel
        Supplies predict_observation(x) and jacobian(x)
    Q : ndarray [n_x, n_x]
        Process noise covariance
    R : ndarray [n_y, n_y]
        Observation noise covariance
    m0 : ndarray [n_x]
        Initial mean
    P0 : ndarray [n_x, n_x]
        Initial covariance
    ys : ndarray [T, n_y]
        Observations
    joseph : bool
        Use Joseph stabilized covariance update

    Returns
    -------
    m_filt : ndarray [T, n_x]
        Filtered state means
    P_filt : ndarray [T, n_x, n_x]
        Filtered state covariances
    cond_nums : ndarray [T]
        Condition numbers of P
    """
    ys = np.asarray(ys, dtype=float).reshape(len(ys), -1)
    T, n_x = ys.shape[0], len(m0)

    m, P = np.asarray(m0, dtype=float).copy(), np.asarray(P0, dtype=float).copy()
    m_filt = np.zeros((T, n_x))
    P_filt = np.zeros((T, n_x, n_x))
    cond_nums = np.zeros(T)

    for t in range(T):
        # Predict
        m_pred, P_pred = kf_predict(m, P, process.transition, process.jacobian, Q)
        # Update
        m, P, _, _, _ = kf_update(m_pred, P_pred, ys[t], measurement.predict_observation,
                                  measurement.jacobian, R, joseph=joseph, step=t)
        P = symmetrize(P)
        m_filt[t], P_filt[t] = m, P
        cond_nums[t] = np.linalg.cond(P)

    return m_filt, P_filt, cond_nums
