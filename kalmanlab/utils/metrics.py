"""
Metrics for evaluating a filtered run.
"""
import numpy as np


def stack_run(records):
    """
    Stack a run's records into arrays.

    Parameters
    ----------
    records : sequence of EstimationRecord

    Returns
    -------
    dict
        't' [T], 'xs' [T, n_x], 'ys' [T, n_y], 'm_pred' [T, n_x], 'P_pred' [T, n_x, n_x],
        'm_filt' [T, n_x], 'P_filt' [T, n_x, n_x], 'innovations' [T, n_y], 'S' [T, n_y, n_y]
    """
    if len(records) == 0:
        raise ValueError("Cannot stack an empty run")
    return {
        't': np.array([r.time for r in records]),
        'xs': np.stack([r.true_state for r in records]),
        'ys': np.stack([r.observation for r in records]),
        'm_pred': np.stack([r.predicted_state for r in records]),
        'P_pred': np.stack([r.predicted_covariance for r in records]),
        'm_filt': np.stack([r.estimated_state for r in records]),
        'P_filt': np.stack([r.estimated_covariance for r in records]),
        'innovations': np.stack([r.innovation for r in records]),
        'S': np.stack([r.innovation_covariance for r in records]),
    }


def compute_mse(estimated, true):
    """Mean squared error."""
    return np.mean((estimated - true)**2)


def compute_rmse(estimated, true):
    """Root mean squared error."""
    return np.sqrt(compute_mse(estimated, true))


def compute_nees(m_filt, P_filt, xs, regularize=1e-8):
    """
    Compute Normalized Estimation Error Squared (NEES).

    NEES = (x - m)' * P^{-1} * (x - m)

    For a consistent filter, NEES should follow chi-squared(n_x) distribution.

    Parameters
    ----------
    m_filt : ndarray [T, n_x]
        Filtered means
    P_filt : ndarray [T, n_x, n_x]
        Filtered covariances
    xs : ndarray [T, n_x]
        True states
    regularize : float
        Small value added to diagonal for numerical stability

    Returns
    -------
    ndarray [T]
        NEES values at each time step
    """
    T, n_x = m_filt.shape
    nees = np.zeros(T)

    for t in range(T):
        error = xs[t] - m_filt[t]
        P_reg = P_filt[t] + regularize * np.eye(n_x)
        try:
            nees[t] = error @ np.linalg.solve(P_reg, error)
        except np.linalg.LinAlgError:
            # Pseudo-inverse for singular covariances
            nees[t] = error @ np.linalg.lstsq(P_reg, error, rcond=None)[0]

    return nees


def compute_nis(innovations, S_innov):
    """
    Compute Normalized Innovation Squared (NIS).

    NIS = v' S^{-1} v, chi-squared(n_y) for a consistent filter.

    Parameters
    ----------
    innovations : ndarray [T, n_y]
    S_innov : ndarray [T, n_y, n_y]

    Returns
    -------
    ndarray [T]
    """
    T = innovations.shape[0]
    nis = np.zeros(T)
    for t in range(T):
        v = innovations[t]
        nis[t] = v @ np.linalg.solve(S_innov[t], v)
    return nis


def compute_symmetry_error(P_filt):
    """
    Relative symmetry error ||P - P'||_F / ||P||_F at each time step.

    Parameters
    ----------
    P_filt : ndarray [T, n_x, n_x]

    Returns
    -------
    ndarray [T]
    """
    T = P_filt.shape[0]
    sym_err = np.zeros(T)
    for t in range(T):
        P = P_filt[t]
        norm_P = np.linalg.norm(P, 'fro')
        if norm_P > 0:
            sym_err[t] = np.linalg.norm(P - P.T, 'fro') / norm_P
    return sym_err


def compute_min_eigenvalues(P_filt):
    """
    Minimum eigenvalue of P at each time step.

    Negative values indicate loss of positive semi-definiteness.
    """
    return np.array([np.linalg.eigvalsh(P).min() for P in P_filt])


def run_summary(records):
    """
    Summary statistics of a run.

    Parameters
    ----------
    records : sequence of EstimationRecord

    Returns
    -------
    dict
        rmse_estimate, rmse_prediction, mean_nees, mean_nis,
        max_symmetry_error, min_eigenvalue, final_uncertainty
    """
    run = stack_run(records)
    return {
        'rmse_estimate': float(compute_rmse(run['m_filt'], run['xs'])),
        'rmse_prediction': float(compute_rmse(run['m_pred'], run['xs'])),
        'mean_nees': float(np.mean(compute_nees(run['m_filt'], run['P_filt'], run['xs']))),
        'mean_nis': float(np.mean(compute_nis(run['innovations'], run['S']))),
        'max_symmetry_error': float(np.max(compute_symmetry_error(run['P_filt']))),
        'min_eigenvalue': float(np.min(compute_min_eigenvalues(run['P_filt']))),
        'final_uncertainty': records[-1].uncertainty.tolist(),
    }
