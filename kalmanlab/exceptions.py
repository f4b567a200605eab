"""Exception and warning types raised by the estimator and simulator."""


class KalmanLabError(Exception):
    """Base class for kalmanlab errors."""
    pass


class ConfigurationError(KalmanLabError, ValueError):
    """Raised when a run configuration is rejected before any stepping."""
    pass


class SingularInnovationError(KalmanLabError, ArithmeticError):
    """
    Raised when the innovation covariance S cannot be inverted.

    Parameters
    ----------
    step : int or None
        Zero-based index of the step whose update failed
    determinant : float
        det(S) at the time of failure
    """

    def __init__(self, step, determinant, message=None):
        self.step = step
        self.determinant = determinant
        if message is None:
            where = f"step {step}" if step is not None else "update"
            message = f"Innovation covariance is singular at {where} (|det(S)| = {abs(determinant):.3e})"
        super().__init__(message)


class NumericDriftWarning(RuntimeWarning):
    """Issued when the covariance loses symmetry or positive semi-definiteness."""

    def __init__(self, step, asymmetry, min_eigenvalue):
        self.step = step
        self.asymmetry = asymmetry
        self.min_eigenvalue = min_eigenvalue
        super().__init__(
            f"Covariance drift at step {step}: relative asymmetry {asymmetry:.3e}, "
            f"min eigenvalue {min_eigenvalue:.3e}. Re-symmetrized."
        )
