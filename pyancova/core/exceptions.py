"""
Exception hierarchy for pyancova.

All exceptions inherit from PyAncovaError so callers can catch any
library-specific failure with a single except clause. Every error is raised
at the first point of detection and aborts the whole analysis.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages name the offending column, matrix or statistic
    - Never catch and re-raise with less information
"""


class PyAncovaError(Exception):
    """Base exception for all pyancova errors."""
    pass


class ValidationError(PyAncovaError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks: a missing
    column, a non-numeric covariate, fewer than two group levels, etc.

    Attributes:
        column: Name of the offending column, if the failure is tied to one
    """

    def __init__(self, message: str, column: str | None = None):
        super().__init__(message)
        self.column = column


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when a column's length doesn't match the row count of its source
    or when arrays have the wrong number of dimensions.
    """
    pass


class DegreesOfFreedomError(ValidationError):
    """
    Not enough observations to leave residual degrees of freedom.

    A model with p parameters needs n > p observations so that the error
    variance RSS / (n - p) is defined.

    Attributes:
        n_observations: Number of rows n
        n_params: Number of estimated parameters p (intercept included)
    """

    def __init__(
        self,
        message: str,
        n_observations: int | None = None,
        n_params: int | None = None,
        column: str | None = None,
    ):
        super().__init__(message, column=column)
        self.n_observations = n_observations
        self.n_params = n_params

    @property
    def df(self) -> int | None:
        """Residual degrees of freedom n - p, if both are known."""
        if self.n_observations is None or self.n_params is None:
            return None
        return self.n_observations - self.n_params


class NumericalError(PyAncovaError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during fitting.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when the Gram matrix X'X has |det| below the singularity
    tolerance, which means the design has collinear or redundant predictors.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        determinant: Determinant that failed the check, if computed
        tolerance: Threshold the determinant was compared against
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        determinant: float | None = None,
        tolerance: float | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.determinant = determinant
        self.tolerance = tolerance


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not positive definite.

    Raised when the inverse Gram matrix has a non-positive (or non-finite)
    diagonal entry, so a coefficient variance would be negative or undefined.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        index: Diagonal position that failed
        value: The offending diagonal value
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        index: int | None = None,
        value: float | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.index = index
        self.value = value


class ComparisonError(PyAncovaError):
    """
    Nested-model comparison is undefined.

    Raised by the partial F-test when the number of added parameters or
    the residual degrees of freedom are invalid, or when the F statistic
    itself cannot be formed.

    Attributes:
        statistic: Name of the offending quantity (e.g. 'q', 'df_full', 'F')
        value: Its value
    """

    def __init__(
        self,
        message: str,
        statistic: str | None = None,
        value: float | None = None,
    ):
        super().__init__(message)
        self.statistic = statistic
        self.value = value
