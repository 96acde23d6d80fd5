"""
Regression Design.

Design holds a dense design matrix X and response y. It knows it is
building a regression; the ColumnSource it reads from doesn't.

X is a C-contiguous (row-major) float64 array: row i is observation i,
column j is predictor j. When built from a source, column 0 is the
intercept and the remaining columns follow the requested predictor order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyancova.core.exceptions import DegreesOfFreedomError
from pyancova.core.protocols import ColumnSource
from pyancova.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_2d,
    check_consistent_length,
    check_column_present,
    check_numeric_column,
    check_column_length,
)

INTERCEPT_NAME = '(Intercept)'


@dataclass(frozen=True)
class Design:
    """
    Regression design matrix specification.

    Immutable after construction; X and y are private read-only copies.

    Construction:
        build_design(source, ['age', 'group_B'], 'score')  # intercept + columns
        Design.from_arrays(X, y)                           # X used as given
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _p: int
    _names: tuple[str, ...]

    @classmethod
    def from_arrays(
        cls,
        X: ArrayLike,
        y: ArrayLike,
        *,
        names: Sequence[str] | None = None,
    ) -> Design:
        """
        Build Design directly from arrays.

        No intercept column is added. A too-small n is not rejected here;
        the fitter reports it as a DegreesOfFreedomError.
        """
        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')

        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr.ravel()

        check_2d(X_arr, 'X')
        check_1d(y_arr, 'y')
        check_finite(X_arr, 'X')
        check_finite(y_arr, 'y')
        check_consistent_length(X_arr, y_arr, names=('X', 'y'))

        n, p = X_arr.shape
        if names is None:
            names = tuple(f"x{j}" for j in range(p))
        else:
            names = tuple(names)
            if len(names) != p:
                raise ValueError(
                    f"names has {len(names)} entries, X has {p} columns"
                )

        return cls._build(X_arr, y_arr, names)

    @classmethod
    def _build(
        cls,
        X: NDArray[np.floating[Any]],
        y: NDArray[np.floating[Any]],
        names: tuple[str, ...],
    ) -> Design:
        X = np.array(X, dtype=np.float64, order='C', copy=True)
        y = np.array(y, dtype=np.float64, copy=True)
        X.setflags(write=False)
        y.setflags(write=False)
        n, p = X.shape
        return cls(_X=X, _y=y, _n=n, _p=p, _names=names)

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of columns, intercept included."""
        return self._p

    @property
    def names(self) -> tuple[str, ...]:
        """Column names, in column order."""
        return self._names

    @property
    def has_intercept(self) -> bool:
        return self._p > 0 and self._names[0] == INTERCEPT_NAME

    def gram(self) -> NDArray[np.floating[Any]]:
        """Compute X'X."""
        return self._X.T @ self._X

    def xty(self) -> NDArray[np.floating[Any]]:
        """Compute X'y."""
        return self._X.T @ self._y


def build_design(
    source: ColumnSource,
    predictors: Sequence[str],
    response: str,
) -> Design:
    """
    Assemble an intercept-first design matrix from named columns.

    Args:
        source: Column source holding the predictors and the response
        predictors: Ordered predictor names (covariates and/or indicators)
        response: Outcome column name

    Returns:
        Design with X of shape (n, len(predictors) + 1)

    Raises:
        ValidationError: If a column is missing, not numeric, or non-finite
        DimensionError: If a column's length differs from source.n_rows
        DegreesOfFreedomError: If n <= len(predictors) + 1
    """
    predictors = list(predictors)

    check_column_present(source, response, 'response')
    check_numeric_column(source, response, 'response')
    check_column_length(source, response)
    for name in predictors:
        check_column_present(source, name, 'predictor')
        check_numeric_column(source, name, 'predictor')
        check_column_length(source, name)

    n = source.n_rows
    p = len(predictors) + 1
    if n <= p:
        raise DegreesOfFreedomError(
            f"{n} observations leave no residual degrees of freedom for "
            f"{p} parameters (intercept + {p - 1} predictors); need n > {p}",
            n_observations=n,
            n_params=p,
        )

    X = np.ones((n, p), dtype=np.float64)
    for j, name in enumerate(predictors, start=1):
        col = check_array(source.column(name), name)
        check_finite(col, name)
        X[:, j] = col

    y = check_array(source.column(response), response)
    check_finite(y, response)

    return Design._build(X, y, (INTERCEPT_NAME, *predictors))
