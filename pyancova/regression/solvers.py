"""
Solver dispatch for regression.

This module provides the fit() function (public API).
"""

import warnings
from typing import Sequence

from numpy.typing import ArrayLike

from pyancova.core.protocols import Backend, StatisticsProvider
from pyancova.regression.design import Design
from pyancova.regression.solution import LinearParams, LinearSolution
from pyancova.regression.backends.cpu import NormalEquationsBackend


def fit(
    X: ArrayLike | Design,
    y: ArrayLike | None = None,
    *,
    names: Sequence[str] | None = None,
    statistics: StatisticsProvider | None = None,
) -> LinearSolution:
    """
    Fit a linear regression model by ordinary least squares.

    Solves the normal equations (X'X)β = X'y. X is used as given: include a
    column of ones if an intercept is wanted, or build the design with
    pyancova.regression.build_design(), which adds it.

    Args:
        X: A Design, or a design matrix (n x p) as any array-like
        y: Response vector (n,). Required when X is an array.
        names: Column names for X (arrays only). Defaults to x0, x1, ...
        statistics: StatisticsProvider for det/inv/t-CDF. Defaults to
            ScipyStatistics.

    Returns:
        LinearSolution with coefficients, inference and summary methods

    Raises:
        ValidationError: If inputs are invalid
        SingularMatrixError: If |det(X'X)| is below tolerance
        DegreesOfFreedomError: If n <= p

    Example:
        >>> import numpy as np
        >>> from pyancova.regression import fit
        >>>
        >>> X = np.column_stack([np.ones(100), np.random.randn(100, 2)])
        >>> y = X @ [1, 2, 3] + np.random.randn(100) * 0.1
        >>> result = fit(X, y)
        >>> print(result.summary())
    """
    if isinstance(X, Design):
        if y is not None:
            raise ValueError("y must not be given together with a Design")
        design = X
    else:
        if y is None:
            raise ValueError("y required when X is an array")
        design = Design.from_arrays(X, y, names=names)

    backend: Backend[Design, LinearParams] = NormalEquationsBackend(statistics)
    result = backend.solve(design)

    for message in result.warnings:
        warnings.warn(message, RuntimeWarning, stacklevel=2)

    return LinearSolution(_result=result)
