"""
Ordinary least squares regression.

Public API:
    fit(X, y, ...) -> LinearSolution
    build_design(source, predictors, response) -> Design

fit() handles design construction from arrays, backend invocation and
result wrapping. build_design() assembles an intercept-first design from
named columns of a ColumnSource.

Example:
    >>> from pyancova.regression import fit
    >>> result = fit(X, y)
    >>> print(result.coefficients)
    >>> print(result.summary())
"""

from pyancova.regression.design import Design, build_design, INTERCEPT_NAME
from pyancova.regression.solution import LinearSolution, LinearParams
from pyancova.regression.solvers import fit

__all__ = [
    "fit",
    "build_design",
    "Design",
    "INTERCEPT_NAME",
    "LinearSolution",
    "LinearParams",
]
