"""
Default statistics provider.

ScipyStatistics satisfies the StatisticsProvider protocol with LAPACK
routines (through numpy.linalg) and scipy.stats distributions. Any object
with the same four methods can be injected instead, e.g. to pin results
against another numerics stack.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyancova.core.exceptions import SingularMatrixError


class ScipyStatistics:
    """
    numpy/scipy implementation of StatisticsProvider.

    Stateless; a single instance can be shared between calls.
    """

    @property
    def name(self) -> str:
        return 'scipy'

    def det(self, matrix: NDArray[np.floating[Any]]) -> float:
        """Determinant via LU factorisation."""
        return float(np.linalg.det(matrix))

    def inv(self, matrix: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        """
        Inverse via LU factorisation.

        Raises:
            SingularMatrixError: If LAPACK reports an exactly singular matrix
        """
        try:
            return np.linalg.inv(matrix)
        except np.linalg.LinAlgError as e:
            raise SingularMatrixError(
                f"Matrix inversion failed: {e}",
                matrix_name="X'X",
            ) from e

    def t_cdf(self, x: NDArray[np.floating[Any]] | float, df: float) -> Any:
        """Student-t CDF with df degrees of freedom (vectorised over x)."""
        return sp_stats.t.cdf(x, df)

    def f_cdf(self, x: float, dfn: float, dfd: float) -> float:
        """F CDF with (dfn, dfd) degrees of freedom."""
        return float(sp_stats.f.cdf(x, dfn, dfd))

    def __repr__(self) -> str:
        return "ScipyStatistics()"


def default_statistics() -> ScipyStatistics:
    """Provider used when the caller doesn't inject one."""
    return ScipyStatistics()
