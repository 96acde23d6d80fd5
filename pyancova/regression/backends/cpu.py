"""
CPU backend for linear regression via the normal equations.

Solves β = (X'X)⁻¹ X'y with the injected StatisticsProvider doing the
determinant, the inverse and the t distribution. The same (X'X)⁻¹ feeds
the coefficient standard errors, so one inversion serves both estimation
and inference.
"""

from types import MappingProxyType
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pyancova.core.exceptions import (
    DegreesOfFreedomError,
    NotPositiveDefiniteError,
    SingularMatrixError,
)
from pyancova.core.protocols import StatisticsProvider
from pyancova.core.result import Result
from pyancova.core.compute.statistics import default_statistics
from pyancova.core.compute.timing import Timer
from pyancova.core.compute.tolerances import DETERMINANT_TOLERANCE
from pyancova.regression.design import Design
from pyancova.regression.solution import LinearParams


class NormalEquationsBackend:
    """
    CPU backend using the normal equations.

    Implements the Backend protocol for Design -> LinearParams.
    """

    def __init__(
        self,
        statistics: StatisticsProvider | None = None,
        *,
        det_tolerance: float = DETERMINANT_TOLERANCE,
    ):
        self._statistics = statistics if statistics is not None else default_statistics()
        self._det_tolerance = det_tolerance

    @property
    def name(self) -> str:
        return 'cpu_normal_equations'

    def solve(self, design: Design) -> Result[LinearParams]:
        """
        Solve OLS via the normal equations.

        Algorithm:
            1. G = X'X
            2. Reject |det(G)| < det_tolerance
            3. β = G⁻¹ X'y
            4. ŷ = Xβ, r = y - ŷ, RSS = r'r, df = n - p
            5. s² = RSS / df
            6. SE = sqrt(s² diag(G⁻¹))
            7. t = β / SE, p = 2 (1 - F_t(|t|; df))

        Args:
            design: Validated regression design

        Returns:
            Result containing LinearParams

        Raises:
            SingularMatrixError: If X'X fails the determinant check
            DegreesOfFreedomError: If n <= p
            NotPositiveDefiniteError: If (X'X)⁻¹ has a non-positive diagonal
        """
        stats = self._statistics
        timer = Timer()
        timer.start()

        X = design.X
        y = design.y
        n, p = design.n, design.p
        warnings_list: list[str] = []

        # === Gram matrix and singularity check ===
        with timer.section('gram'):
            G = design.gram()
            det = stats.det(G)

        if not np.isfinite(det) or abs(det) < self._det_tolerance:
            raise SingularMatrixError(
                f"X'X is singular or nearly singular: |det| = {abs(det):.3e} "
                f"< {self._det_tolerance:.0e}. The design has collinear or "
                f"redundant predictors among {list(design.names)}.",
                matrix_name="X'X",
                determinant=det,
                tolerance=self._det_tolerance,
            )

        # === Solve ===
        with timer.section('solve'):
            G_inv = stats.inv(G)
            coefficients = G_inv @ design.xty()

        # === Residuals and Fitted Values ===
        with timer.section('residuals'):
            fitted_values = X @ coefficients
            residuals = y - fitted_values
            rss = float(residuals @ residuals)
            tss = float(np.sum((y - np.mean(y)) ** 2))

        df = n - p
        if df <= 0:
            raise DegreesOfFreedomError(
                f"Residual degrees of freedom n - p = {n} - {p} = {df}; "
                f"need more observations than parameters",
                n_observations=n,
                n_params=p,
            )

        # === Inference ===
        with timer.section('inference'):
            sigma_sq = rss / df
            diag = np.diag(G_inv)
            _check_variance_diagonal(diag, design.names)

            standard_errors = np.sqrt(sigma_sq * diag)
            with np.errstate(divide='ignore', invalid='ignore'):
                t_statistics = coefficients / standard_errors
            p_values = 2.0 * (1.0 - np.asarray(stats.t_cdf(np.abs(t_statistics), df)))

        if rss == 0.0:
            warnings_list.append(
                "perfect fit: residual sum of squares is zero, standard errors "
                "are zero and t statistics are infinite"
            )

        timer.stop()

        params = LinearParams(
            names=design.names,
            coefficients=_frozen(coefficients),
            standard_errors=_frozen(standard_errors),
            t_statistics=_frozen(t_statistics),
            p_values=_frozen(p_values),
            fitted_values=_frozen(fitted_values),
            residuals=_frozen(residuals),
            rss=rss,
            tss=tss,
            df_residual=df,
            sigma_squared=float(sigma_sq),
            gram_inverse=_frozen(G_inv),
        )

        info: dict[str, Any] = {
            'method': 'normal_equations',
            'determinant': det,
            'det_tolerance': self._det_tolerance,
            'n': n,
            'p': p,
        }

        return Result(
            params=params,
            info=MappingProxyType(info),
            timing=MappingProxyType(timer.result()),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


def _check_variance_diagonal(
    diag: NDArray[np.floating[Any]],
    names: tuple[str, ...],
) -> None:
    """Every diagonal entry of (X'X)⁻¹ must be finite and positive."""
    bad = np.flatnonzero(~(np.isfinite(diag) & (diag > 0)))
    if len(bad) > 0:
        j = int(bad[0])
        raise NotPositiveDefiniteError(
            f"(X'X)^-1 has non-positive diagonal entry {diag[j]!r} at "
            f"position {j} ({names[j]!r}); its variance would be invalid",
            matrix_name="(X'X)^-1",
            index=j,
            value=float(diag[j]),
        )


def _frozen(values: Any) -> NDArray[np.floating[Any]]:
    """Private float64 read-only copy."""
    arr = np.array(values, dtype=np.float64, copy=True)
    arr.setflags(write=False)
    return arr
