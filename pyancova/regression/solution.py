"""
Regression solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pyancova.core.result import Result


@dataclass(frozen=True)
class LinearParams:
    """
    Parameter payload for an OLS fit.

    This is the immutable data computed by backends. Arrays are read-only
    and owned by the payload; nothing here refers back to the design.
    """
    names: tuple[str, ...]
    coefficients: NDArray[np.floating[Any]]
    standard_errors: NDArray[np.floating[Any]]
    t_statistics: NDArray[np.floating[Any]]
    p_values: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    rss: float
    tss: float
    df_residual: int
    sigma_squared: float
    gram_inverse: NDArray[np.floating[Any]]


@dataclass(frozen=True)
class LinearSolution:
    """
    User-facing regression results.

    Wraps the backend Result and adds derived fit diagnostics and an
    R-style summary.
    """
    _result: Result[LinearParams]

    @property
    def params(self) -> LinearParams:
        return self._result.params

    @property
    def names(self) -> tuple[str, ...]:
        return self._result.params.names

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        """SE(β) = sqrt(diag(s² (X'X)⁻¹))."""
        return self._result.params.standard_errors

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        return self._result.params.t_statistics

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values from the t distribution on df_residual."""
        return self._result.params.p_values

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        return self._result.params.tss

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def sigma_squared(self) -> float:
        """Unbiased error variance RSS / df_residual."""
        return self._result.params.sigma_squared

    @property
    def gram_inverse(self) -> NDArray[np.floating[Any]]:
        """(X'X)⁻¹."""
        return self._result.params.gram_inverse

    @property
    def n_observations(self) -> int:
        return len(self._result.params.residuals)

    @property
    def n_params(self) -> int:
        return len(self._result.params.coefficients)

    @property
    def r_squared(self) -> float:
        if self.tss == 0:
            return 1.0 if self.rss == 0 else 0.0
        return 1.0 - (self.rss / self.tss)

    @property
    def adjusted_r_squared(self) -> float:
        n = self.n_observations
        p = self.n_params
        if self.tss == 0:
            return self.r_squared
        return 1.0 - (1.0 - self.r_squared) * (n - 1) / (n - p)

    @property
    def residual_std_error(self) -> float:
        return float(np.sqrt(self.sigma_squared))

    def coefficient(self, name: str) -> float:
        """Look up a coefficient by column name."""
        try:
            idx = self.names.index(name)
        except ValueError:
            raise KeyError(
                f"No coefficient named {name!r}. Available: {list(self.names)}"
            ) from None
        return float(self.coefficients[idx])

    @property
    def info(self) -> Mapping[str, Any]:
        return self._result.info

    @property
    def timing(self) -> Mapping[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Generate R-style summary output."""
        width = max([len(name) for name in self.names] + [12])
        lines = [
            "Linear Regression Results",
            "=" * (width + 52),
            f"Observations: {self.n_observations}",
            f"Parameters: {self.n_params}",
            f"R-squared: {self.r_squared:.6f}",
            f"Adj. R-squared: {self.adjusted_r_squared:.6f}",
            f"Residual Std. Error: {self.residual_std_error:.6f} on {self.df_residual} DF",
            "",
            "Coefficients:",
            "-" * (width + 52),
            f"{'':<{width}} {'Estimate':>12} {'Std.Error':>12} {'t value':>10} {'Pr(>|t|)':>12}",
            "-" * (width + 52),
        ]

        for name, coef, se, t, p in zip(
            self.names, self.coefficients, self.standard_errors,
            self.t_statistics, self.p_values,
        ):
            lines.append(
                f"{name:<{width}} {coef:12.6f} {se:12.6f} {t:10.3f} {p:12.4e} "
                f"{_significance_stars(p)}"
            )

        lines.append("-" * (width + 52))
        lines.append("Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1")
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self.n_observations}, p={self.n_params}, "
            f"rss={self.rss:.4g}, r_squared={self.r_squared:.4f})"
        )


def _significance_stars(p: float | None) -> str:
    """Return significance stars for a p-value."""
    if p is None or np.isnan(p):
        return ""
    if p < 0.001:
        return "***"
    if p < 0.01:
        return "**"
    if p < 0.05:
        return "*"
    if p < 0.1:
        return "."
    return ""
