"""
User-facing ANCOVA solution type.

AncovaSolution wraps a Result[AncovaParams] and provides accessors, the
two fitted models as LinearSolution objects, and an R-style summary.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pyancova.core.result import Result
from pyancova.ancova._common import AncovaParams, PartialFParams
from pyancova.regression.solution import LinearSolution, _significance_stars


@dataclass(frozen=True)
class AncovaSolution:
    """
    User-facing result for a one-factor ANCOVA.

    Produced by ancova().
    """
    _result: Result[AncovaParams]

    @property
    def params(self) -> AncovaParams:
        return self._result.params

    @property
    def reduced_model(self) -> LinearSolution:
        """Outcome ~ covariates."""
        return self._model_solution(self._result.params.reduced_model, 'reduced')

    @property
    def full_model(self) -> LinearSolution:
        """Outcome ~ covariates + group indicators."""
        return self._model_solution(self._result.params.full_model, 'full')

    @property
    def partial_f(self) -> PartialFParams:
        return self._result.params.partial_f

    @property
    def f_statistic(self) -> float:
        return self._result.params.partial_f.f_statistic

    @property
    def p_value(self) -> float:
        return self._result.params.partial_f.p_value

    @property
    def levels(self) -> tuple[Any, ...]:
        return self._result.params.levels

    @property
    def reference_level(self) -> Any:
        return self._result.params.levels[0]

    @property
    def dummy_columns(self) -> tuple[str, ...]:
        return self._result.params.dummy_columns

    @property
    def group_effects(self) -> dict[Any, float]:
        """Full-model indicator coefficient per non-reference level."""
        full = self._result.params.full_model
        return {
            level: float(full.coefficients[full.names.index(name)])
            for level, name in zip(self.levels[1:], self.dummy_columns)
        }

    @property
    def level_counts(self) -> Mapping[Any, int]:
        return self._result.params.level_counts

    @property
    def group_means(self) -> Mapping[Any, float]:
        return self._result.params.group_means

    @property
    def adjusted_means(self) -> Mapping[Any, float]:
        return self._result.params.adjusted_means

    @property
    def n_obs(self) -> int:
        return self._result.params.n_obs

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

    def _model_solution(self, params, which: str) -> LinearSolution:
        model_results = self._result.info['model_results']
        return LinearSolution(_result=Result(
            params=params,
            info=model_results[which]['info'],
            timing=model_results[which]['timing'],
            backend_name=self._result.backend_name,
            warnings=model_results[which]['warnings'],
            provenance=self._result.provenance,
        ))

    def summary(self) -> str:
        """Generate R-style ANCOVA summary."""
        p = self._result.params
        pf = p.partial_f
        reduced, full = p.reduced_model, p.full_model
        width = max([len(str(level)) for level in p.levels] + [10])

        lines = [
            "Analysis of Covariance",
            "=" * 72,
            f"Response: {p.dependent}",
            f"Group: {p.group} ({len(p.levels)} levels, reference = {p.levels[0]!r})",
            f"Covariates: {', '.join(p.covariates)}",
            f"Observations: {p.n_obs}",
            "",
            "Model comparison (partial F-test):",
            f"{'Model':<10} {'Res.Df':>8} {'RSS':>14} {'Df':>6} {'F':>12} {'Pr(>F)':>12}",
            "-" * 72,
            f"{'reduced':<10} {reduced.df_residual:>8} {reduced.rss:>14.4f}",
            f"{'full':<10} {full.df_residual:>8} {full.rss:>14.4f} "
            f"{pf.df_numerator:>6} {pf.f_statistic:>12.4f} {pf.p_value:>12.4e} "
            f"{_significance_stars(pf.p_value)}",
            "-" * 72,
            "Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1",
            "",
            "Group means:",
            f"  {'Level':<{width}} {'n':>6} {'Mean':>12} {'Adj. mean':>12}",
        ]
        for level in p.levels:
            lines.append(
                f"  {str(level):<{width}} {p.level_counts[level]:>6} "
                f"{p.group_means[level]:>12.4f} {p.adjusted_means[level]:>12.4f}"
            )
        covs = ", ".join(f"{k} = {v:.4f}" for k, v in p.covariate_means.items())
        lines.append(f"  (adjusted at {covs})")

        if self.warnings:
            lines.append("")
            lines.append("Warnings:")
            for w in self.warnings:
                lines.append(f"  - {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"AncovaSolution(n={self.n_obs}, levels={len(self.levels)}, "
            f"F={self.f_statistic:.4f}, p={self.p_value:.4e})"
        )
