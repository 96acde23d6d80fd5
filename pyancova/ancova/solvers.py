"""
ANCOVA solver dispatch.

Public API:
    ancova(data, dependent=..., covariates=..., group=...) -> AncovaSolution
"""

import warnings
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Sequence

import numpy as np

from pyancova.core.column_types import COLUMN_NUMERIC
from pyancova.core.datasource import DataSource
from pyancova.core.exceptions import ValidationError
from pyancova.core.protocols import Backend, ColumnSource, StatisticsProvider
from pyancova.core.result import Result
from pyancova.core.compute.statistics import default_statistics
from pyancova.core.compute.timing import Timer
from pyancova.ancova._common import AncovaParams
from pyancova.ancova._comparison import partial_f_test
from pyancova.ancova._encoding import encode_treatment, level_counts
from pyancova.ancova.design import AncovaDesign
from pyancova.ancova.solution import AncovaSolution
from pyancova.regression.backends.cpu import NormalEquationsBackend
from pyancova.regression.design import Design, build_design
from pyancova.regression.solution import LinearParams


def ancova(
    data: Any,
    *,
    dependent: str,
    covariates: str | Sequence[str],
    group: str,
    statistics: StatisticsProvider | None = None,
) -> AncovaSolution:
    """
    One-factor Analysis of Covariance.

    Tests whether the group factor affects the dependent variable after
    controlling for the covariates, by comparing two OLS models:

        reduced:  dependent ~ covariates
        full:     dependent ~ covariates + group indicators

    with a partial F-test on q = (number of levels - 1) and the full
    model's residual degrees of freedom.

    Args:
        data: A ColumnSource (e.g. DataSource), a {name: array} mapping, or
            a pandas DataFrame
        dependent: Numeric outcome column
        covariates: Numeric covariate column name, or a list of them
        group: Grouping column. Levels are sorted ascending and the first
            one is the reference level.
        statistics: StatisticsProvider (det, inv, t/F CDFs). Defaults to
            ScipyStatistics.

    Returns:
        AncovaSolution with both models, the partial F-test, group means and
        covariate-adjusted means

    Raises:
        ValidationError: Invalid columns or fewer than 2 group levels
        DegreesOfFreedomError: Too few rows for the full model
        SingularMatrixError: Collinear covariates/indicators
        ComparisonError: The F statistic is undefined

    Examples:
        >>> result = ancova(
        ...     {'score': score, 'age': age, 'arm': arm},
        ...     dependent='score', covariates=['age'], group='arm',
        ... )
        >>> result.p_value
        >>> print(result.summary())
    """
    timer = Timer()
    timer.start()

    with timer.section('validate'):
        source = _as_source(data)
        design = AncovaDesign.from_source(
            source, dependent=dependent, covariates=covariates, group=group,
        )

    with timer.section('encode'):
        group_values = np.asarray(source.column(design.group))
        coding = encode_treatment(group_values, design.group)
        clashes = [name for name in coding.column_names if name in source]
        if clashes:
            raise ValidationError(
                f"indicator column names {clashes} clash with existing columns",
                column=clashes[0],
            )
        numeric = (design.dependent, *design.covariates)
        frame = DataSource.from_columns(
            {name: source.column(name) for name in numeric},
            types={name: COLUMN_NUMERIC for name in numeric},
            n_rows=source.n_rows,
            source='ancova',
        )
        encoded = frame.with_columns(coding.as_columns())

    with timer.section('design'):
        reduced_design = build_design(encoded, design.covariates, design.dependent)
        full_design = build_design(
            encoded, design.covariates + coding.column_names, design.dependent,
        )

    stats = statistics if statistics is not None else default_statistics()
    backend: Backend[Design, LinearParams] = NormalEquationsBackend(stats)
    with timer.section('fit'):
        reduced = backend.solve(reduced_design)
        full = backend.solve(full_design)

    with timer.section('compare'):
        partial = partial_f_test(
            reduced.params.rss,
            full.params.rss,
            reduced.params.df_residual,
            full.params.df_residual,
            q=len(coding.column_names),
            statistics=stats,
        )

    with timer.section('means'):
        y = full_design.y
        counts = level_counts(group_values, coding.levels)
        group_means = {
            level: float(np.mean(y[group_values == level]))
            for level in coding.levels
        }
        covariate_means = {
            name: float(np.mean(encoded.column(name)))
            for name in design.covariates
        }
        adjusted = _adjusted_means(
            full.params, coding.levels, coding.column_names, covariate_means,
        )

    timer.stop()

    warnings_list = [
        f"group level {level!r} has a single observation"
        for level, count in counts.items() if count == 1
    ]
    warnings_list += [f"reduced model: {w}" for w in reduced.warnings]
    warnings_list += [f"full model: {w}" for w in full.warnings]

    params = AncovaParams(
        dependent=design.dependent,
        group=design.group,
        covariates=design.covariates,
        levels=coding.levels,
        dummy_columns=coding.column_names,
        reduced_model=reduced.params,
        full_model=full.params,
        partial_f=partial,
        n_obs=design.n,
        level_counts=MappingProxyType(counts),
        group_means=MappingProxyType(group_means),
        adjusted_means=MappingProxyType(adjusted),
        covariate_means=MappingProxyType(covariate_means),
    )

    result = Result(
        params=params,
        info=MappingProxyType({
            'method': 'nested_ols_partial_f',
            'reference_level': coding.reference,
            'model_results': MappingProxyType({
                'reduced': _model_record(reduced),
                'full': _model_record(full),
            }),
        }),
        timing=MappingProxyType(timer.result()),
        backend_name=backend.name,
        warnings=tuple(warnings_list),
    )

    for message in warnings_list:
        warnings.warn(message, RuntimeWarning, stacklevel=2)

    return AncovaSolution(_result=result)


# =====================================================================
# Internal helpers
# =====================================================================


def _as_source(data: Any) -> ColumnSource:
    """Wrap mappings and DataFrames; pass ColumnSource objects through."""
    if isinstance(data, ColumnSource):
        return data
    if isinstance(data, Mapping):
        return DataSource.from_columns(data)
    if hasattr(data, 'columns') and hasattr(data, 'dtypes'):
        return DataSource.from_dataframe(data)
    raise ValidationError(
        f"data: expected a ColumnSource, a mapping of columns or a pandas "
        f"DataFrame, got {type(data).__name__}"
    )


def _adjusted_means(
    full: LinearParams,
    levels: tuple[Any, ...],
    dummy_columns: tuple[str, ...],
    covariate_means: dict[str, float],
) -> dict[Any, float]:
    """Full-model prediction for each level at the covariate grand means."""
    coef = dict(zip(full.names, full.coefficients.tolist()))
    base = coef[full.names[0]] + sum(
        coef[name] * mean for name, mean in covariate_means.items()
    )
    adjusted = {levels[0]: float(base)}
    for level, name in zip(levels[1:], dummy_columns):
        adjusted[level] = float(base + coef[name])
    return adjusted


def _model_record(result: Result[LinearParams]) -> Mapping[str, Any]:
    """Per-model metadata kept alongside the ANCOVA payload, as read-only copies."""
    timing = result.timing
    return MappingProxyType({
        'info': MappingProxyType(dict(result.info)),
        'timing': None if timing is None else MappingProxyType(dict(timing)),
        'warnings': result.warnings,
    })
