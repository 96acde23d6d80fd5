"""
Partial F-test between nested OLS models.

The full model adds q parameters to the reduced one. Under the null
hypothesis that those q parameters are zero,

    F = ((RSS_reduced - RSS_full) / q) / (RSS_full / df_full)

follows an F(q, df_full) distribution.
"""

import numpy as np

from pyancova.core.exceptions import ComparisonError
from pyancova.core.protocols import StatisticsProvider
from pyancova.core.compute.statistics import default_statistics
from pyancova.ancova._common import PartialFParams


def partial_f_test(
    rss_reduced: float,
    rss_full: float,
    df_reduced: int,
    df_full: int,
    q: int,
    statistics: StatisticsProvider | None = None,
) -> PartialFParams:
    """
    Compare a reduced model against the full model that nests it.

    Args:
        rss_reduced: Residual sum of squares of the reduced model
        rss_full: Residual sum of squares of the full model
        df_reduced: Residual degrees of freedom of the reduced model
        df_full: Residual degrees of freedom of the full model
        q: Number of parameters the full model adds
        statistics: Provider for the F CDF. Defaults to ScipyStatistics.

    Returns:
        PartialFParams with F, its upper-tail p-value and (q, df_full)

    Raises:
        ComparisonError: If q <= 0, df_full <= 0, df_full >= df_reduced,
            or F is undefined (both models fit the data exactly)
    """
    if statistics is None:
        statistics = default_statistics()

    if q <= 0:
        raise ComparisonError(
            f"q (parameters added by the full model) must be positive, got {q}",
            statistic='q', value=q,
        )
    if df_full <= 0:
        raise ComparisonError(
            f"df_full must be positive, got {df_full}",
            statistic='df_full', value=df_full,
        )
    if df_full >= df_reduced:
        raise ComparisonError(
            f"df_full ({df_full}) must be smaller than df_reduced ({df_reduced}) "
            f"for nested models",
            statistic='df_full', value=df_full,
        )

    # RSS_full <= RSS_reduced holds exactly for nested designs; rounding can
    # leave a tiny negative difference.
    numerator = max(rss_reduced - rss_full, 0.0) / q
    denominator = rss_full / df_full

    with np.errstate(divide='ignore', invalid='ignore'):
        f_statistic = float(np.float64(numerator) / np.float64(denominator))

    if np.isnan(f_statistic):
        raise ComparisonError(
            "F statistic is undefined: both models fit the data exactly "
            f"(RSS_reduced = {rss_reduced!r}, RSS_full = {rss_full!r})",
            statistic='F', value=f_statistic,
        )

    p_value = 1.0 - statistics.f_cdf(f_statistic, q, df_full)

    return PartialFParams(
        f_statistic=f_statistic,
        p_value=float(p_value),
        df_numerator=int(q),
        df_denominator=int(df_full),
        rss_reduced=float(rss_reduced),
        rss_full=float(rss_full),
    )
