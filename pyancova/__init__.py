"""
pyancova: Analysis of Covariance through nested OLS models.

Tests whether a categorical grouping factor affects a numeric outcome after
controlling for numeric covariates. The reduced model (outcome ~ covariates)
and the full model (outcome ~ covariates + group indicators) are fitted by
the normal equations and compared with a partial F-test.

Submodules:
    regression: OLS design construction and fitting
    ancova: group encoding, nested-model comparison, the ancova() entry point

Example:
    >>> from pyancova.ancova import ancova
    >>> result = ancova(df, dependent='score', covariates='age', group='arm')
    >>> print(result.summary())
"""

__version__ = "0.1.0"

from pyancova.core.datasource import DataSource
from pyancova import regression
from pyancova import ancova

__all__ = [
    "__version__",
    "DataSource",
    "regression",
    "ancova",
]
