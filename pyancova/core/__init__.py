"""
Core infrastructure for pyancova.

This module provides shared abstractions, utilities, and compute
infrastructure used by the regression and ancova packages.

Key components:
    protocols: ColumnSource, StatisticsProvider, Backend protocols
    datasource: In-memory ColumnSource adapter
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Statistics provider, timing, tolerances
"""

from pyancova.core.protocols import ColumnSource, StatisticsProvider, Backend
from pyancova.core.result import Result
from pyancova.core.datasource import DataSource
from pyancova.core.exceptions import (
    PyAncovaError,
    ValidationError,
    DimensionError,
    DegreesOfFreedomError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
    ComparisonError,
)

__all__ = [
    # Protocols
    "ColumnSource",
    "StatisticsProvider",
    "Backend",
    # Data
    "DataSource",
    # Result
    "Result",
    # Exceptions
    "PyAncovaError",
    "ValidationError",
    "DimensionError",
    "DegreesOfFreedomError",
    "NumericalError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
    "ComparisonError",
]
