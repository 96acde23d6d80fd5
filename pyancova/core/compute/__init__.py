"""
Shared compute infrastructure for pyancova.

This module provides the default statistics provider, timing utilities and
numeric tolerances shared by the regression and ANCOVA packages.

IMPORTANT: This is NOT where domain-specific backends live. Those go in
{domain}/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    statistics: Default StatisticsProvider (numpy.linalg + scipy.stats)
    timing: Execution timing utilities
    tolerances: Singularity threshold and tolerance tiers
"""

from pyancova.core.compute.statistics import ScipyStatistics, default_statistics
from pyancova.core.compute.timing import Timer
from pyancova.core.compute.tolerances import (
    DETERMINANT_TOLERANCE,
    NORMAL_EQUATIONS_FP64,
    NORMAL_EQUATIONS_ILL_CONDITIONED,
    ToleranceTier,
    select_tolerance,
)

__all__ = [
    # Statistics provider
    "ScipyStatistics",
    "default_statistics",
    # Timing
    "Timer",
    # Tolerances
    "DETERMINANT_TOLERANCE",
    "NORMAL_EQUATIONS_FP64",
    "NORMAL_EQUATIONS_ILL_CONDITIONED",
    "ToleranceTier",
    "select_tolerance",
]
