"""
Column type constants for pyancova.

This module is the SINGLE SOURCE OF TRUTH for declared column types.
Import from here, never use raw strings.

Usage:
    from pyancova.core.column_types import COLUMN_NUMERIC

    if source.column_type('age') != COLUMN_NUMERIC:
        ...
"""

import numpy as np

# Numeric measurements (outcomes, covariates, indicator columns)
COLUMN_NUMERIC = 'numeric'

# Labels (grouping factors)
COLUMN_CATEGORICAL = 'categorical'

ALL_COLUMN_TYPES = frozenset({
    COLUMN_NUMERIC,
    COLUMN_CATEGORICAL,
})


def infer_column_type(values: np.ndarray) -> str:
    """
    Infer the declared type of a column from its dtype.

    Booleans are treated as labels, not numbers.
    """
    if values.dtype != np.bool_ and np.issubdtype(values.dtype, np.number):
        return COLUMN_NUMERIC
    return COLUMN_CATEGORICAL


__all__ = [
    'COLUMN_NUMERIC',
    'COLUMN_CATEGORICAL',
    'ALL_COLUMN_TYPES',
    'infer_column_type',
]
