"""
Treatment (dummy) coding of a grouping column.

Levels are the distinct values sorted by their natural ordering: numbers
numerically, strings lexicographically. The first level is the reference
(baseline) and is absorbed into the intercept; every other level gets one
0/1 indicator column.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyancova.core.exceptions import ValidationError
from pyancova.core.validation import check_1d, check_finite


@dataclass(frozen=True)
class TreatmentCoding:
    """
    Encoded grouping factor.

    Attributes:
        factor: Name of the grouping column
        levels: All levels in ascending order; levels[0] is the reference
        column_names: f"{factor}_{level}" for each non-reference level
            (integral float levels are written without the ".0")
        indicators: (n, k-1) float64 indicator matrix, columns in level order
    """
    factor: str
    levels: tuple[Any, ...]
    column_names: tuple[str, ...]
    indicators: NDArray[np.floating[Any]]

    @property
    def reference(self) -> Any:
        """The baseline level (first in sort order)."""
        return self.levels[0]

    @property
    def n_levels(self) -> int:
        return len(self.levels)

    def as_columns(self) -> dict[str, NDArray[np.floating[Any]]]:
        """Indicator columns keyed by column name."""
        return {
            name: self.indicators[:, j]
            for j, name in enumerate(self.column_names)
        }


def sorted_levels(values: ArrayLike, name: str) -> tuple[Any, ...]:
    """
    Distinct values of a grouping column in ascending natural order.

    Raises:
        ValidationError: If the values can't be ordered (mixed types, None)
            or contain NaN/Inf
    """
    arr = np.asarray(values)
    check_1d(arr, name)
    if arr.dtype != np.bool_ and np.issubdtype(arr.dtype, np.number):
        check_finite(arr, name)

    try:
        levels = np.unique(arr)
    except TypeError as e:
        raise ValidationError(
            f"{name}: group values cannot be ordered ({e})",
            column=name,
        ) from e

    return tuple(levels.tolist())


def encode_treatment(values: ArrayLike, name: str) -> TreatmentCoding:
    """
    Treatment (dummy) coding for a single grouping column.

    Args:
        values: 1D array of group labels (strings, integers, ...)
        name: Column name, used as the indicator-name prefix

    Returns:
        TreatmentCoding with k levels and k-1 indicator columns

    Raises:
        ValidationError: If fewer than 2 distinct levels exist
    """
    arr = np.asarray(values)
    levels = sorted_levels(arr, name)
    if len(levels) < 2:
        raise ValidationError(
            f"{name}: need at least 2 group levels, got {len(levels)} "
            f"({list(levels)}); a group effect is undefined",
            column=name,
        )

    contrasts = levels[1:]
    X = np.zeros((len(arr), len(contrasts)), dtype=np.float64)
    for j, level in enumerate(contrasts):
        X[:, j] = (arr == level).astype(np.float64)
    X.setflags(write=False)

    return TreatmentCoding(
        factor=name,
        levels=levels,
        column_names=tuple(f"{name}_{_level_label(level)}" for level in contrasts),
        indicators=X,
    )


def _level_label(level: Any) -> str:
    """Label used in indicator names; integral floats print without '.0'."""
    if isinstance(level, float) and level.is_integer():
        return str(int(level))
    return str(level)


def level_counts(values: ArrayLike, levels: tuple[Any, ...]) -> dict[Any, int]:
    """Number of rows in each level."""
    arr = np.asarray(values)
    return {level: int(np.sum(arr == level)) for level in levels}
