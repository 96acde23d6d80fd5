"""
ANCOVA design object.

Validates the column roles of an analysis against a ColumnSource before any
numerical work starts.
"""

from dataclasses import dataclass
from typing import Any, Sequence

from pyancova.core.exceptions import ValidationError
from pyancova.core.protocols import ColumnSource
from pyancova.core.validation import (
    check_column_present,
    check_numeric_column,
    check_column_length,
)
from pyancova.ancova._encoding import sorted_levels


@dataclass(frozen=True)
class AncovaDesign:
    """
    Validated column roles for a one-factor ANCOVA.

    Created via from_source(), not directly.
    """
    source: ColumnSource
    dependent: str
    covariates: tuple[str, ...]
    group: str
    levels: tuple[Any, ...]
    n: int

    @staticmethod
    def from_source(
        source: ColumnSource,
        *,
        dependent: str,
        covariates: str | Sequence[str],
        group: str,
    ) -> 'AncovaDesign':
        """
        Check that every referenced column exists and has the right type.

        Args:
            source: Column source
            dependent: Numeric outcome column
            covariates: One numeric covariate name, or a list of them
            group: Grouping column (any type with an ordering)

        Returns:
            AncovaDesign

        Raises:
            ValidationError: Missing/non-numeric column, fewer than 2 group
                levels, or overlapping roles
            DimensionError: A column's length differs from the row count
        """
        if isinstance(covariates, str):
            covariates = (covariates,)
        covariates = tuple(covariates)

        if len(covariates) == 0:
            raise ValidationError("covariates: at least one covariate is required")
        duplicated = sorted({c for c in covariates if covariates.count(c) > 1})
        if duplicated:
            raise ValidationError(
                f"covariates: listed more than once: {duplicated}",
                column=duplicated[0],
            )
        if dependent in covariates:
            raise ValidationError(
                f"dependent variable {dependent!r} is also listed as a covariate",
                column=dependent,
            )
        if group == dependent or group in covariates:
            raise ValidationError(
                f"group variable {group!r} is also used as the dependent "
                f"variable or a covariate",
                column=group,
            )

        check_column_present(source, dependent, 'dependent variable')
        check_numeric_column(source, dependent, 'dependent variable')
        check_column_length(source, dependent)

        for name in covariates:
            check_column_present(source, name, 'covariate')
            check_numeric_column(source, name, 'covariate')
            check_column_length(source, name)

        check_column_present(source, group, 'group variable')
        check_column_length(source, group)
        levels = sorted_levels(source.column(group), group)
        if len(levels) < 2:
            raise ValidationError(
                f"group variable {group!r}: need at least 2 levels, got "
                f"{len(levels)} ({list(levels)})",
                column=group,
            )

        return AncovaDesign(
            source=source,
            dependent=dependent,
            covariates=covariates,
            group=group,
            levels=levels,
            n=source.n_rows,
        )
