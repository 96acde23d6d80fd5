"""
In-memory DataSource for pyancova.

DataSource is the "I have columns" abstraction. It implements the
ColumnSource protocol and doesn't know or care what analysis consumes it.

Usage:
    from pyancova import DataSource

    ds = DataSource.from_columns({'age': age, 'group': group, 'score': score})
    ds = DataSource.from_arrays(age=age, group=group, score=score)
    ds = DataSource.from_dataframe(df)
    ds = DataSource.from_file("trial.csv")

    ds.columns()             # ('age', 'group', 'score')
    ds.column('age')         # read-only ndarray
    ds.column_type('group')  # 'categorical'
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyancova.core.exceptions import ValidationError
from pyancova.core.column_types import (
    ALL_COLUMN_TYPES,
    COLUMN_CATEGORICAL,
    COLUMN_NUMERIC,
    infer_column_type,
)
from pyancova.core.validation import check_1d

if TYPE_CHECKING:
    import pandas as pd


@dataclass(frozen=True)
class DataSource:
    """
    Immutable columnar container. Analysis-agnostic.

    Construct via factory classmethods, not directly. Every stored column is
    a private read-only copy, so later mutation of the caller's arrays can't
    leak into an analysis.
    """
    _data: dict[str, NDArray[Any]]
    _types: dict[str, str]
    _n_rows: int
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Column Access ===

    def columns(self) -> tuple[str, ...]:
        """Names of all columns, in insertion order."""
        return tuple(self._data.keys())

    def column(self, name: str) -> NDArray[Any]:
        """
        Access a named column.

        Raises:
            KeyError: If the column is not found, listing available columns
        """
        if name not in self._data:
            raise KeyError(
                f"DataSource has no column '{name}'. Available: {list(self._data)}"
            )
        return self._data[name]

    def column_type(self, name: str) -> str:
        """Declared type of the named column ('numeric' or 'categorical')."""
        if name not in self._types:
            raise KeyError(
                f"DataSource has no column '{name}'. Available: {list(self._data)}"
            )
        return self._types[name]

    def __getitem__(self, name: str) -> NDArray[Any]:
        return self.column(name)

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __len__(self) -> int:
        return self._n_rows

    # === Properties ===

    @property
    def n_rows(self) -> int:
        """Number of rows."""
        return self._n_rows

    @property
    def metadata(self) -> dict[str, Any]:
        return self._metadata.copy()

    # === Derivation ===

    def with_columns(
        self,
        columns: Mapping[str, ArrayLike],
        *,
        types: Mapping[str, str] | None = None,
    ) -> DataSource:
        """
        Return a new DataSource with extra (or replaced) columns.

        The receiver is left untouched.
        """
        data = dict(self._data)
        col_types = dict(self._types)
        for name, values in columns.items():
            arr, declared = _prepare_column(name, values, (types or {}).get(name))
            data[name] = arr
            col_types[name] = declared
        metadata = dict(self._metadata)
        metadata['derived'] = True
        return DataSource(
            _data=data, _types=col_types, _n_rows=self._n_rows, _metadata=metadata,
        )

    # === Factory Methods ===

    @classmethod
    def from_columns(
        cls,
        columns: Mapping[str, ArrayLike],
        *,
        types: Mapping[str, str] | None = None,
        n_rows: int | None = None,
        source: str = 'columns',
    ) -> DataSource:
        """
        Construct from a mapping of column name to 1D array-like.

        Args:
            columns: {name: values}
            types: Optional declared types overriding dtype inference
            n_rows: Expected row count. Defaults to the first column's length.
            source: Label stored in metadata
        """
        types = dict(types or {})
        unknown = set(types) - set(columns)
        if unknown:
            raise ValidationError(
                f"types given for unknown columns: {sorted(unknown)}"
            )

        data: dict[str, NDArray[Any]] = {}
        col_types: dict[str, str] = {}
        for name, values in columns.items():
            arr, declared = _prepare_column(name, values, types.get(name))
            data[name] = arr
            col_types[name] = declared

        if n_rows is None:
            n_rows = len(next(iter(data.values()))) if data else 0

        return cls(
            _data=data,
            _types=col_types,
            _n_rows=int(n_rows),
            _metadata={'source': source, 'columns': list(data)},
        )

    @classmethod
    def from_arrays(cls, **columns: ArrayLike) -> DataSource:
        """Construct from keyword arrays, inferring column types."""
        return cls.from_columns(columns, source='arrays')

    @classmethod
    def from_dataframe(
        cls,
        df: 'pd.DataFrame',
        *,
        types: Mapping[str, str] | None = None,
        source_path: str | None = None,
    ) -> DataSource:
        """
        Construct from a pandas DataFrame.

        Numeric pandas dtypes become numeric columns; object, string,
        categorical and boolean dtypes become categorical columns.
        """
        import pandas as pd

        declared = dict(types or {})
        columns: dict[str, NDArray[Any]] = {}
        for col in df.columns:
            series = df[col]
            if col not in declared:
                is_numeric = (
                    pd.api.types.is_numeric_dtype(series)
                    and not pd.api.types.is_bool_dtype(series)
                )
                if is_numeric:
                    declared[col] = COLUMN_NUMERIC
                else:
                    declared[col] = COLUMN_CATEGORICAL
            if declared[col] == COLUMN_NUMERIC:
                columns[str(col)] = series.to_numpy(dtype=np.float64, na_value=np.nan)
            else:
                columns[str(col)] = series.to_numpy(dtype=object)

        ds = cls.from_columns(
            columns,
            types={str(k): v for k, v in declared.items()},
            n_rows=len(df),
            source='dataframe',
        )
        if source_path:
            ds._metadata['source_path'] = source_path
        return ds

    @classmethod
    def from_file(cls, path: str | Path, *, columns: list[str] | None = None) -> DataSource:
        """Construct from a delimited text file (CSV, TSV) via pandas."""
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix == '.csv':
            import pandas as pd
            df = pd.read_csv(path, usecols=columns)
        elif suffix == '.tsv':
            import pandas as pd
            df = pd.read_csv(path, sep='\t', usecols=columns)
        else:
            raise ValidationError(f"Unknown file format: {suffix}")
        return cls.from_dataframe(df, source_path=str(path))

    @classmethod
    def build(cls, *args, **kwargs) -> DataSource:
        """
        Convenience factory that dispatches to the appropriate from_* method.

        Examples:
            DataSource.build("trial.csv")       # from_file
            DataSource.build(df)                # from_dataframe
            DataSource.build({'x': x})          # from_columns
            DataSource.build(x=x, g=g)          # from_arrays
        """
        if args:
            first = args[0]
            if isinstance(first, (str, Path)):
                return cls.from_file(first, **kwargs)
            if isinstance(first, Mapping):
                return cls.from_columns(first, **kwargs)
            if hasattr(first, 'columns') and hasattr(first, 'dtypes'):
                return cls.from_dataframe(first, **kwargs)
            raise ValidationError(
                f"Cannot build a DataSource from {type(first).__name__}"
            )
        return cls.from_arrays(**kwargs)


def _prepare_column(
    name: str,
    values: ArrayLike,
    declared: str | None,
) -> tuple[NDArray[Any], str]:
    """Copy a column into a read-only 1D array and settle its type."""
    arr = np.array(values, copy=True)
    check_1d(arr, name)

    if declared is None:
        declared = infer_column_type(arr)
    elif declared not in ALL_COLUMN_TYPES:
        raise ValidationError(
            f"{name}: unknown column type {declared!r}, "
            f"expected one of {sorted(ALL_COLUMN_TYPES)}",
            column=name,
        )

    if declared == COLUMN_NUMERIC and np.issubdtype(arr.dtype, np.integer):
        arr = arr.astype(np.float64)

    arr.setflags(write=False)
    return arr, declared
