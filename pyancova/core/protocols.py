"""
Core protocols for pyancova.

These define the structural interfaces the numerical core depends on. The
core never touches a concrete table or a concrete numerics library; it talks
to whatever object satisfies these protocols.

Design Principles:
    - Minimal contracts: prescribe only what the core actually calls
    - Structural typing (Protocol) so adapters need no base class
    - Synchronous: providers are bound before any computation starts
"""

from typing import Protocol, TypeVar, Any, TYPE_CHECKING, runtime_checkable

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from pyancova.core.result import Result

# Type variables for generic payloads
P = TypeVar('P')  # Parameter payload type
D = TypeVar('D')  # Design type


@runtime_checkable
class ColumnSource(Protocol):
    """
    Read-only columnar access to a table.

    The tabular store itself lives outside the core. An adapter exposes
    named retrieval, a declared semantic type per column, and the row count.
    """

    @property
    def n_rows(self) -> int:
        """Number of rows every column is expected to have."""
        ...

    def __contains__(self, name: str) -> bool:
        ...

    def columns(self) -> tuple[str, ...]:
        """Names of all available columns, in insertion order."""
        ...

    def column(self, name: str) -> NDArray[Any]:
        """
        Return the named column as an ordered 1D array.

        Raises:
            KeyError: If the column doesn't exist
        """
        ...

    def column_type(self, name: str) -> str:
        """
        Declared type of the named column.

        Returns one of the constants in pyancova.core.column_types.
        """
        ...


@runtime_checkable
class StatisticsProvider(Protocol):
    """
    Distributional and dense linear-algebra primitives.

    All methods are pure functions. The core treats them as already
    resolved capabilities and never suspends waiting for them.
    """

    def det(self, matrix: NDArray[np.floating[Any]]) -> float:
        """Determinant of a dense square matrix."""
        ...

    def inv(self, matrix: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        """Inverse of a dense square matrix."""
        ...

    def t_cdf(self, x: NDArray[np.floating[Any]] | float, df: float) -> Any:
        """Student-t cumulative distribution function."""
        ...

    def f_cdf(self, x: float, dfn: float, dfd: float) -> float:
        """F cumulative distribution function."""
        ...


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.

    A backend takes a validated design and produces a Result envelope with a
    domain-specific parameter payload. Backends are stateless apart from the
    providers handed to them at construction time.

    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{algorithm}', e.g. 'cpu_normal_equations'.
        """
        ...

    def solve(self, design: D) -> 'Result[P]':
        """
        Execute the statistical computation.

        Raises:
            NumericalError: If numerical issues prevent a solution
            ValidationError: If the design is invalid for this backend
        """
        ...
