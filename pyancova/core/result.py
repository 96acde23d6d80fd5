"""
Generic result container for all pyancova computations.

The Result class is the envelope every backend returns. It gives shared
tooling a uniform place for timing, warnings and provenance while each
domain defines its own parameter payload.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, determinant, ...)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility; solvers pass info and
      timing as read-only mappings
"""

import platform
from dataclasses import dataclass, field
from collections.abc import Mapping
from types import MappingProxyType
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


def _default_provenance() -> Mapping[str, str]:
    """Versions of the software stack that produced a result."""
    import numpy
    import scipy

    from pyancova import __version__

    return MappingProxyType({
        'pyancova': __version__,
        'numpy': numpy.__version__,
        'scipy': scipy.__version__,
        'python': platform.python_version(),
    })


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for statistical computations.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific parameters (coefficients, F statistic, ...)
        info: Structured metadata (method, determinant, ...)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation
        provenance: Package versions used for the computation

    Examples:
        >>> Result(
        ...     params=LinearParams(...),
        ...     info={'method': 'normal_equations', 'determinant': 42.0},
        ...     timing={'total_seconds': 0.001},
        ...     backend_name='cpu_normal_equations'
        ... )
    """
    params: P
    info: Mapping[str, Any]
    timing: Mapping[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    provenance: Mapping[str, str] = field(default_factory=_default_provenance)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
