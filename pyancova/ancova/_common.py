"""
Common data types for ANCOVA.

Contains the frozen parameter payloads that go inside Result[P] envelopes.
Each payload is a pure data container: no methods, no computation.
"""

from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any

from pyancova.regression.solution import LinearParams


@dataclass(frozen=True)
class PartialFParams:
    """Partial F-test between the reduced and the full model."""
    f_statistic: float
    p_value: float
    df_numerator: int        # q, parameters added by the full model
    df_denominator: int      # residual df of the full model
    rss_reduced: float
    rss_full: float


@dataclass(frozen=True)
class AncovaParams:
    """
    Parameter payload for a one-factor ANCOVA.

    Fully value based: the models hold their own array copies and nothing
    refers back to the design matrices or the source columns. The
    per-level mappings are read-only views (MappingProxyType).
    """
    dependent: str
    group: str
    covariates: tuple[str, ...]
    levels: tuple[Any, ...]                  # ascending; levels[0] is the reference
    dummy_columns: tuple[str, ...]
    reduced_model: LinearParams              # dependent ~ covariates
    full_model: LinearParams                 # dependent ~ covariates + dummies
    partial_f: PartialFParams
    n_obs: int
    level_counts: Mapping[Any, int]
    group_means: Mapping[Any, float]         # raw outcome mean per level
    adjusted_means: Mapping[Any, float]      # at the covariate grand means
    covariate_means: Mapping[str, float]
