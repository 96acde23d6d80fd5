"""
Analysis of Covariance (ANCOVA).

Public API:
    ancova(data, dependent, covariates, group, ...) -> AncovaSolution
    partial_f_test(rss_reduced, rss_full, df_reduced, df_full, q) -> PartialFParams
    encode_treatment(values, name) -> TreatmentCoding
"""

from pyancova.ancova.solvers import ancova
from pyancova.ancova.solution import AncovaSolution
from pyancova.ancova.design import AncovaDesign
from pyancova.ancova._common import AncovaParams, PartialFParams
from pyancova.ancova._comparison import partial_f_test
from pyancova.ancova._encoding import TreatmentCoding, encode_treatment

__all__ = [
    "ancova",
    "partial_f_test",
    "encode_treatment",
    "AncovaSolution",
    "AncovaDesign",
    "AncovaParams",
    "PartialFParams",
    "TreatmentCoding",
]
