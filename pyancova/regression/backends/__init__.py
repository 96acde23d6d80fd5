"""
Regression backends.

Available backends:
    NormalEquationsBackend: CPU OLS via (X'X)⁻¹ X'y
"""

from pyancova.regression.backends.cpu import NormalEquationsBackend

__all__ = [
    "NormalEquationsBackend",
]
