"""
Numerical thresholds and tolerance tiers.

DETERMINANT_TOLERANCE is the singularity threshold for the Gram matrix
X'X: fitting fails when |det(X'X)| falls below it. The check is on the
determinant, not on a condition number, so near-collinear designs whose
determinant stays above the threshold are fitted.

The ToleranceTier objects define how closely computed quantities are
expected to match reference values. Used by the test suite.
"""

from dataclasses import dataclass


DETERMINANT_TOLERANCE = 1e-12


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Well-conditioned designs solved through the normal equations
NORMAL_EQUATIONS_FP64 = ToleranceTier(
    rtol=1e-8,
    atol=1e-10,
    name='normal_equations_fp64',
    description='Double precision normal equations, well-conditioned design',
)

# Normal equations square the condition number of X, so ill-conditioned
# designs lose roughly twice as many digits as a QR solve would.
NORMAL_EQUATIONS_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-4,
    atol=1e-6,
    name='normal_equations_ill_conditioned',
    description='Double precision normal equations, cond(X) > 1e4',
)


def select_tolerance(is_ill_conditioned: bool = False) -> ToleranceTier:
    """Select the tolerance tier for a normal-equations fit."""
    if is_ill_conditioned:
        return NORMAL_EQUATIONS_ILL_CONDITIONED
    return NORMAL_EQUATIONS_FP64
