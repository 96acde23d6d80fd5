"""
Fixtures for ANCOVA tests.
"""

import numpy as np
import pytest


@pytest.fixture
def two_group_data(rng):
    """Two arms, one covariate, true group effect 3.0 and slope 0.8."""
    n_per = 15
    group = np.repeat(['control', 'treated'], n_per)
    age = rng.normal(40.0, 8.0, size=2 * n_per)
    score = (
        10.0 + 0.8 * age + 3.0 * (group == 'treated')
        + rng.normal(0.0, 2.0, size=2 * n_per)
    )
    return {'arm': group, 'age': age, 'score': score}


@pytest.fixture
def three_group_data(rng):
    """Three arms, two covariates, small group effects."""
    n_per = 12
    arm = np.tile(['drugB', 'ctrl', 'drugA'], n_per)
    age = rng.normal(50.0, 10.0, size=3 * n_per)
    bmi = rng.normal(25.0, 3.0, size=3 * n_per)
    effect = np.select([arm == 'drugA', arm == 'drugB'], [1.5, -0.5], 0.0)
    outcome = 5.0 + 0.3 * age - 0.4 * bmi + effect + rng.normal(0.0, 1.5, size=3 * n_per)
    return {'arm': arm, 'age': age, 'bmi': bmi, 'outcome': outcome}
