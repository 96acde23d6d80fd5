"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def simple_regression_data(rng):
    """Intercept + 2 predictors, low noise."""
    n = 100
    X = np.column_stack([
        np.ones(n),
        rng.standard_normal(n),
        rng.standard_normal(n),
    ])
    beta_true = np.array([1.0, -2.0, 0.5])
    y = X @ beta_true + rng.standard_normal(n) * 0.1
    return X, y, beta_true


@pytest.fixture
def scenario_columns():
    """Six rows, two groups, outcome = age + 30 (A) or age + 35 (B)."""
    return {
        'group': np.array(['A', 'A', 'A', 'B', 'B', 'B']),
        'age': np.array([20.0, 22.0, 21.0, 30.0, 32.0, 31.0]),
        'outcome': np.array([50.0, 52.0, 51.0, 65.0, 67.0, 66.0]),
    }
