"""
Tests for ancova(), the one-factor Analysis of Covariance entry point.

Validates:
    - The worked six-row example (exact fit of the full model)
    - Agreement with independent least-squares fits
    - Two-level equivalence: F equals the squared t of the group indicator
    - Nested-model invariants (RSS ordering, F >= 0, degrees of freedom)
    - Group means and covariate-adjusted means
    - Input forms (mapping, DataSource, DataFrame, custom ColumnSource)
    - Error and warning behaviour
"""

from dataclasses import FrozenInstanceError
import warnings

import numpy as np
import pytest
from scipy import stats as sp_stats

from pyancova import DataSource
from pyancova.ancova import AncovaSolution, ancova
from pyancova.core.compute import NORMAL_EQUATIONS_FP64, ScipyStatistics
from pyancova.core.exceptions import (
    DegreesOfFreedomError,
    SingularMatrixError,
    ValidationError,
)
from pyancova.regression import LinearSolution


def _lstsq(X, y):
    beta, *_ = np.linalg.lstsq(X, y, rcond=None)
    r = y - X @ beta
    return beta, float(r @ r)


# ═══════════════════════════════════════════════════════════════════════
# Worked example
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.filterwarnings("ignore:full model:RuntimeWarning")
class TestScenario:
    """outcome = age + 30 in group A and age + 35 in group B."""

    @pytest.fixture
    def result(self, scenario_columns):
        return ancova(
            scenario_columns, dependent='outcome', covariates=['age'], group='group',
        )

    def test_returns_solution(self, result):
        assert isinstance(result, AncovaSolution)
        assert isinstance(result.reduced_model, LinearSolution)
        assert isinstance(result.full_model, LinearSolution)

    def test_levels_and_dummies(self, result):
        assert result.levels == ('A', 'B')
        assert result.reference_level == 'A'
        assert result.dummy_columns == ('group_B',)

    def test_model_columns(self, result):
        assert result.reduced_model.names == ('(Intercept)', 'age')
        assert result.full_model.names == ('(Intercept)', 'age', 'group_B')

    def test_full_model_recovers_generating_equation(self, result):
        np.testing.assert_allclose(
            result.full_model.coefficients, [30.0, 1.0, 5.0], atol=1e-8,
        )
        assert result.group_effects['B'] == pytest.approx(5.0, abs=1e-8)

    def test_full_model_fits_exactly(self, result):
        assert result.full_model.rss < 1e-6 * result.reduced_model.rss

    def test_group_effect_significant(self, result):
        assert result.p_value < 0.01
        assert result.f_statistic > 0

    def test_degrees_of_freedom(self, result):
        assert result.reduced_model.df_residual == 4
        assert result.full_model.df_residual == 3
        assert result.partial_f.df_numerator == 1
        assert result.partial_f.df_denominator == 3

    def test_group_means(self, result):
        assert result.group_means['A'] == pytest.approx(51.0)
        assert result.group_means['B'] == pytest.approx(66.0)
        assert dict(result.level_counts) == {'A': 3, 'B': 3}

    def test_adjusted_means_at_mean_age(self, result):
        # mean age = 26
        assert result.adjusted_means['A'] == pytest.approx(56.0, abs=1e-8)
        assert result.adjusted_means['B'] == pytest.approx(61.0, abs=1e-8)

    def test_n_obs(self, result):
        assert result.n_obs == 6


# ═══════════════════════════════════════════════════════════════════════
# Agreement with direct least squares
# ═══════════════════════════════════════════════════════════════════════


class TestThreeGroups:

    @pytest.fixture
    def result(self, three_group_data):
        return ancova(
            three_group_data, dependent='outcome',
            covariates=['age', 'bmi'], group='arm',
        )

    def test_reference_is_first_sorted_level(self, result):
        assert result.levels == ('ctrl', 'drugA', 'drugB')
        assert result.dummy_columns == ('arm_drugA', 'arm_drugB')

    def test_reduced_model_matches_lstsq(self, result, three_group_data):
        d = three_group_data
        X = np.column_stack([np.ones(36), d['age'], d['bmi']])
        beta, rss = _lstsq(X, d['outcome'])
        tol = NORMAL_EQUATIONS_FP64
        np.testing.assert_allclose(
            result.reduced_model.coefficients, beta, rtol=tol.rtol, atol=tol.atol,
        )
        assert result.reduced_model.rss == pytest.approx(rss, rel=1e-8)

    def test_full_model_matches_lstsq(self, result, three_group_data):
        d = three_group_data
        X = np.column_stack([
            np.ones(36), d['age'], d['bmi'],
            d['arm'] == 'drugA', d['arm'] == 'drugB',
        ]).astype(float)
        beta, rss = _lstsq(X, d['outcome'])
        tol = NORMAL_EQUATIONS_FP64
        np.testing.assert_allclose(
            result.full_model.coefficients, beta, rtol=tol.rtol, atol=tol.atol,
        )
        assert result.full_model.rss == pytest.approx(rss, rel=1e-8)

    def test_partial_f_by_hand(self, result):
        rss_r = result.reduced_model.rss
        rss_f = result.full_model.rss
        expected = ((rss_r - rss_f) / 2) / (rss_f / 31)
        assert result.f_statistic == pytest.approx(expected, rel=1e-10)
        assert result.p_value == pytest.approx(sp_stats.f.sf(expected, 2, 31), rel=1e-8)

    def test_nested_invariants(self, result):
        assert result.full_model.rss <= result.reduced_model.rss
        assert result.f_statistic >= 0
        assert 0.0 <= result.p_value <= 1.0
        assert result.partial_f.df_numerator == 2
        assert result.partial_f.df_denominator == 36 - 5
        assert result.reduced_model.df_residual - result.full_model.df_residual == 2

    def test_residuals_orthogonal_to_design(self, result, three_group_data):
        d = three_group_data
        X = np.column_stack([
            np.ones(36), d['age'], d['bmi'],
            d['arm'] == 'drugA', d['arm'] == 'drugB',
        ]).astype(float)
        np.testing.assert_allclose(X.T @ result.full_model.residuals, 0.0, atol=1e-6)

    def test_adjusted_means(self, result, three_group_data):
        d = three_group_data
        b = dict(zip(result.full_model.names, result.full_model.coefficients))
        base = b['(Intercept)'] + b['age'] * d['age'].mean() + b['bmi'] * d['bmi'].mean()
        assert result.adjusted_means['ctrl'] == pytest.approx(base)
        for level in ('drugA', 'drugB'):
            diff = result.adjusted_means[level] - result.adjusted_means['ctrl']
            assert diff == pytest.approx(result.group_effects[level])

    def test_level_counts(self, result):
        assert dict(result.level_counts) == {'ctrl': 12, 'drugA': 12, 'drugB': 12}

    def test_row_order_does_not_matter(self, result, three_group_data, rng):
        perm = rng.permutation(36)
        shuffled = {k: v[perm] for k, v in three_group_data.items()}
        again = ancova(shuffled, dependent='outcome', covariates=['age', 'bmi'], group='arm')
        assert again.f_statistic == pytest.approx(result.f_statistic, rel=1e-8)
        np.testing.assert_allclose(
            again.full_model.coefficients, result.full_model.coefficients,
            rtol=1e-8, atol=1e-10,
        )


class TestTwoGroupEquivalence:
    """With two levels the partial F-test is the t-test on the indicator."""

    @pytest.fixture
    def result(self, two_group_data):
        return ancova(two_group_data, dependent='score', covariates='age', group='arm')

    def test_f_is_t_squared(self, result):
        t = result.full_model.t_statistics[result.full_model.names.index('arm_treated')]
        assert result.f_statistic == pytest.approx(t ** 2, rel=1e-8)

    def test_p_values_agree(self, result):
        p = result.full_model.p_values[result.full_model.names.index('arm_treated')]
        assert result.p_value == pytest.approx(p, rel=1e-6)

    def test_effect_is_adjusted_mean_difference(self, result, two_group_data):
        d = two_group_data
        ctrl = d['arm'] == 'control'
        trt = ~ctrl
        sxy = sxx = 0.0
        for mask in (ctrl, trt):
            dx = d['age'][mask] - d['age'][mask].mean()
            dy = d['score'][mask] - d['score'][mask].mean()
            sxy += float(dx @ dy)
            sxx += float(dx @ dx)
        b_within = sxy / sxx
        expected = (
            (d['score'][trt].mean() - d['score'][ctrl].mean())
            - b_within * (d['age'][trt].mean() - d['age'][ctrl].mean())
        )
        assert result.group_effects['treated'] == pytest.approx(expected, rel=1e-8)
        assert result.full_model.coefficient('age') == pytest.approx(b_within, rel=1e-8)

    def test_detects_true_effect(self, result):
        assert result.p_value < 0.05
        assert result.group_effects['treated'] == pytest.approx(3.0, abs=2.0)


class TestNumericGroups:

    def test_integer_codes(self, rng):
        dose = np.repeat([3, 1, 2], 8)
        x = rng.normal(size=24)
        y = 2.0 * x + 0.5 * dose + rng.normal(size=24)
        result = ancova({'dose': dose, 'x': x, 'y': y},
                        dependent='y', covariates='x', group='dose')
        assert result.levels == (1, 2, 3)
        assert result.dummy_columns == ('dose_2', 'dose_3')
        assert result.level_counts[1] == 8


# ═══════════════════════════════════════════════════════════════════════
# Result envelope
# ═══════════════════════════════════════════════════════════════════════


class TestResultEnvelope:

    @pytest.fixture
    def result(self, two_group_data):
        return ancova(two_group_data, dependent='score', covariates='age', group='arm')

    def test_info(self, result):
        assert result.info['method'] == 'nested_ols_partial_f'
        assert result.info['reference_level'] == 'control'
        assert result.backend_name == 'cpu_normal_equations'
        assert result.reduced_model.info['method'] == 'normal_equations'

    def test_timing_sections(self, result):
        assert {'total_seconds', 'validate', 'encode', 'design', 'fit',
                'compare', 'means'} <= set(result.timing)

    def test_no_warnings(self, result):
        assert result.warnings == ()

    def test_params_frozen(self, result):
        with pytest.raises(FrozenInstanceError):
            result.params.n_obs = 0
        with pytest.raises(FrozenInstanceError):
            result._result = None

    @pytest.mark.parametrize("attr", [
        "level_counts", "group_means", "adjusted_means",
    ])
    def test_level_mappings_read_only(self, result, attr):
        mapping = getattr(result, attr)
        before = mapping['control']
        with pytest.raises(TypeError):
            mapping['control'] = -999.0
        assert getattr(result, attr)['control'] == before

    def test_covariate_means_read_only(self, result):
        with pytest.raises(TypeError):
            result.params.covariate_means['age'] = 0.0

    def test_info_read_only(self, result):
        with pytest.raises(TypeError):
            result.info['method'] = 'other'
        with pytest.raises(TypeError):
            result.info['model_results']['full'] = {}
        with pytest.raises(TypeError):
            result.timing['fit'] = 0.0

    def test_model_info_read_only(self, result):
        determinant = result.full_model.info['determinant']
        with pytest.raises(TypeError):
            result.full_model.info['determinant'] = 0.0
        assert result.full_model.info['determinant'] == determinant
        with pytest.raises(TypeError):
            result.reduced_model.timing['solve'] = 0.0

    def test_model_arrays_read_only(self, result):
        with pytest.raises(ValueError):
            result.full_model.coefficients[0] = 0.0

    def test_input_mutation_does_not_leak(self, two_group_data):
        result = ancova(two_group_data, dependent='score', covariates='age', group='arm')
        before = result.full_model.coefficients.copy()
        two_group_data['score'][:] = 0.0
        np.testing.assert_array_equal(result.full_model.coefficients, before)

    def test_summary(self, result):
        text = result.summary()
        assert "Analysis of Covariance" in text
        assert "Pr(>F)" in text
        assert "Group means:" in text
        assert "Adj. mean" in text
        assert "reference = 'control'" in text
        assert "treated" in text

    def test_repr(self, result):
        assert repr(result).startswith("AncovaSolution(n=30, levels=2")


# ═══════════════════════════════════════════════════════════════════════
# Input forms
# ═══════════════════════════════════════════════════════════════════════


class TestInputForms:

    def test_datasource_matches_mapping(self, two_group_data):
        from_map = ancova(two_group_data, dependent='score', covariates='age', group='arm')
        from_ds = ancova(DataSource.from_columns(two_group_data),
                         dependent='score', covariates='age', group='arm')
        assert from_ds.f_statistic == from_map.f_statistic

    def test_dataframe(self, two_group_data):
        pd = pytest.importorskip('pandas')
        from_map = ancova(two_group_data, dependent='score', covariates='age', group='arm')
        from_df = ancova(pd.DataFrame(two_group_data),
                         dependent='score', covariates='age', group='arm')
        assert from_df.levels == ('control', 'treated')
        assert from_df.f_statistic == pytest.approx(from_map.f_statistic, rel=1e-12)

    def test_custom_column_source(self, scenario_columns):
        class DictSource:
            def __init__(self, data):
                self._data = data

            @property
            def n_rows(self):
                return 6

            def __contains__(self, name):
                return name in self._data

            def columns(self):
                return tuple(self._data)

            def column(self, name):
                return self._data[name]

            def column_type(self, name):
                return 'categorical' if name == 'group' else 'numeric'

        with warnings.catch_warnings():
            warnings.simplefilter("ignore", RuntimeWarning)
            result = ancova(DictSource(scenario_columns),
                            dependent='outcome', covariates='age', group='group')
        assert result.group_effects['B'] == pytest.approx(5.0, abs=1e-8)

    def test_unsupported_input(self):
        with pytest.raises(ValidationError, match="expected a ColumnSource"):
            ancova(42, dependent='y', covariates='x', group='g')


# ═══════════════════════════════════════════════════════════════════════
# Errors and warnings
# ═══════════════════════════════════════════════════════════════════════


class TestErrors:

    def test_collinear_covariates(self, scenario_columns):
        data = dict(scenario_columns, age_copy=scenario_columns['age'].copy())
        with pytest.raises(SingularMatrixError) as exc_info:
            ancova(data, dependent='outcome', covariates=['age', 'age_copy'], group='group')
        assert exc_info.value.matrix_name == "X'X"

    def test_covariate_identical_to_group_indicator(self, scenario_columns):
        data = dict(scenario_columns, site=np.array([0.0, 0.0, 0.0, 1.0, 1.0, 1.0]))
        with pytest.raises(SingularMatrixError):
            ancova(data, dependent='outcome', covariates=['age', 'site'], group='group')

    def test_too_few_rows(self):
        data = {
            'g': np.array(['A', 'A', 'B']),
            'x': np.array([1.0, 2.0, 3.0]),
            'y': np.array([2.0, 3.0, 7.0]),
        }
        with pytest.raises(DegreesOfFreedomError):
            ancova(data, dependent='y', covariates='x', group='g')

    def test_single_group_level(self, scenario_columns):
        data = dict(scenario_columns, group=np.array(['A'] * 6))
        with pytest.raises(ValidationError, match="at least 2 levels"):
            ancova(data, dependent='outcome', covariates='age', group='group')

    def test_missing_column(self, scenario_columns):
        with pytest.raises(ValidationError, match="covariate 'weight' not found"):
            ancova(scenario_columns, dependent='outcome', covariates='weight', group='group')

    def test_non_finite_covariate(self, scenario_columns):
        age = scenario_columns['age'].copy()
        age[2] = np.nan
        data = dict(scenario_columns, age=age)
        with pytest.raises(ValidationError, match="non-finite"):
            ancova(data, dependent='outcome', covariates='age', group='group')

    def test_indicator_name_clash(self, scenario_columns):
        data = dict(scenario_columns, group_B=np.zeros(6))
        with pytest.raises(ValidationError, match="clash"):
            ancova(data, dependent='outcome', covariates='age', group='group')

    def test_unorderable_group(self, scenario_columns):
        data = dict(scenario_columns,
                    group=np.array(['A', 1, 'A', 'B', 2, 'B'], dtype=object))
        with pytest.raises(ValidationError, match="cannot be ordered"):
            ancova(data, dependent='outcome', covariates='age', group='group')


class TestWarnings:

    def test_single_observation_level(self, rng):
        data = {
            'g': np.array(['A', 'A', 'A', 'B', 'B', 'C']),
            'x': rng.normal(size=6),
            'y': rng.normal(size=6),
        }
        with pytest.warns(RuntimeWarning, match="group level 'C' has a single observation"):
            result = ancova(data, dependent='y', covariates='x', group='g')
        assert any("'C'" in w for w in result.warnings)
        assert "Warnings:" in result.summary()


# ═══════════════════════════════════════════════════════════════════════
# Provider injection
# ═══════════════════════════════════════════════════════════════════════


class RecordingStatistics(ScipyStatistics):

    def __init__(self):
        self.calls = []

    def det(self, matrix):
        self.calls.append('det')
        return super().det(matrix)

    def inv(self, matrix):
        self.calls.append('inv')
        return super().inv(matrix)

    def t_cdf(self, x, df):
        self.calls.append('t_cdf')
        return super().t_cdf(x, df)

    def f_cdf(self, x, dfn, dfd):
        self.calls.append('f_cdf')
        return super().f_cdf(x, dfn, dfd)


class TestStatisticsInjection:

    def test_provider_drives_both_fits_and_comparison(self, two_group_data):
        stats = RecordingStatistics()
        ancova(two_group_data, dependent='score', covariates='age', group='arm',
               statistics=stats)
        assert stats.calls == ['det', 'inv', 't_cdf', 'det', 'inv', 't_cdf', 'f_cdf']
