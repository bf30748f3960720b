import numpy as np
import pytest

from stein_shrinkage.config import InvalidParameterError, SimulationSpec
from stein_shrinkage.simulation import (
    draw_grouped_samples,
    mean_squared_error,
    run_simulation,
    shrink_toward_mean,
    shrinkage_factor,
    summarize_groups,
    unbiased_group_variance,
)


def test_reference_scenario_shapes_and_outputs():
    res = run_simulation()
    assert res.spec == SimulationSpec(n_groups=10, n_per_group=5, sigma=5.0, seed=42)
    assert res.true_means.shape == (10,)
    assert res.samples.shape == (10, 5)
    assert res.sample_means.shape == (10,)
    assert res.shrunken_estimates.shape == (10,)
    assert np.isfinite(res.mse_sample) and np.isfinite(res.mse_shrunken)
    assert res.mse_sample >= 0.0 and res.mse_shrunken >= 0.0


def test_true_means_follow_legacy_seeded_generator():
    true_means, _ = draw_grouped_samples(SimulationSpec())
    expected = np.random.RandomState(42).normal(0.0, 10.0, size=10)
    assert np.array_equal(true_means, expected)


def test_samples_are_drawn_group_by_group_after_true_means():
    spec = SimulationSpec(n_groups=4, n_per_group=3, sigma=2.0, seed=7)
    true_means, samples = draw_grouped_samples(spec)
    rng = np.random.RandomState(7)
    rng.normal(0.0, 10.0, size=4)
    for i in range(4):
        assert np.array_equal(samples[i], rng.normal(true_means[i], 2.0, size=3))


def test_run_is_deterministic():
    a = run_simulation(SimulationSpec(seed=123))
    b = run_simulation(SimulationSpec(seed=123))
    assert np.array_equal(a.samples, b.samples)
    assert np.array_equal(a.shrunken_estimates, b.shrunken_estimates)
    assert a.mse_sample == b.mse_sample
    assert a.mse_shrunken == b.mse_shrunken
    assert a.shrinkage_factor == b.shrinkage_factor


def test_different_seeds_give_different_draws():
    a = run_simulation(SimulationSpec(seed=1))
    b = run_simulation(SimulationSpec(seed=2))
    assert not np.array_equal(a.true_means, b.true_means)


def test_derived_quantities_are_consistent():
    res = run_simulation()
    assert np.allclose(res.sample_means, res.samples.mean(axis=1))
    assert res.overall_mean == pytest.approx(float(np.mean(res.sample_means)))
    assert np.allclose(res.group_variances, np.var(res.samples, axis=1, ddof=1))
    assert res.total_deviation == pytest.approx(float(np.sum((res.sample_means - res.overall_mean) ** 2)))
    expected_raw = 25.0 * 7 / res.total_deviation
    assert res.raw_factor == pytest.approx(expected_raw)
    assert res.shrinkage_factor == pytest.approx(min(1.0, max(0.0, expected_raw)))
    assert res.mse_sample == pytest.approx(float(np.mean((res.sample_means - res.true_means) ** 2)))


@pytest.mark.parametrize("rule", ["reference", "james_stein"])
@pytest.mark.parametrize("seed", [0, 1, 42, 2024])
@pytest.mark.parametrize("n_groups,sigma", [(1, 5.0), (3, 5.0), (10, 0.0), (10, 5.0), (25, 30.0)])
def test_factor_bounds_and_convexity(rule, seed, n_groups, sigma):
    res = run_simulation(SimulationSpec(n_groups=n_groups, sigma=sigma, seed=seed, rule=rule))
    assert 0.0 <= res.shrinkage_factor <= 1.0
    for est, x in zip(res.shrunken_estimates, res.sample_means):
        lo = min(res.overall_mean, x)
        hi = max(res.overall_mean, x)
        assert lo - 1e-9 <= est <= hi + 1e-9


def test_degenerate_identical_sample_means_do_not_divide_by_zero():
    samples = np.tile([1.0, 2.0, 3.0], (10, 1))
    g = summarize_groups(samples, sigma=5.0)
    assert g["total_deviation"] == 0.0
    assert g["degenerate"] is True
    assert g["shrinkage_factor"] == 1.0
    assert np.array_equal(g["shrunken_estimates"], g["sample_means"])
    assert np.all(np.isfinite(g["shrunken_estimates"]))


def test_degenerate_factor_for_both_rules():
    means = np.full(6, 0.25)
    assert shrinkage_factor(means, 5.0) == (1.0, 1.0)
    assert shrinkage_factor(means, 5.0, rule="james_stein", n_per_group=5) == (1.0, 1.0)


def test_zero_prior_spread_and_zero_noise_is_degenerate():
    res = run_simulation(SimulationSpec(prior_sd=0.0, sigma=0.0))
    assert res.degenerate is True
    assert res.shrinkage_factor == 1.0
    assert res.mse_sample == 0.0
    assert res.mse_shrunken == 0.0


def test_zero_factor_collapses_to_overall_mean():
    x = np.array([1.0, 4.0, -2.0, 7.5])
    out = shrink_toward_mean(x, 0.0)
    assert np.array_equal(out, np.full(4, np.mean(x)))


def test_full_factor_returns_sample_means_exactly():
    x = np.array([0.1, 0.7, -3.3, 12.9])
    out = shrink_toward_mean(x, 1.0)
    assert np.array_equal(out, x)
    assert out is not x


def test_three_or_fewer_groups_shrink_fully_under_reference_rule():
    raw, f = shrinkage_factor(np.array([1.0, 2.0, 6.0]), 5.0)
    assert raw == 0.0
    assert f == 0.0


def test_reference_factor_is_clamped_above():
    raw, f = shrinkage_factor(np.array([0.0, 0.1, 0.2, 0.3, 0.4]), 5.0)
    assert raw > 1.0
    assert f == 1.0


def test_james_stein_factor_formula():
    x = np.array([-10.0, -5.0, 0.0, 5.0, 10.0, 20.0])
    s = float(np.sum((x - x.mean()) ** 2))
    raw, f = shrinkage_factor(x, 5.0, rule="james_stein", n_per_group=5)
    assert raw == pytest.approx(1.0 - 3 * 5.0 / s)
    assert f == pytest.approx(raw)


def test_james_stein_rule_needs_group_size():
    with pytest.raises(InvalidParameterError):
        shrinkage_factor(np.array([1.0, 2.0, 3.0, 4.0]), 1.0, rule="james_stein")


def test_unknown_rule_rejected():
    with pytest.raises(InvalidParameterError):
        shrinkage_factor(np.array([1.0, 2.0]), 1.0, rule="lasso")


def test_factor_outside_unit_interval_rejected():
    with pytest.raises(InvalidParameterError):
        shrink_toward_mean(np.array([1.0, 2.0]), 1.5)


def test_single_observation_per_group_rejected_before_variance():
    with pytest.raises(InvalidParameterError, match="n_per_group"):
        run_simulation(SimulationSpec(n_per_group=1))
    with pytest.raises(ValueError):
        unbiased_group_variance(np.ones((3, 1)))


def test_unbiased_variance_uses_n_minus_one():
    v = unbiased_group_variance(np.array([[1.0, 3.0], [2.0, 2.0]]))
    assert v.tolist() == [2.0, 0.0]


def test_mean_squared_error_shape_mismatch():
    assert mean_squared_error(np.array([1.0, 3.0]), np.array([0.0, 0.0])) == pytest.approx(5.0)
    with pytest.raises(InvalidParameterError):
        mean_squared_error(np.zeros(3), np.zeros(4))


def test_to_dict_is_plain_python():
    d = run_simulation().to_dict()
    assert d["spec"]["seed"] == 42
    assert isinstance(d["true_means"], list) and len(d["true_means"]) == 10
    assert isinstance(d["shrinkage_factor"], float)
    assert isinstance(d["degenerate"], bool)


@pytest.mark.parametrize("rule", ["reference", "james_stein"])
def test_identical_means_with_inexact_grand_mean_are_degenerate(rule):
    samples = np.tile([-0.2, 0.3, 0.8], (10, 1))
    g = summarize_groups(samples, sigma=5.0, rule=rule)
    assert np.all(g["sample_means"] == g["sample_means"][0])
    assert g["degenerate"] is True
    assert g["total_deviation"] == 0.0
    assert g["shrinkage_factor"] == 1.0
    assert np.array_equal(g["shrunken_estimates"], g["sample_means"])


def test_repeated_point_three_means_do_not_shrink_under_james_stein():
    assert shrinkage_factor(np.full(10, 0.3), 5.0, rule="james_stein", n_per_group=5) == (1.0, 1.0)
