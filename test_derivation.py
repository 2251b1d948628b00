"""Tests for the derivation engine."""
import math
import warnings

import numpy as np
import pytest

from geomech.derivation import (
    compute_parameters,
    impedance_gradient,
    min_max_normalize,
    poisson_from_moduli,
    vertical_stress,
)
from geomech.models import OUTPUT_FIELDS, SENTINEL, PreparedSample, is_sentinel


def _samples(*values):
    return [PreparedSample(*v) for v in values]


@pytest.fixture
def two_samples():
    return _samples((0.0, 2500.0, 3000.0, 1500.0), (10.0, 2600.0, 3200.0, 1600.0))


def test_reference_pair(two_samples):
    first, second = compute_parameters(two_samples)

    assert first.vertical_stress == 0.0
    assert second.vertical_stress == pytest.approx(250155.0)

    assert first.shear_modulus == pytest.approx(5.625e9)
    assert first.bulk_modulus == pytest.approx(1.5e10)
    assert first.lame_lambda == pytest.approx(1.125e10)
    assert first.poisson_ratio == pytest.approx(1.0 / 3.0)
    assert first.youngs_modulus == pytest.approx(1.5e10)
    assert first.acoustic_impedance == pytest.approx(7.5e6)
    assert first.shear_impedance == pytest.approx(3.75e6)
    assert first.p_modulus == pytest.approx(2.25e10)
    assert first.vp_vs_ratio == pytest.approx(2.0)
    assert first.lambda_over_mu == pytest.approx(2.0)
    assert first.poisson_from_moduli == pytest.approx(1.0 / 3.0)

    assert second.acoustic_impedance == pytest.approx(8.32e6)
    assert second.youngs_modulus == pytest.approx(2.0 * 6.656e9 * 4.0 / 3.0)


def test_impedance_differences(two_samples):
    first, second = compute_parameters(two_samples)
    assert first.delta_impedance_prev == 0.0
    assert second.delta_impedance_prev == pytest.approx(8.2e5)
    # two samples: forward and backward differences coincide
    assert first.impedance_gradient == pytest.approx(8.2e4)
    assert second.impedance_gradient == pytest.approx(8.2e4)


def test_brittleness_spans_unit_interval(two_samples):
    first, second = compute_parameters(two_samples)
    assert first.brittleness_e == 0.0
    assert second.brittleness_e == 1.0


def test_output_order(two_samples):
    result = compute_parameters(two_samples)[0]
    assert tuple(result.as_dict().keys()) == OUTPUT_FIELDS


def test_inputs_are_carried_through(two_samples):
    result = compute_parameters(two_samples)[1]
    assert (result.depth, result.density, result.vp, result.vs) == (10.0, 2600.0, 3200.0, 1600.0)


def test_empty_input():
    assert compute_parameters([]) == []


def test_single_sample():
    (only,) = compute_parameters(_samples((1000.0, 2500.0, 3000.0, 1500.0)))
    assert only.vertical_stress == 0.0
    assert only.delta_impedance_prev == 0.0
    assert is_sentinel(only.impedance_gradient)
    # one distinct Young's modulus: nothing to normalize against
    assert is_sentinel(only.brittleness_e)
    assert only.p_modulus == pytest.approx(2.25e10)


def test_stress_is_zero_at_shallowest_sample():
    results = compute_parameters(_samples(
        (1000.0, 2000.0, 3000.0, 1500.0),
        (1010.0, 2000.0, 3000.0, 1500.0),
        (1030.0, 2000.0, 3000.0, 1500.0),
    ))
    stress = [r.vertical_stress for r in results]
    assert stress[0] == 0.0
    assert stress[1] == pytest.approx(2000.0 * 9.81 * 10.0)
    assert stress[2] == pytest.approx(2000.0 * 9.81 * 30.0)


def test_equal_velocities_only_affect_poisson_and_young():
    results = compute_parameters(_samples(
        (0.0, 2500.0, 2000.0, 1000.0),
        (10.0, 2500.0, 2000.0, 2000.0),
        (20.0, 2600.0, 3000.0, 1500.0),
    ))
    degenerate = results[1]
    assert is_sentinel(degenerate.poisson_ratio)
    assert is_sentinel(degenerate.youngs_modulus)
    assert is_sentinel(degenerate.brittleness_e)
    assert degenerate.vp_vs_ratio == pytest.approx(1.0)
    assert degenerate.lambda_over_mu == pytest.approx(-1.0)
    assert degenerate.shear_modulus == pytest.approx(1e10)
    assert not is_sentinel(degenerate.vertical_stress)
    assert not is_sentinel(degenerate.impedance_gradient)

    # brittleness is normalized over the remaining samples
    assert {results[0].brittleness_e, results[2].brittleness_e} == {0.0, 1.0}


def test_zero_shear_velocity():
    (only,) = compute_parameters(_samples((0.0, 2500.0, 3000.0, 0.0)))
    assert only.shear_modulus == 0.0
    assert only.poisson_ratio == pytest.approx(0.5)
    assert is_sentinel(only.vp_vs_ratio)
    assert is_sentinel(only.lambda_over_mu)


def test_constant_young_gives_undefined_brittleness():
    results = compute_parameters(_samples(
        (0.0, 2500.0, 3000.0, 1500.0),
        (10.0, 2500.0, 3000.0, 1500.0),
    ))
    assert all(is_sentinel(r.brittleness_e) for r in results)


def test_centered_gradient_for_interior_samples():
    depth = np.array([0.0, 10.0, 30.0])
    z = np.array([1.0, 2.0, 5.0])
    grad = impedance_gradient(depth, z)
    assert grad[0] == pytest.approx(0.1)
    assert grad[1] == pytest.approx(4.0 / 30.0)
    assert grad[2] == pytest.approx(3.0 / 20.0)


def test_gradient_undefined_for_zero_span():
    depth = np.array([5.0, 5.0, 5.0, 8.0])
    z = np.array([1.0, 2.0, 3.0, 4.0])
    grad = impedance_gradient(depth, z)
    assert math.isnan(grad[0])
    assert math.isnan(grad[1])
    assert grad[2] == pytest.approx(2.0 / 3.0)
    assert grad[3] == pytest.approx(1.0 / 3.0)


def test_duplicate_depths_keep_other_fields_defined():
    results = compute_parameters(_samples(
        (10.0, 2500.0, 3000.0, 1500.0),
        (10.0, 2600.0, 3100.0, 1550.0),
    ))
    assert all(is_sentinel(r.impedance_gradient) for r in results)
    assert results[1].vertical_stress == 0.0
    assert results[1].delta_impedance_prev == pytest.approx(2600.0 * 3100.0 - 7.5e6)


def test_vertical_stress_helper():
    assert vertical_stress(np.array([]), np.array([])).size == 0
    assert list(vertical_stress(np.array([3.0]), np.array([2500.0]))) == [0.0]
    stress = vertical_stress(np.array([0.0, 2.0]), np.array([1000.0, 3000.0]), gravity=1.0)
    assert stress[1] == pytest.approx(4000.0)


def test_poisson_from_moduli_zero_denominator():
    nu = poisson_from_moduli(np.array([0.0, 1.5e10]), np.array([0.0, 5.625e9]))
    assert math.isnan(nu[0])
    assert nu[1] == pytest.approx(1.0 / 3.0)


def test_min_max_normalize():
    scaled = min_max_normalize(np.array([2.0, np.nan, 6.0, 4.0]))
    assert scaled[0] == 0.0
    assert math.isnan(scaled[1])
    assert scaled[2] == 1.0
    assert scaled[3] == pytest.approx(0.5)
    assert np.isnan(min_max_normalize(np.array([np.nan, np.nan]))).all()


def test_pure_function(two_samples):
    first = [r.as_dict() for r in compute_parameters(two_samples)]
    second = [r.as_dict() for r in compute_parameters(two_samples)]
    for a, b in zip(first, second):
        for key in OUTPUT_FIELDS:
            assert a[key] == b[key] or (is_sentinel(a[key]) and is_sentinel(b[key]))


def test_extreme_velocities_do_not_warn():
    samples = _samples((0.0, 2500.0, 1e200, 1e199), (10.0, 2600.0, 3200.0, 1600.0))
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        results = compute_parameters(samples)
    assert math.isinf(results[0].p_modulus)
    assert results[1].p_modulus == pytest.approx(2600.0 * 3200.0 ** 2)


def test_sentinel_is_nan():
    (only,) = compute_parameters(_samples((0.0, 2500.0, 3000.0, 1500.0)))
    assert math.isnan(SENTINEL)
    assert math.isnan(only.impedance_gradient)
