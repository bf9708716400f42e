import numpy as np
import pytest

from fis.membership import (
    MembershipFunction,
    create_membership_function,
    gaussian,
    generalized_bell,
    left_shoulder,
    pi_shaped,
    right_shoulder,
    sigmoid,
    trapezoidal,
    triangular,
    validate_params,
)


@pytest.mark.parametrize("x", [-1.0, 0.0, 0.2, 0.8, 1.5])
def test_triangular_zero_outside_support(x):
    assert triangular(x, 0.2, 0.5, 0.8) == 0.0


def test_triangular_peak_and_slopes():
    assert triangular(0.5, 0.2, 0.5, 0.8) == 1.0
    assert triangular(0.35, 0.2, 0.5, 0.8) == pytest.approx(0.5)
    assert triangular(0.65, 0.2, 0.5, 0.8) == pytest.approx(0.5)


def test_array_input_keeps_shape_and_range():
    x = np.linspace(-0.5, 1.5, 41)
    y = triangular(x, 0.0, 0.5, 1.0)
    assert isinstance(y, np.ndarray)
    assert y.shape == x.shape
    assert np.all((y >= 0) & (y <= 1))


def test_scalar_input_returns_float():
    assert isinstance(trapezoidal(0.5, 0, 0.25, 0.75, 1), float)


def test_trapezoidal_plateau():
    assert trapezoidal(0.25, 0, 0.25, 0.75, 1) == 1.0
    assert trapezoidal(0.6, 0, 0.25, 0.75, 1) == 1.0
    assert trapezoidal(0.875, 0, 0.25, 0.75, 1) == pytest.approx(0.5)
    assert trapezoidal(1.0, 0, 0.25, 0.75, 1) == 0.0


def test_gaussian_centre_and_spread():
    assert gaussian(0.5, 0.5, 0.1) == pytest.approx(1.0)
    assert gaussian(0.6, 0.5, 0.1) == pytest.approx(np.exp(-0.5))
    assert 0 < gaussian(5.0, 0.5, 0.1) < 1e-6 or gaussian(5.0, 0.5, 0.1) == 0.0


def test_generalized_bell_half_at_width():
    assert generalized_bell(0.5, 0.2, 2, 0.5) == pytest.approx(1.0)
    assert generalized_bell(0.7, 0.2, 2, 0.5) == pytest.approx(0.5)


def test_sigmoid_direction_from_slope_sign():
    assert sigmoid(0.5, 10, 0.5) == pytest.approx(0.5)
    assert sigmoid(0.9, 10, 0.5) > 0.9
    assert sigmoid(0.9, -10, 0.5) < 0.1


def test_shoulders_saturate():
    assert left_shoulder(0.0, 0.2, 0.4) == 1.0
    assert left_shoulder(0.3, 0.2, 0.4) == pytest.approx(0.5)
    assert left_shoulder(0.9, 0.2, 0.4) == 0.0
    assert right_shoulder(0.0, 0.2, 0.4) == 0.0
    assert right_shoulder(0.3, 0.2, 0.4) == pytest.approx(0.5)
    assert right_shoulder(0.9, 0.2, 0.4) == 1.0


def test_pi_shaped():
    params = (0.1, 0.3, 0.6, 0.8)
    assert pi_shaped(0.0, *params) == 0.0
    assert pi_shaped(0.2, *params) == pytest.approx(0.5)
    assert pi_shaped(0.45, *params) == 1.0
    assert pi_shaped(0.7, *params) == pytest.approx(0.5)
    assert pi_shaped(0.9, *params) == 0.0


def test_vertical_edge_does_not_divide_by_zero():
    assert triangular(0.0, 0.0, 0.0, 1.0) == 1.0
    assert triangular(0.5, 0.0, 0.0, 1.0) == pytest.approx(0.5)


# The point on a vertical edge belongs to the core
@pytest.mark.parametrize("func,x,params", [
    (triangular, 0.5, (0.5, 0.5, 1.0)),
    (triangular, 0.5, (0.0, 0.5, 0.5)),
    (trapezoidal, 0.2, (0.2, 0.2, 0.5, 0.8)),
    (trapezoidal, 0.5, (0.2, 0.3, 0.5, 0.5)),
    (left_shoulder, 0.5, (0.5, 0.5)),
    (right_shoulder, 0.5, (0.5, 0.5)),
    (pi_shaped, 0.2, (0.2, 0.2, 0.5, 0.8)),
    (pi_shaped, 0.5, (0.2, 0.3, 0.5, 0.5)),
])
def test_vertical_edge_point_is_full_membership(func, x, params):
    assert func(x, *params) == 1.0


def test_vertical_edge_is_a_step():
    assert right_shoulder(0.49, 0.5, 0.5) == 0.0
    assert right_shoulder(0.51, 0.5, 0.5) == 1.0
    assert pi_shaped(0.19, 0.2, 0.2, 0.5, 0.8) == 0.0
    assert pi_shaped(0.81, 0.2, 0.2, 0.5, 0.8) == 0.0


@pytest.mark.parametrize("kind,params", [
    ("triangular", (0.5, 0.5, 1.0)),
    ("triangular", (0.0, 1.0)),
    ("trapezoidal", (0.0, 0.6, 0.4, 1.0)),
    ("left_shoulder", (0.4, 0.4)),
    ("gaussian", (0.5, 0.0)),
    ("sigmoid", (0.0, 0.5)),
    ("generalized_bell", (0.0, 2.0, 0.5)),
    ("zigzag", (0.1, 0.2)),
])
def test_validate_params_rejects_bad_definitions(kind, params):
    with pytest.raises(ValueError):
        validate_params(kind, params)


def test_create_membership_function_is_callable_and_comparable():
    mf = create_membership_function("triangular", [0, 0.5, 1])
    assert isinstance(mf, MembershipFunction)
    assert mf(0.5) == 1.0
    assert mf.params == (0.0, 0.5, 1.0)
    assert mf == MembershipFunction("triangular", (0.0, 0.5, 1.0))
    assert len({mf, MembershipFunction("triangular", (0, 0.5, 1))}) == 1
