import itertools

import numpy as np
import pytest

from fis.operators import (
    IMPLICATIONS,
    T_NORMS,
    aggregate_and,
    aggregate_or,
    compensatory_and,
    fuzzy_not,
    fuzzy_not_sugeno,
    generate_owa_weights,
    implication_kleene_dienes,
    implication_larsen,
    implication_lukasiewicz,
    implication_mamdani,
    owa_operator,
    resolve_operator,
    t_conorm_drastic,
    t_conorm_lukasiewicz,
    t_conorm_max,
    t_conorm_probabilistic_sum,
    t_norm_drastic,
    t_norm_hamacher,
    t_norm_lukasiewicz,
    t_norm_min,
    t_norm_product,
)

GRID = [0.0, 0.1, 0.35, 0.5, 0.8, 1.0]
PAIRS = list(itertools.product(GRID, GRID))

T_NORM_FUNCS = [t_norm_min, t_norm_product, t_norm_lukasiewicz,
                t_norm_drastic, t_norm_hamacher]
T_CONORM_FUNCS = [t_conorm_max, t_conorm_probabilistic_sum,
                  t_conorm_lukasiewicz, t_conorm_drastic]


@pytest.mark.parametrize("a,b", PAIRS)
def test_t_norm_ordering(a, b):
    eps = 1e-12
    assert t_norm_drastic(a, b) <= t_norm_lukasiewicz(a, b) + eps
    assert t_norm_lukasiewicz(a, b) <= t_norm_product(a, b) + eps
    assert t_norm_product(a, b) <= t_norm_min(a, b) + eps


@pytest.mark.parametrize("a,b", PAIRS)
def test_t_conorm_ordering(a, b):
    eps = 1e-12
    assert t_conorm_max(a, b) <= t_conorm_probabilistic_sum(a, b) + eps
    assert t_conorm_probabilistic_sum(a, b) <= t_conorm_lukasiewicz(a, b) + eps
    assert t_conorm_lukasiewicz(a, b) <= t_conorm_drastic(a, b) + eps


@pytest.mark.parametrize("a", GRID)
def test_boundary_laws(a):
    for t in T_NORM_FUNCS:
        assert t(a, 1.0) == pytest.approx(a)
    for s in T_CONORM_FUNCS:
        assert s(a, 0.0) == pytest.approx(a)


@pytest.mark.parametrize("a,b", PAIRS)
def test_commutativity(a, b):
    for op in T_NORM_FUNCS + T_CONORM_FUNCS:
        assert op(a, b) == pytest.approx(op(b, a))


def test_hamacher_gamma_one_is_product():
    assert t_norm_hamacher(0.4, 0.7, gamma=1.0) == pytest.approx(0.28)
    assert t_norm_hamacher(0.0, 0.0) == 0.0


def test_negations():
    assert fuzzy_not(0.3) == pytest.approx(0.7)
    assert fuzzy_not_sugeno(0.5) == pytest.approx(0.5)
    assert fuzzy_not_sugeno(0.5, lam=1.0) == pytest.approx(1 / 3)


@pytest.mark.parametrize("lam", [-1.0, -2.5])
def test_sugeno_negation_rejects_lam_at_or_below_minus_one(lam):
    with pytest.raises(ValueError):
        fuzzy_not_sugeno(1.0, lam=lam)


def test_implications_work_on_arrays():
    b = np.array([0.2, 0.8])
    np.testing.assert_allclose(implication_mamdani(0.5, b), [0.2, 0.5])
    np.testing.assert_allclose(implication_larsen(0.5, b), [0.1, 0.4])
    np.testing.assert_allclose(implication_kleene_dienes(0.5, b), [0.5, 0.8])
    np.testing.assert_allclose(implication_lukasiewicz(0.5, b), [0.7, 1.0])


def test_aggregate_neutral_elements():
    assert aggregate_and([]) == 1
    assert aggregate_or([]) == 0
    assert aggregate_and([0.9, 0.4, 0.7]) == 0.4
    assert aggregate_or([0.2, 0.6], t_conorm_probabilistic_sum) == \
        pytest.approx(0.68)


def test_owa_weights_and_operator():
    assert generate_owa_weights(4, "andlike").sum() == pytest.approx(1.0)
    assert generate_owa_weights(4, "orlike").sum() == pytest.approx(1.0)
    values = [0.2, 0.8, 0.5]
    assert owa_operator(values, generate_owa_weights(3, "andlike")) == \
        pytest.approx(0.4)
    assert owa_operator(values, generate_owa_weights(3, "orlike")) == \
        pytest.approx(0.6)
    assert owa_operator(values) == pytest.approx(0.5)
    # Mismatched weights fall back to the mean
    assert owa_operator(values, [1.0, 0.0]) == pytest.approx(0.5)
    assert owa_operator([]) == 0.0


def test_compensatory_and_limits():
    assert compensatory_and([0.8, 0.8], gamma=0.0) == pytest.approx(0.64)
    assert compensatory_and([0.8, 0.8], gamma=1.0) == pytest.approx(0.8)
    assert 0.64 < compensatory_and([0.8, 0.8], gamma=0.5) < 0.8


def test_resolve_operator():
    assert resolve_operator(T_NORMS, "product") is t_norm_product
    assert resolve_operator(IMPLICATIONS, implication_larsen) is \
        implication_larsen
    with pytest.raises(KeyError):
        resolve_operator(T_NORMS, "einstein")
