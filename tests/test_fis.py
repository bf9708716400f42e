import logging

import numpy as np
import pytest

from fis.fis import FIS, DEFAULT_FIS_CONFIG, RuleCondition, make_rule
from fis.fuzzy_sets import confidence_variable, similarity_variable
from fis.rulebases import build_confidence_fis


def _single_rule_fis(rule, **config):
    fis = FIS(**config)
    fis.add_variables(similarity_variable, confidence_variable)
    fis.add_rule(rule)
    return fis


def test_exact_match_fires_conf_r1():
    fis = build_confidence_fis()
    result = fis.infer({"similarity": 0.95}, "confidence")
    strengths = {r["rule_id"]: r["firing_strength"]
                 for r in result.fired_rules}
    assert strengths["conf_r1"] == pytest.approx(1.0)
    assert all(v == 0 for k, v in strengths.items() if k != "conf_r1")
    assert result.crisp_output == pytest.approx(0.85, abs=0.1)


def test_profile_is_sampled_at_resolution():
    fis = build_confidence_fis(resolution=200)
    result = fis.infer({"similarity": 0.5}, "confidence")
    assert result.universe.shape == (201,)
    assert result.aggregated.shape == (201,)
    assert np.all((result.aggregated >= 0) & (result.aggregated <= 1))


def test_unknown_output_variable_raises():
    fis = build_confidence_fis()
    with pytest.raises(KeyError):
        fis.infer({"similarity": 0.5}, "relevance")


def test_no_rule_fired_returns_midpoint(caplog):
    fis = build_confidence_fis()
    with caplog.at_level(logging.WARNING):
        result = fis.infer({}, "confidence")
    assert result.crisp_output == pytest.approx(0.5)
    assert len(result.fired_rules) == 5
    assert "No rule fired" in caplog.text


def test_negated_condition():
    rule = make_rule("not_none", [RuleCondition("similarity", "no_match",
                                                negated=True)],
                     ("confidence", "high"))
    fis = _single_rule_fis(rule)
    result = fis.infer({"similarity": 0.95}, "confidence")
    assert result.fired_rules[0]["firing_strength"] == pytest.approx(1.0)
    assert result.crisp_output == pytest.approx(0.75, abs=1e-3)


def test_or_connective_and_weight():
    rule = make_rule("either", [("similarity", "exact_match"),
                                ("similarity", "no_match")],
                     ("confidence", "medium"), weight=0.5, connective="or")
    fis = _single_rule_fis(rule)
    result = fis.infer({"similarity": 0.05}, "confidence")
    assert result.fired_rules[0]["firing_strength"] == pytest.approx(0.5)
    assert result.aggregated.max() == pytest.approx(0.5)


def test_larsen_implication_scales_consequent():
    rule = make_rule("w", [("similarity", "partial_match")],
                     ("confidence", "medium"), weight=0.5)
    fis = _single_rule_fis(rule, implication="larsen")
    result = fis.infer({"similarity": 0.55}, "confidence")
    peak = np.argmax(result.aggregated)
    assert result.aggregated[peak] == pytest.approx(0.5)
    assert result.universe[peak] == pytest.approx(0.5)


@pytest.mark.parametrize("aggregation,combine", [
    ("sum", lambda p, q: np.fmin(1.0, p + q)),
    ("probor", lambda p, q: p + q - p * q),
])
def test_overlapping_rules_use_configured_aggregation(aggregation, combine):
    inputs = {"similarity": 0.65}
    result = build_confidence_fis(aggregation=aggregation).infer(
        inputs, "confidence")
    strengths = {r["rule_id"]: r["firing_strength"]
                 for r in result.fired_rules}
    # partial_match and strong_match overlap at 0.65
    assert strengths["conf_r2"] == pytest.approx(1 / 3)
    assert strengths["conf_r3"] == pytest.approx(1 / 3)
    assert all(strengths[k] == 0 for k in ("conf_r1", "conf_r4", "conf_r5"))

    x = result.universe
    high = np.fmin(strengths["conf_r2"],
                   confidence_variable.get_set("high").sample(x))
    medium = np.fmin(strengths["conf_r3"],
                     confidence_variable.get_set("medium").sample(x))
    np.testing.assert_allclose(result.aggregated, combine(medium, high))

    # At x = 0.65 both clipped sets are non-zero
    i = int(np.argmin(np.abs(x - 0.65)))
    assert medium[i] > 0 and high[i] > 0
    assert result.aggregated[i] == pytest.approx(combine(medium[i], high[i]))

    baseline = build_confidence_fis().infer(inputs, "confidence")
    assert result.aggregated[i] > baseline.aggregated[i]
    assert not np.allclose(result.aggregated, baseline.aggregated)


@pytest.mark.parametrize("implication,implied", [
    ("kleene_dienes", lambda a, mu: np.fmax(1.0 - a, mu)),
    ("lukasiewicz", lambda a, mu: np.fmin(1.0, 1.0 - a + mu)),
])
def test_residual_implications_shape_the_profile(implication, implied):
    rule = make_rule("r", [("similarity", "partial_match")],
                     ("confidence", "medium"))
    fis = _single_rule_fis(rule, implication=implication)
    result = fis.infer({"similarity": 0.5}, "confidence")
    alpha = result.fired_rules[0]["firing_strength"]
    assert alpha == pytest.approx(2 / 3)

    mu = confidence_variable.get_set("medium").sample(result.universe)
    np.testing.assert_allclose(result.aggregated, implied(alpha, mu))
    assert result.aggregated.min() == pytest.approx(1 / 3)
    assert 0.0 <= result.crisp_output <= 1.0


@pytest.mark.parametrize("method", ["centroid", "bisector", "mom", "lom",
                                    "som"])
def test_defuzzification_methods_stay_in_domain(method):
    fis = build_confidence_fis(defuzzification=method)
    out = fis.infer({"similarity": 0.7}, "confidence").crisp_output
    assert 0.0 <= out <= 1.0


def test_config_errors():
    with pytest.raises(KeyError):
        FIS({"snorm": "min"})
    with pytest.raises(KeyError):
        FIS(t_norm="einstein")
    with pytest.raises(ValueError):
        FIS(resolution=0)
    assert FIS().config == DEFAULT_FIS_CONFIG


def test_rule_validation():
    fis = FIS()
    with pytest.raises(ValueError):
        fis.add_rule(make_rule("neg", [("similarity", "no_match")],
                               ("confidence", "low"), weight=-1))
    with pytest.raises(ValueError):
        fis.add_rule(make_rule("xor", [("similarity", "no_match")],
                               ("confidence", "low"), connective="XOR"))


def test_duplicate_variable_name_rejected():
    fis = FIS()
    fis.add_variable(similarity_variable)
    # Re-adding the same object is harmless
    fis.add_variable(similarity_variable)
    clash = type(confidence_variable)("similarity", (0, 1),
                                      confidence_variable.sets)
    with pytest.raises(ValueError):
        fis.add_variable(clash)


def test_fired_rules_frame():
    fis = build_confidence_fis()
    result = fis.infer({"similarity": 0.95}, "confidence")
    df = FIS.fired_rules_frame(result)
    assert list(df.index) == ["conf_r1", "conf_r2", "conf_r3", "conf_r4",
                              "conf_r5"]
    assert df.loc["conf_r1", "firing_strength"] == pytest.approx(1.0)


def test_agrees_with_skfuzzy_control_system():
    fis = build_confidence_fis()
    ours = fis.infer({"similarity": 0.95}, "confidence").crisp_output

    _, simulation = fis.create_control_simulation("confidence")
    simulation.input["similarity"] = 0.95
    simulation.compute()
    theirs = simulation.output["confidence"]
    # skfuzzy integrates the piecewise-linear profile, we sum samples
    assert ours == pytest.approx(theirs, abs=0.02)
