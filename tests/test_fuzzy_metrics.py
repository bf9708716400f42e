import pytest

from verif.fuzzy_metrics import (
    FuzzyConfusionMatrix,
    calculate_fuzzy_confusion_matrix,
    calculate_fuzzy_metrics,
    match_details_frame,
    similarity_to_relevance,
)


def exact_only(a, b):
    return 1.0 if a == b else 0.0


def test_identical_titles_score_perfectly():
    result = calculate_fuzzy_metrics(["Jungfraujoch"], ["Jungfraujoch"])
    assert result.precision == 1.0
    assert result.recall == 1.0
    assert result.f1 == 1.0
    assert result.measurable
    assert result.truth_value_summary.quantifier == "all"
    assert result.truth_value_summary.truth_value == 1.0
    assert result.truth_value_summary.full_statement == \
        "all of the results are relevant (support: 100.0%)"
    assert result.confusion_matrix.fuzzy_tp == pytest.approx(0.9)
    assert result.confusion_matrix.fuzzy_fp == pytest.approx(0.1)
    assert result.confusion_matrix.fuzzy_fn == 0.0


def test_nothing_returned():
    result = calculate_fuzzy_metrics([], ["A", "B"])
    assert (result.precision, result.recall, result.f1) == (0.0, 0.0, 0.0)
    assert result.measurable
    assert result.confusion_matrix == FuzzyConfusionMatrix(0.0, 0.0, 2.0,
                                                           0, 2)
    summary = result.truth_value_summary
    assert summary.quantifier == "none"
    assert summary.truth_value == 1.0
    assert summary.full_statement.startswith(
        "none of the results are relevant")


def test_nothing_expected_is_not_a_perfect_score():
    result = calculate_fuzzy_metrics(["A"], [])
    assert result.precision == 0.0
    assert result.recall == 0.0
    assert result.f1 == 0.0
    assert not result.measurable
    assert "undefined" in result.note
    assert result.confusion_matrix.total_returned == 1


def test_partial_overlap_with_injected_similarity():
    result = calculate_fuzzy_metrics(["Jungfraujoch", "Zoo Zurich"],
                                     ["Jungfraujoch"], similarity=exact_only)
    assert result.precision == pytest.approx(0.5)
    assert result.recall == pytest.approx(1.0)
    assert result.f1 == pytest.approx(2 / 3)
    assert result.truth_value_summary.full_statement == \
        "about half of the results are relevant (support: 50.0%)"
    assert result.match_details[1] == {
        "returned": "Zoo Zurich", "best_match": None, "similarity": 0.0,
        "relevance": similarity_to_relevance(0.0)}
    assert result.match_details[0]["relevance"] == \
        pytest.approx(similarity_to_relevance(1.0))
    cm = result.confusion_matrix
    assert cm.fuzzy_tp == pytest.approx(0.9 + 0.1)
    assert cm.fuzzy_fp == pytest.approx(0.1 + 0.9)
    assert cm.fuzzy_fn == 0.0


def test_near_miss_titles_get_partial_credit():
    result = calculate_fuzzy_metrics(["Lake Lucerne cruise"],
                                     ["Lake Lucern cruise"])
    assert 0.9 < result.precision < 1.0
    assert result.precision == pytest.approx(result.recall)


def test_similarity_to_relevance_is_monotone():
    values = [similarity_to_relevance(s) for s in (0.0, 0.35, 0.55, 0.75,
                                                   1.0)]
    assert values == sorted(values)
    assert values[0] == pytest.approx(0.1)
    assert values[-1] == pytest.approx(0.9)


def test_confusion_matrix_counts():
    cm = calculate_fuzzy_confusion_matrix(["a", "b", "c"], ["a", "d"],
                                          similarity=exact_only)
    assert cm.total_returned == 3
    assert cm.total_expected == 2
    assert cm.fuzzy_tp + cm.fuzzy_fp == pytest.approx(3.0)
    assert cm.fuzzy_fn == pytest.approx(1.0)


def test_match_details_frame():
    result = calculate_fuzzy_metrics(["x", "y"], ["x"], similarity=exact_only)
    df = match_details_frame(result)
    assert list(df.columns) == ["returned", "best_match", "similarity",
                                "relevance"]
    assert df.loc[0, "relevance"] > df.loc[1, "relevance"]
    assert list(df["returned"]) == ["x", "y"]
    assert df.loc[0, "best_match"] == "x"
