"""Fuzzy precision, recall and F1 of returned results against expected names.

Instead of counting thresholded hits, each returned title contributes its
best string similarity to any expected name:

    fuzzy precision = sum_i max_j sim(returned_i, expected_j) / |returned|
    fuzzy recall    = sum_j max_i sim(returned_i, expected_j) / |expected|

Every result also carries a linguistic summary such as
"most of the results are relevant (support: 62.3%)".
"""

import logging
from typing import NamedTuple

import pandas as pd

from fis.defuzzification import RELEVANCE_CENTERS, defuzzify_weighted_average
from fis.fuzzy_sets import fuzzify, similarity_variable
from summaries.quantifiers import get_best_quantifier
from summaries.tvls import LinguisticSummary, format_statement
from utils.maths_funcs import harmonic_mean, safe_mean
from utils.text_matching import string_similarity

logger = logging.getLogger(__name__)

# Similarity band -> relevance band used for the fuzzy confusion matrix
SIMILARITY_TO_RELEVANCE = {
    "exact_match": "perfectly_relevant",
    "strong_match": "highly_relevant",
    "partial_match": "relevant",
    "weak_match": "marginally_relevant",
    "no_match": "irrelevant",
}

NO_EXPECTED_NOTE = ("No expected names: fuzzy precision and recall are "
                    "undefined for this query")


class FuzzyConfusionMatrix(NamedTuple):
    fuzzy_tp: float
    fuzzy_fp: float
    fuzzy_fn: float
    total_returned: int
    total_expected: int


class FuzzyMetricsResult(NamedTuple):
    precision: float
    recall: float
    f1: float
    confusion_matrix: FuzzyConfusionMatrix
    truth_value_summary: LinguisticSummary
    # One dict per returned title: returned, best_match, similarity
    match_details: list
    # False when the comparison is undefined (no expected names)
    measurable: bool = True
    note: str = ""


def best_match(name: str, candidates, similarity=string_similarity):
    """(best candidate or None, best similarity) for one name.

    Strict comparison, so the first of equally similar candidates wins and a
    name with no similarity to anything has no best match.
    """
    best, best_sim = None, 0.0
    for candidate in candidates:
        sim = similarity(name, candidate)
        if sim > best_sim:
            best, best_sim = candidate, sim
    return best, best_sim


def similarity_to_relevance(sim: float) -> float:
    """Relevance degree of a similarity score.

    The similarity is fuzzified, each band's membership is carried over to
    the matching relevance band, and the result is the weighted average of
    the relevance set centres.
    """
    memberships = fuzzify(sim, similarity_variable)
    relevance = {SIMILARITY_TO_RELEVANCE[band]: mu
                 for band, mu in memberships.items()}
    return defuzzify_weighted_average(relevance, RELEVANCE_CENTERS)


def calculate_fuzzy_confusion_matrix(returned, expected,
                                     similarity=string_similarity
                                     ) -> FuzzyConfusionMatrix:
    """Continuous-valued TP / FP / FN from membership degrees.

    TP sums each returned title's relevance degree and FP its complement.
    FN sums, per expected name, one minus the best similarity achieved by
    any returned title.
    """
    returned = list(returned)
    expected = list(expected)

    tp = fp = 0.0
    for title in returned:
        _, sim = best_match(title, expected, similarity)
        relevance = similarity_to_relevance(sim)
        tp += relevance
        fp += 1.0 - relevance

    fn = 0.0
    for name in expected:
        _, sim = best_match(name, returned, similarity)
        fn += 1.0 - sim

    return FuzzyConfusionMatrix(tp, fp, fn, len(returned), len(expected))


def _relevance_summary(quantifier: str, truth: float, support: float
                       ) -> LinguisticSummary:
    statement = (f"{format_statement(quantifier, 'results', 'relevant')} "
                 f"(support: {support * 100:.1f}%)")
    return LinguisticSummary(quantifier, "results", "relevant", truth,
                             support, statement)


def calculate_fuzzy_metrics(returned, expected,
                            similarity=string_similarity) -> FuzzyMetricsResult:
    """Fuzzy precision, recall, F1, confusion matrix and TVLS summary.

    Args:
        returned: titles returned by the search
        expected: names of the expected (gold standard) activities
        similarity: str x str -> [0, 1], symmetric, 1 for identical strings

    Returns:
        FuzzyMetricsResult. With no expected names the result is all zeros
        and ``measurable`` is False. With nothing returned precision and
        recall are 0 and "none of the results are relevant" holds with
        truth value 1.
    """
    returned = list(returned)
    expected = list(expected)

    if not expected:
        logger.warning(NO_EXPECTED_NOTE)
        return FuzzyMetricsResult(
            0.0, 0.0, 0.0,
            FuzzyConfusionMatrix(0.0, 0.0, 0.0, len(returned), 0),
            _relevance_summary("none", 0.0, 0.0), [],
            measurable=False, note=NO_EXPECTED_NOTE)

    if not returned:
        return FuzzyMetricsResult(
            0.0, 0.0, 0.0,
            FuzzyConfusionMatrix(0.0, 0.0, float(len(expected)), 0,
                                 len(expected)),
            _relevance_summary("none", 1.0, 0.0), [])

    match_details = []
    for title in returned:
        match, sim = best_match(title, expected, similarity)
        match_details.append({"returned": title, "best_match": match,
                              "similarity": sim,
                              "relevance": similarity_to_relevance(sim)})
    precision = safe_mean(d["similarity"] for d in match_details)
    recall = safe_mean(best_match(name, returned, similarity)[1]
                       for name in expected)
    f1 = harmonic_mean(precision, recall)

    best = get_best_quantifier(precision)
    summary = _relevance_summary(best["name"], best["membership"], precision)
    matrix = calculate_fuzzy_confusion_matrix(returned, expected, similarity)
    logger.debug("P=%.3f R=%.3f F1=%.3f; %s", precision, recall, f1,
                 summary.full_statement)
    return FuzzyMetricsResult(precision, recall, f1, matrix, summary,
                              match_details)


def match_details_frame(result: FuzzyMetricsResult) -> pd.DataFrame:
    return pd.DataFrame(result.match_details,
                        columns=["returned", "best_match", "similarity",
                                 "relevance"])
