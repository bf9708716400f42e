"""Truth values of linguistic summaries (TVLS).

A linguistic summary reads "Q of S are R": a quantifier Q (e.g. "most"), a
subject set S (e.g. "search results") and a summarizer R (e.g. "easy"). Its
truth value is the quantifier's membership at the sigma-count proportion of
S that is R. Quality measures T2-T5 rate the summarizer and the summary
length.

References:
    Kacprzyk, J. & Yager, R. R. (2001). Linguistic summaries of data using
        fuzzy logic.
"""

import logging
from typing import Callable, NamedTuple

import numpy as np
import pandas as pd

from fis.operators import aggregate_and, aggregate_or, t_norm_min
from summaries.quantifiers import (RELATIVE_QUANTIFIERS, LinguisticQuantifier,
                                   format_quantifier_name, get_best_quantifier)

logger = logging.getLogger(__name__)

# Membership at or above which an element counts as supporting a summarizer
SUPPORT_THRESHOLD = 0.01

# Weights of the overall quality: truth value, then T2, T3, T4, T5.
# A zero component lowers the overall quality but never zeroes it.
QUALITY_WEIGHTS = (0.4, 0.15, 0.15, 0.15, 0.15)


class LinguisticSummary(NamedTuple):
    quantifier: str
    subject: str
    summarizer: str
    truth_value: float
    # Sigma-count proportion the truth value was computed from
    support: float
    full_statement: str


class SummaryQuality(NamedTuple):
    truth_value: float
    degree_of_imprecision: float
    degree_of_covering: float
    degree_of_appropriateness: float
    length_quality: float
    overall_quality: float


class FuzzySummarizer(NamedTuple):
    name: str
    # item -> membership in [0, 1]
    evaluate: Callable


def _as_memberships(memberships) -> np.ndarray:
    return np.asarray(list(memberships), dtype=float)


def sigma_count_proportion(memberships) -> float:
    """Sum of memberships over the number of elements; 0 when empty."""
    mu = _as_memberships(memberships)
    if mu.size == 0:
        return 0.0
    return float(np.sum(mu) / mu.size)

########## TRUTH VALUES ##########

def calculate_simple_truth_value(quantifier: LinguisticQuantifier,
                                 memberships) -> float:
    """T = mu_Q(sum(mu_R(x_i)) / n) for "Q of S are R"; 0 when empty."""
    mu = _as_memberships(memberships)
    if mu.size == 0:
        logger.debug("Empty membership array; truth value is 0")
        return 0.0
    return float(quantifier.membership(sigma_count_proportion(mu)))


def calculate_qualified_truth_value(quantifier: LinguisticQuantifier,
                                    qualifier_memberships,
                                    summarizer_memberships) -> float:
    """Truth of "Q of S which are W are R".

    T = mu_Q(sum(min(mu_W, mu_R)) / sum(mu_W)), 0 when empty or when no
    element has any qualifier membership.

    Raises:
        ValueError: the two membership arrays differ in length
    """
    w = _as_memberships(qualifier_memberships)
    r = _as_memberships(summarizer_memberships)
    if w.size != r.size:
        raise ValueError("Membership arrays must have the same length")
    if w.size == 0:
        return 0.0
    denom = np.sum(w)
    if denom == 0:
        return 0.0
    proportion = np.sum(np.fmin(w, r)) / denom
    return float(quantifier.membership(float(proportion)))


def _pointwise(membership_arrays, combine):
    arrays = [_as_memberships(a) for a in membership_arrays]
    n = arrays[0].size
    if any(a.size != n for a in arrays):
        raise ValueError("Membership arrays must have the same length")
    return [combine([a[i] for a in arrays]) for i in range(n)]


def calculate_compound_truth_value_and(quantifier: LinguisticQuantifier,
                                       membership_arrays) -> float:
    """Truth of "Q of S are R1 and R2 ..." using min pointwise."""
    membership_arrays = list(membership_arrays)
    if not membership_arrays:
        return 0.0
    combined = _pointwise(membership_arrays,
                          lambda v: aggregate_and(v, t_norm_min))
    return calculate_simple_truth_value(quantifier, combined)


def calculate_compound_truth_value_or(quantifier: LinguisticQuantifier,
                                      membership_arrays) -> float:
    """Truth of "Q of S are R1 or R2 ..." using max pointwise."""
    membership_arrays = list(membership_arrays)
    if not membership_arrays:
        return 0.0
    combined = _pointwise(membership_arrays, aggregate_or)
    return calculate_simple_truth_value(quantifier, combined)

########## QUALITY MEASURES ##########

def calculate_degree_of_imprecision(memberships,
                                    threshold: float = SUPPORT_THRESHOLD
                                    ) -> float:
    """T2 = 1 - |supp(R)| / |domain|. Higher means a more specific summarizer."""
    mu = _as_memberships(memberships)
    if mu.size == 0:
        return 0.0
    return float(1.0 - np.count_nonzero(mu >= threshold) / mu.size)


def calculate_degree_of_covering(memberships,
                                 threshold: float = SUPPORT_THRESHOLD) -> float:
    """T3 = share of elements with membership >= threshold."""
    mu = _as_memberships(memberships)
    if mu.size == 0:
        return 0.0
    return float(np.count_nonzero(mu >= threshold) / mu.size)


def calculate_degree_of_appropriateness(memberships,
                                        threshold: float = SUPPORT_THRESHOLD
                                        ) -> float:
    """T4 = 1 - |mean membership - T3|."""
    mu = _as_memberships(memberships)
    if mu.size == 0:
        return 0.0
    t3 = calculate_degree_of_covering(mu, threshold)
    return float(1.0 - abs(np.mean(mu) - t3))


def calculate_length_quality(num_summarizers: int) -> float:
    """T5 = 2^-(n - 1); a single summarizer scores 1."""
    return float(2.0 ** -(num_summarizers - 1))


def calculate_summary_quality(truth_value: float, memberships,
                              num_summarizers: int = 1) -> SummaryQuality:
    """All quality measures plus the weighted overall quality."""
    mu = _as_memberships(memberships)
    t5 = calculate_length_quality(num_summarizers)
    if mu.size == 0:
        return SummaryQuality(truth_value, 0.0, 0.0, 0.0, t5, 0.0)

    t2 = calculate_degree_of_imprecision(mu)
    t3 = calculate_degree_of_covering(mu)
    t4 = calculate_degree_of_appropriateness(mu)
    overall = float(np.dot(QUALITY_WEIGHTS, [truth_value, t2, t3, t4, t5]))
    return SummaryQuality(truth_value, t2, t3, t4, t5, overall)

########## SUMMARY GENERATION ##########

def format_statement(quantifier: str, subject: str, summarizer: str) -> str:
    return f"{format_quantifier_name(quantifier)} of the {subject} are {summarizer}"


def generate_summaries(items, summarizers, subject: str = "results",
                       min_truth_value: float = 0.5,
                       quantifiers=RELATIVE_QUANTIFIERS) -> list:
    """Every (quantifier, summarizer) summary with truth >= min_truth_value.

    Args:
        items: data items to summarise
        summarizers: iterable of FuzzySummarizer
        subject: name of the subject set used in the statement
        min_truth_value: lowest truth value kept
        quantifiers: candidate quantifiers

    Returns:
        list: LinguisticSummary objects, highest truth value first
    """
    items = list(items)
    summaries = []
    for summarizer in summarizers:
        memberships = [summarizer.evaluate(item) for item in items]
        support = sigma_count_proportion(memberships)
        for quantifier in quantifiers:
            truth = calculate_simple_truth_value(quantifier, memberships)
            if truth >= min_truth_value:
                summaries.append(LinguisticSummary(
                    quantifier.name, subject, summarizer.name, truth, support,
                    format_statement(quantifier.name, subject,
                                     summarizer.name)))
    return sorted(summaries, key=lambda s: s.truth_value, reverse=True)


def generate_best_summary(items, summarizer: FuzzySummarizer,
                          subject: str = "results") -> LinguisticSummary:
    """Summary with the best-fitting quantifier for one summarizer."""
    memberships = [summarizer.evaluate(item) for item in items]
    support = sigma_count_proportion(memberships)
    best = get_best_quantifier(support)
    return LinguisticSummary(best["name"], subject, summarizer.name,
                             best["membership"], support,
                             format_statement(best["name"], subject,
                                              summarizer.name))


def summaries_frame(summaries) -> pd.DataFrame:
    return pd.DataFrame([s._asdict() for s in summaries],
                        columns=LinguisticSummary._fields)

########## ACTIVITY SUMMARIZERS ##########

def _easy(activity):
    difficulty = (activity.get("difficulty") or "").lower()
    if difficulty in ("easy", "low"):
        return 1.0
    if difficulty == "medium":
        return 0.3
    return 0.0


def _family(activity):
    audience = activity.get("suitableFor") or []
    audience = [a.lower() for a in audience]
    if "families" in audience or "family" in audience:
        return 1.0
    if "children" in audience or "kids" in audience:
        return 0.8
    return 0.0


def _outdoor(activity):
    kind = (activity.get("experienceType") or "").lower()
    if "outdoor" in kind or "nature" in kind:
        return 1.0
    if "adventure" in kind:
        return 0.7
    return 0.0


def _quick(activity):
    needed = (activity.get("neededTime") or "").lower()
    if "< 1" in needed or "less than 1" in needed:
        return 1.0
    if "1 - 2" in needed:
        return 0.7
    if "2 - 4" in needed:
        return 0.3
    return 0.0


def _relevant(activity):
    return float(activity.get("relevance_score", 0.0))


ACTIVITY_SUMMARIZERS = (
    FuzzySummarizer("easy", _easy),
    FuzzySummarizer("suitable for families", _family),
    FuzzySummarizer("outdoor activities", _outdoor),
    FuzzySummarizer("quick visits", _quick),
    FuzzySummarizer("highly relevant", _relevant),
)


def summarize_search_results(activities, subject: str = "search results"
                             ) -> list:
    """Linguistic summaries of activity dicts from the tourism API."""
    return generate_summaries(activities, ACTIVITY_SUMMARIZERS, subject, 0.5)
