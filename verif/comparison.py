"""Compare query-parsing models (fuzzy vs LLM) on gold-standard cases.

An evaluation case is a dict as loaded from JSON:

    {"id": "q01", "query": "easy hike for families", "model": "fuzzy",
     "latency_ms": 12.5, "returned": [...titles...], "expected": [...names...],
     "parsed_filters": {...}, "expected_filters": {...}}

Filters may be keyed by either the API field ("neededTime") or the filter
key ("needed_time").
"""

import logging

import numpy as np
import pandas as pd

from utils.lookups import Lookup, filter_keys
from verif.fuzzy_metrics import calculate_fuzzy_metrics

logger = logging.getLogger(__name__)

METRIC_COLUMNS = ["latency_ms", "precision", "recall", "f1",
                  "filter_accuracy"]


def _filter_value(filters: dict, filter_key: str):
    """Value of a filter under its filter key or its API field name."""
    if filter_key in filters:
        return filters[filter_key]
    keys = Lookup().find_vrbl_keys(filter_key)
    if keys is not None:
        return filters.get(keys["api_field"])
    return None


def check_filter_accuracy(actual: dict, expected: dict) -> float:
    """Share of expected filters the parser reproduced exactly.

    Only filters with an expected value count. If none are expected the
    parser cannot have got any wrong, and the accuracy is 1.
    """
    actual = actual or {}
    expected = expected or {}
    total = matches = 0
    for key in filter_keys:
        want = _filter_value(expected, key)
        if not want:
            continue
        total += 1
        if _filter_value(actual, key) == want:
            matches += 1
    return matches / total if total else 1.0


def evaluate_case(case: dict) -> dict:
    """Metrics for one model's answer to one query, as a flat record.

    Precision, recall and F1 are NaN when the case has no expected names,
    so per-model averages skip them.
    """
    result = calculate_fuzzy_metrics(case.get("returned", []),
                                     case.get("expected", []))
    if result.measurable:
        precision, recall, f1 = result.precision, result.recall, result.f1
    else:
        logger.info("Case %s (%s): %s", case.get("id"), case.get("model"),
                    result.note)
        precision = recall = f1 = np.nan

    return {
        "id": case.get("id"),
        "query": case.get("query", ""),
        "model": case.get("model", "fuzzy"),
        "latency_ms": float(case.get("latency_ms", 0.0)),
        "precision": precision,
        "recall": recall,
        "f1": f1,
        "filter_accuracy": check_filter_accuracy(
            case.get("parsed_filters"), case.get("expected_filters")),
        "total_returned": result.confusion_matrix.total_returned,
        "total_expected": result.confusion_matrix.total_expected,
        "fuzzy_tp": result.confusion_matrix.fuzzy_tp,
        "fuzzy_fp": result.confusion_matrix.fuzzy_fp,
        "fuzzy_fn": result.confusion_matrix.fuzzy_fn,
        "summary": result.truth_value_summary.full_statement,
        "measurable": result.measurable,
    }


def build_comparison_report(cases) -> dict:
    """Per-case table, per-model averages and LLM-minus-fuzzy differences.

    Args:
        cases: iterable of evaluation-case dicts

    Returns:
        dict: "cases" (pd.DataFrame, one row per case), "averages"
        (pd.DataFrame indexed by model) and "difference" (pd.Series of
        llm minus fuzzy averages, or None unless both models are present)
    """
    df = pd.DataFrame([evaluate_case(c) for c in cases])
    if df.empty:
        logger.warning("No evaluation cases given")
        return {"cases": df,
                "averages": pd.DataFrame(columns=METRIC_COLUMNS),
                "difference": None}

    averages = df.groupby("model")[METRIC_COLUMNS].mean()
    difference = None
    if {"llm", "fuzzy"} <= set(averages.index):
        difference = averages.loc["llm"] - averages.loc["fuzzy"]
    return {"cases": df, "averages": averages, "difference": difference}
