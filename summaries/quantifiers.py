"""Linguistic quantifiers as fuzzy sets over proportions in [0, 1].

Quantifiers such as "few", "most" and "almost all" express vague
proportions in linguistic summaries ("most of the results are relevant").

References:
    Zadeh, L. A. (1983). A computational approach to fuzzy quantifiers in
        natural languages.
    Kacprzyk, J. & Yager, R. R. (2001). Linguistic summaries of data using
        fuzzy logic.
"""

from typing import NamedTuple

import numpy as np

from fis.membership import create_membership_function


class LinguisticQuantifier(NamedTuple):
    name: str
    membership_function: object
    kind: str = "relative"
    # True if increasing, False if decreasing, None if neither
    is_monotonic: object = None

    def membership(self, proportion):
        return self.membership_function(proportion)


def _quantifier(name, mf_kind, params, is_monotonic=None):
    return LinguisticQuantifier(
        name, create_membership_function(mf_kind, params), "relative",
        is_monotonic)


RELATIVE_QUANTIFIERS = (
    _quantifier("none", "left_shoulder", (0.0, 0.05), False),
    _quantifier("almost_none", "triangular", (0.0, 0.05, 0.15), False),
    _quantifier("few", "triangular", (0.05, 0.15, 0.35), False),
    _quantifier("some", "triangular", (0.2, 0.35, 0.5)),
    _quantifier("about_half", "triangular", (0.35, 0.5, 0.65)),
    _quantifier("many", "triangular", (0.5, 0.65, 0.8), True),
    _quantifier("most", "triangular", (0.65, 0.8, 0.95), True),
    _quantifier("almost_all", "triangular", (0.85, 0.95, 1.0), True),
    _quantifier("all", "right_shoulder", (0.95, 1.0), True),
)

# Reported when no quantifier has any membership
DEFAULT_QUANTIFIER = "some"


def get_quantifier(name: str) -> LinguisticQuantifier:
    for q in RELATIVE_QUANTIFIERS:
        if q.name == name:
            return q
    raise KeyError(f"Unknown quantifier {name!r}")


def evaluate_quantifiers(proportion: float) -> dict:
    """Membership of a proportion in every quantifier."""
    return {q.name: float(q.membership(proportion))
            for q in RELATIVE_QUANTIFIERS}


def get_best_quantifier(proportion: float) -> dict:
    """Quantifier with the highest membership at this proportion.

    Strict comparison, so on an exact tie the first quantifier found wins.
    With no membership anywhere the default "some" is returned with 0.
    """
    best_name = DEFAULT_QUANTIFIER
    best_mu = 0.0
    for q in RELATIVE_QUANTIFIERS:
        mu = float(q.membership(proportion))
        if mu > best_mu:
            best_mu = mu
            best_name = q.name
    return {"name": best_name, "membership": best_mu}


def get_applicable_quantifiers(proportion: float,
                               threshold: float = 0.3) -> list:
    """All quantifiers at or above threshold, highest membership first."""
    found = [{"name": name, "membership": mu}
             for name, mu in evaluate_quantifiers(proportion).items()
             if mu >= threshold]
    return sorted(found, key=lambda q: q["membership"], reverse=True)

########## QUANTIFIER-GUIDED AGGREGATION ##########

def generate_quantifier_weights(quantifier: LinguisticQuantifier,
                                n: int) -> np.ndarray:
    """OWA weights w_i = Q(i/n) - Q((i-1)/n), normalised to sum to 1.

    Falls back to uniform weights when the differences sum to zero (or are
    negative overall, as for decreasing quantifiers).
    """
    if n <= 0:
        return np.array([], dtype=float)
    grid = np.arange(n + 1, dtype=float) / n
    q = np.asarray(quantifier.membership(grid), dtype=float)
    weights = np.diff(q)
    total = np.sum(weights)
    if total > 0:
        return weights / total
    return np.full(n, 1.0 / n)


def quantifier_guided_aggregation(values,
                                  quantifier: LinguisticQuantifier) -> float:
    """Yager's quantifier-guided OWA of values (sorted descending)."""
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return 0.0
    ordered = np.sort(values)[::-1]
    weights = generate_quantifier_weights(quantifier, ordered.size)
    return float(np.sum(weights * ordered))

########## UTILITIES ##########

def format_quantifier_name(name: str) -> str:
    return name.replace("_", " ")


def create_quantifier(name: str, kind: str, params) -> LinguisticQuantifier:
    """Custom relative quantifier.

    Args:
        name: quantifier name
        kind: "triangular", "trapezoidal" or "shoulder". A shoulder with
            params (a, b), a < b, is a falling (left) shoulder; with
            (b, a) it is a rising (right) shoulder from a to b.
        params: shape parameters

    Raises:
        ValueError: unknown kind or invalid parameters
    """
    params = tuple(params)
    if kind in ("triangular", "trapezoidal"):
        return _quantifier(name, kind, params)
    elif kind == "shoulder":
        if len(params) != 2:
            raise ValueError("shoulder quantifier needs 2 parameters")
        if params[0] < params[1]:
            return _quantifier(name, "left_shoulder", params, False)
        return _quantifier(name, "right_shoulder", params[::-1], True)
    raise ValueError(f"Unknown quantifier type: {kind}")
