"""Defuzzification: turning fuzzy output back into crisp values and words.

Two representations are handled:

* a discretised profile, i.e. the universe ``x`` and aggregated memberships
  ``mu`` as numpy arrays (what the inference engine produces);
* a mapping of set name -> membership over a FuzzyVariable, which is clipped
  and max-aggregated over the variable's universe before defuzzifying.

All profile methods fall back to the midpoint of the domain when the profile
carries no membership at all.
"""

import logging

import numpy as np

from fis.fuzzy_sets import FuzzyVariable
from utils.maths_funcs import compute_weighted_mean

logger = logging.getLogger(__name__)


def _midpoint(x: np.ndarray) -> float:
    return float((x[0] + x[-1]) / 2)


def _is_empty(mu: np.ndarray) -> bool:
    if np.sum(mu) == 0:
        logger.warning("Defuzzification skipped due to zero aggregated "
                       "support; returning domain midpoint")
        return True
    return False

########## PROFILE METHODS ##########

def centroid(x: np.ndarray, mu: np.ndarray) -> float:
    """Centre of gravity sum(x mu) / sum(mu) over the sampled universe."""
    x = np.asarray(x, dtype=float)
    mu = np.asarray(mu, dtype=float)
    if _is_empty(mu):
        return _midpoint(x)
    return float(np.sum(x * mu) / np.sum(mu))


def bisector(x: np.ndarray, mu: np.ndarray) -> float:
    """Smallest x where the cumulative area reaches half the total area."""
    x = np.asarray(x, dtype=float)
    mu = np.asarray(mu, dtype=float)
    if _is_empty(mu):
        return _midpoint(x)
    cumulative = np.cumsum(mu)
    idx = np.searchsorted(cumulative, cumulative[-1] / 2)
    return float(x[idx])


def _maxima(x, mu):
    x = np.asarray(x, dtype=float)
    mu = np.asarray(mu, dtype=float)
    peak = np.max(mu)
    if peak <= 0:
        logger.warning("Defuzzification skipped due to zero aggregated "
                       "support; returning domain midpoint")
        return None
    return x[mu == peak]


def mean_of_maximum(x: np.ndarray, mu: np.ndarray) -> float:
    at_max = _maxima(x, mu)
    return _midpoint(np.asarray(x)) if at_max is None else float(np.mean(at_max))


def largest_of_maximum(x: np.ndarray, mu: np.ndarray) -> float:
    at_max = _maxima(x, mu)
    return _midpoint(np.asarray(x)) if at_max is None else float(at_max[-1])


def smallest_of_maximum(x: np.ndarray, mu: np.ndarray) -> float:
    at_max = _maxima(x, mu)
    return _midpoint(np.asarray(x)) if at_max is None else float(at_max[0])


DEFUZZIFIERS = {
    "centroid": centroid,
    "bisector": bisector,
    "mom": mean_of_maximum,
    "lom": largest_of_maximum,
    "som": smallest_of_maximum,
}

########## SET-MEMBERSHIP METHODS ##########

def clipped_profile(memberships: dict, variable: FuzzyVariable,
                    resolution: int = 100):
    """Clip each set at its membership and aggregate with max.

    Returns:
        (x, mu): the universe and the aggregated profile
    """
    x = variable.universe(resolution)
    clipped = [np.fmin(s.sample(x), memberships.get(s.name, 0.0))
               for s in variable.sets if memberships.get(s.name, 0.0) > 0]
    if not clipped:
        return x, np.zeros_like(x)
    return x, np.fmax.reduce(clipped)


def defuzzify_centroid(memberships: dict, variable: FuzzyVariable,
                       resolution: int = 100) -> float:
    x, mu = clipped_profile(memberships, variable, resolution)
    return centroid(x, mu)


def defuzzify_maximum(memberships: dict, variable: FuzzyVariable,
                      resolution: int = 100) -> float:
    """Mean of the points where the clipped profile is maximal."""
    x, mu = clipped_profile(memberships, variable, resolution)
    return mean_of_maximum(x, mu)


def defuzzify_weighted_average(memberships: dict, set_centers: dict) -> float:
    """sum(w_i c_i) / sum(w_i) using a representative centre per set.

    Sets without a known centre count with centre 0. Returns 0 when no set
    carries any membership.
    """
    active = {name: mu for name, mu in memberships.items() if mu > 0}
    if not active:
        return 0.0
    w = np.array(list(active.values()), dtype=float)
    c = np.array([set_centers.get(name, 0.0) for name in active], dtype=float)
    return float(compute_weighted_mean(w, c))


def defuzzify_sugeno(rule_outputs) -> float:
    """Weighted sum for Sugeno (TSK) rules.

    Args:
        rule_outputs: iterable of (firing_strength, output) pairs

    Returns:
        float: sum(w z) / sum(w), or 0 if no rule fired
    """
    pairs = [(float(w), float(z)) for w, z in rule_outputs]
    if not pairs or sum(w for w, _ in pairs) == 0:
        return 0.0
    w, z = np.array(pairs).T
    return float(compute_weighted_mean(w, z))

########## LINGUISTIC OUTPUT ##########

def crisp_to_linguistic(value: float, variable: FuzzyVariable) -> dict:
    """Best term for a crisp value; first set wins ties."""
    best_term = variable.sets[0].name
    best_mu = 0.0
    for s in variable.sets:
        mu = float(s.membership(value))
        if mu > best_mu:
            best_mu = mu
            best_term = s.name
    return {"term": best_term, "membership": best_mu}


def crisp_to_multiple_linguistic(value: float, variable: FuzzyVariable,
                                 threshold: float = 0.3) -> list:
    """All terms at or above threshold, highest membership first."""
    terms = []
    for s in variable.sets:
        mu = float(s.membership(value))
        if mu >= threshold:
            terms.append({"term": s.name, "membership": mu})
    return sorted(terms, key=lambda t: t["membership"], reverse=True)


def generate_linguistic_description(value: float, variable: FuzzyVariable,
                                    label: str = None) -> str:
    """Short sentence such as "confidence is quite high"."""
    terms = crisp_to_multiple_linguistic(value, variable, threshold=0.2)
    label = label or variable.name

    if not terms:
        return f"{label} is undefined"

    if len(terms) == 1:
        term, mu = terms[0]["term"], terms[0]["membership"]
        if mu >= 0.8:
            hedge = "definitely"
        elif mu >= 0.6:
            hedge = "quite"
        elif mu >= 0.4:
            hedge = "somewhat"
        else:
            hedge = "slightly"
        return f"{label} is {hedge} {term.replace('_', ' ')}"

    primary, secondary = terms[0], terms[1]
    if primary["membership"] > 0.7:
        return (f"{label} is {primary['term'].replace('_', ' ')} "
                f"({primary['membership'] * 100:.0f}%)")
    return (f"{label} is between {primary['term'].replace('_', ' ')} "
            f"and {secondary['term'].replace('_', ' ')}")

########## SET CENTRES FOR WEIGHTED AVERAGE ##########

CONFIDENCE_CENTERS = {
    "very_low": 0.15,
    "low": 0.3,
    "medium": 0.5,
    "high": 0.7,
    "very_high": 0.85,
}

SIMILARITY_CENTERS = {
    "no_match": 0.15,
    "weak_match": 0.35,
    "partial_match": 0.55,
    "strong_match": 0.75,
    "exact_match": 0.9,
}

RELEVANCE_CENTERS = {
    "irrelevant": 0.1,
    "marginally_relevant": 0.35,
    "relevant": 0.55,
    "highly_relevant": 0.75,
    "perfectly_relevant": 0.9,
}

DIFFICULTY_CENTERS = {
    "very_easy": 0.1,
    "easy": 0.3,
    "medium": 0.5,
    "difficult": 0.7,
    "very_difficult": 0.9,
}

TIME_NEEDED_CENTERS = {
    "very_short": 0.1,
    "short": 0.25,
    "half_day": 0.5,
    "full_day": 0.75,
    "multi_day": 0.9,
}
