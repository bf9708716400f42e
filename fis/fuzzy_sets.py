"""Fuzzy sets and fuzzy variables for activity-search semantics.

A fuzzy variable (e.g. "similarity") holds a handful of overlapping fuzzy
sets spanning its domain. Variables are built once at import time and held in
the read-only VARIABLES registry.

The domain on a set or variable is informational: it sets the universe used
for numeric integration and plotting and is not enforced on inputs.
"""

from types import MappingProxyType
from typing import NamedTuple

import numpy as np
import pandas as pd

from fis.membership import create_membership_function
from utils import lookups


class FuzzySet(NamedTuple):
    name: str
    membership_function: object
    domain: tuple = (0.0, 1.0)

    def membership(self, x):
        return self.membership_function(x)

    def sample(self, universe: np.ndarray) -> np.ndarray:
        """Membership values over a universe of discourse."""
        return np.asarray(self.membership_function(np.asarray(universe,
                                                              dtype=float)))


class FuzzyVariable:
    def __init__(self, name: str, domain, sets):
        """A named fuzzy variable with its ordered fuzzy sets.

        Args:
            name: Variable name, e.g. "confidence"
            domain: (min, max) of the universe of discourse
            sets: Iterable of FuzzySet; names must be unique

        Raises:
            ValueError: duplicate set names, empty set list or an empty domain
        """
        sets = tuple(sets)
        names = [s.name for s in sets]
        if not sets:
            raise ValueError(f"Variable {name!r} needs at least one set")
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate set names in {name!r}: {duplicates}")
        lo, hi = float(domain[0]), float(domain[1])
        if not lo < hi:
            raise ValueError(f"Domain of {name!r} must have min < max")

        self._name = name
        self._domain = (lo, hi)
        self._sets = sets

    @property
    def name(self):
        return self._name

    @property
    def domain(self):
        return self._domain

    @property
    def sets(self):
        return self._sets

    @property
    def set_names(self):
        return [s.name for s in self._sets]

    def get_set(self, set_name: str) -> FuzzySet:
        for s in self._sets:
            if s.name == set_name:
                return s
        raise KeyError(f"Variable {self._name!r} has no set {set_name!r}")

    def universe(self, resolution: int = 100) -> np.ndarray:
        """Domain discretised into resolution steps (resolution + 1 points)."""
        return np.linspace(self._domain[0], self._domain[1], resolution + 1)

    def membership_frame(self, resolution: int = 100) -> pd.DataFrame:
        """Every set sampled over the universe; index is x, columns are sets."""
        x = self.universe(resolution)
        df = pd.DataFrame({s.name: s.sample(x) for s in self._sets}, index=x)
        df.index.name = self._name
        return df

    def __repr__(self):
        return (f"FuzzyVariable({self._name!r}, {self._domain}, "
                f"sets={self.set_names})")


def _make_sets(definitions, domain=(0.0, 1.0)):
    return [FuzzySet(name, create_membership_function(kind, params), domain)
            for name, kind, params in definitions]


def fuzzify(value: float, variable: FuzzyVariable) -> dict:
    """Membership of a crisp value in every set of the variable.

    Always returns every set name, in the variable's order.
    """
    return {s.name: float(s.membership(value)) for s in variable.sets}


def fuzzify_frame(values, variable: FuzzyVariable) -> pd.DataFrame:
    """Fuzzify many crisp values; rows are values, columns are set names."""
    values = np.asarray(values, dtype=float)
    df = pd.DataFrame({s.name: s.sample(values) for s in variable.sets},
                      index=pd.Index(values, name=variable.name))
    return df


def get_dominant_set(value: float, variable: FuzzyVariable) -> dict:
    """Set with the highest membership. The first set wins ties."""
    best_name = variable.sets[0].name
    best_mu = 0.0
    for s in variable.sets:
        mu = float(s.membership(value))
        if mu > best_mu:
            best_mu = mu
            best_name = s.name
    return {"name": best_name, "membership": best_mu}


def get_linguistic_interpretation(value: float, variable: FuzzyVariable,
                                  threshold: float = 0.3) -> list:
    """Readable names of all sets with membership >= threshold.

    Falls back to the dominant set when nothing clears the threshold.
    """
    terms = [name.replace("_", " ")
             for name, mu in fuzzify(value, variable).items()
             if mu >= threshold]
    if terms:
        return terms
    return [get_dominant_set(value, variable)["name"].replace("_", " ")]

########## PREDEFINED VARIABLES ##########

confidence_variable = FuzzyVariable("confidence", (0, 1), _make_sets([
    ("very_low", "left_shoulder", (0.1, 0.25)),
    ("low", "triangular", (0.1, 0.25, 0.4)),
    ("medium", "triangular", (0.3, 0.5, 0.7)),
    ("high", "triangular", (0.6, 0.75, 0.9)),
    ("very_high", "right_shoulder", (0.75, 0.9)),
]))

similarity_variable = FuzzyVariable("similarity", (0, 1), _make_sets([
    ("no_match", "left_shoulder", (0.15, 0.3)),
    ("weak_match", "triangular", (0.2, 0.35, 0.5)),
    ("partial_match", "triangular", (0.4, 0.55, 0.7)),
    ("strong_match", "triangular", (0.6, 0.75, 0.9)),
    ("exact_match", "right_shoulder", (0.8, 0.95)),
]))

# 0 = easiest, 1 = hardest
difficulty_variable = FuzzyVariable("difficulty", (0, 1), _make_sets([
    ("very_easy", "left_shoulder", (0.1, 0.25)),
    ("easy", "triangular", (0.1, 0.25, 0.45)),
    ("medium", "triangular", (0.35, 0.5, 0.65)),
    ("difficult", "triangular", (0.55, 0.75, 0.9)),
    ("very_difficult", "right_shoulder", (0.75, 0.9)),
]))

# Durations mapped as <1h=0.1, 1-2h=0.25, half day=0.5, full day=0.75,
# several days=0.9
time_needed_variable = FuzzyVariable("time_needed", (0, 1), _make_sets([
    ("very_short", "left_shoulder", (0.1, 0.2)),
    ("short", "triangular", (0.1, 0.25, 0.4)),
    ("half_day", "triangular", (0.35, 0.5, 0.65)),
    ("full_day", "triangular", (0.55, 0.75, 0.85)),
    ("multi_day", "right_shoulder", (0.75, 0.9)),
]))

suitability_variable = FuzzyVariable("suitability", (0, 1), _make_sets([
    ("not_suitable", "left_shoulder", (0.15, 0.3)),
    ("somewhat_suitable", "triangular", (0.2, 0.4, 0.6)),
    ("suitable", "triangular", (0.5, 0.7, 0.85)),
    ("highly_suitable", "right_shoulder", (0.7, 0.9)),
]))

relevance_variable = FuzzyVariable("relevance", (0, 1), _make_sets([
    ("irrelevant", "left_shoulder", (0.2, 0.35)),
    ("marginally_relevant", "triangular", (0.25, 0.4, 0.55)),
    ("relevant", "triangular", (0.45, 0.6, 0.75)),
    ("highly_relevant", "triangular", (0.65, 0.8, 0.92)),
    ("perfectly_relevant", "right_shoulder", (0.85, 0.95)),
]))

VARIABLES = MappingProxyType({v.name: v for v in (
    confidence_variable, similarity_variable, difficulty_variable,
    time_needed_variable, suitability_variable, relevance_variable,
)})


def get_variable(name: str) -> FuzzyVariable:
    try:
        return VARIABLES[name]
    except KeyError:
        raise KeyError(f"Unknown fuzzy variable {name!r}; "
                       f"choose from {sorted(VARIABLES)}") from None

########## MAPPING API VALUES TO FUZZY DOMAINS ##########

def map_difficulty_to_fuzzy(difficulty: str) -> float:
    return lookups.difficulty_values.get(difficulty.strip().lower(),
                                         lookups.DEFAULT_FUZZY_VALUE)


def map_time_needed_to_fuzzy(time_needed: str) -> float:
    return lookups.time_needed_values.get(time_needed.strip().lower(),
                                          lookups.DEFAULT_FUZZY_VALUE)


def map_experience_type_to_fuzzy(experience_type: str) -> dict:
    """Membership of an experience-type label in each activity category.

    A category named in the label gets 1. Related categories get a partial
    membership (e.g. "outdoor sport" is 0.6 adventure), the rest 0.
    """
    label = experience_type.lower()
    result = {}
    for category in lookups.experience_categories:
        if category in label:
            result[category] = 1.0
            continue
        mu = 0.0
        if category in lookups.experience_cross_memberships:
            partial, triggers = lookups.experience_cross_memberships[category]
            if any(t in label for t in triggers):
                mu = partial
        result[category] = mu
    return result


def map_api_value(field: str, value: str) -> float:
    """Crisp fuzzy-domain position of an API value, by any synonym of its field.

    Raises:
        KeyError: the field has no fuzzy variable behind it
    """
    keys = lookups.Lookup().find_vrbl_keys(field)
    mf_name = keys.get("mf_name") if keys else None
    if mf_name == "difficulty":
        return map_difficulty_to_fuzzy(value)
    elif mf_name == "time_needed":
        return map_time_needed_to_fuzzy(value)
    raise KeyError(f"No crisp fuzzy mapping for field {field!r}")
