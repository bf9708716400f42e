"""Rule bases for query-interpretation confidence and result relevance.

This module is the configuration counterpart of fis.fis: it defines the
fixed, in-memory rule bases and builds ready-to-use FIS instances from them.
"""

from types import MappingProxyType

from fis.fis import FIS, make_rule
from fis.fuzzy_sets import (confidence_variable, relevance_variable,
                            similarity_variable)

# Text similarity band -> confidence band, monotone in similarity
CONFIDENCE_RULES = (
    make_rule("conf_r1", [("similarity", "exact_match")],
              ("confidence", "very_high")),
    make_rule("conf_r2", [("similarity", "strong_match")],
              ("confidence", "high")),
    make_rule("conf_r3", [("similarity", "partial_match")],
              ("confidence", "medium")),
    make_rule("conf_r4", [("similarity", "weak_match")],
              ("confidence", "low")),
    make_rule("conf_r5", [("similarity", "no_match")],
              ("confidence", "very_low")),
)

# Similarity x confidence -> relevance band
RELEVANCE_RULES = (
    make_rule("rel_r1", [("similarity", "exact_match"),
                         ("confidence", "very_high")],
              ("relevance", "perfectly_relevant")),
    make_rule("rel_r2", [("similarity", "strong_match"),
                         ("confidence", "high")],
              ("relevance", "highly_relevant")),
    make_rule("rel_r3", [("similarity", "partial_match")],
              ("relevance", "relevant")),
    make_rule("rel_r4", [("similarity", "weak_match")],
              ("relevance", "marginally_relevant")),
    make_rule("rel_r5", [("similarity", "no_match")],
              ("relevance", "irrelevant")),
    # Edge cases: very high confidence promotes a partial match, low
    # confidence demotes a strong one
    make_rule("rel_r6", [("similarity", "partial_match"),
                         ("confidence", "very_high")],
              ("relevance", "highly_relevant")),
    make_rule("rel_r7", [("similarity", "strong_match"),
                         ("confidence", "low")],
              ("relevance", "relevant")),
)

RULE_BASES = MappingProxyType({
    "confidence": CONFIDENCE_RULES,
    "relevance": RELEVANCE_RULES,
})


def build_confidence_fis(config=None, **overrides) -> FIS:
    """FIS mapping a similarity score to a confidence score."""
    fis = FIS(config, **overrides)
    fis.add_variables(similarity_variable, confidence_variable)
    fis.add_rules(CONFIDENCE_RULES)
    return fis


def build_relevance_fis(config=None, **overrides) -> FIS:
    """FIS mapping similarity and confidence to a relevance score."""
    fis = FIS(config, **overrides)
    fis.add_variables(similarity_variable, confidence_variable,
                      relevance_variable)
    fis.add_rules(RELEVANCE_RULES)
    return fis


_BUILDERS = {
    "confidence": build_confidence_fis,
    "relevance": build_relevance_fis,
}


def build_fis(name: str, config=None, **overrides) -> FIS:
    """Build the FIS for a named rule base.

    Raises:
        KeyError: no rule base with that name
    """
    try:
        builder = _BUILDERS[name]
    except KeyError:
        raise KeyError(f"Unknown rule base {name!r}; "
                       f"choose from {sorted(_BUILDERS)}") from None
    return builder(config, **overrides)
