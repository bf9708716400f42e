"""Class to create a Mamdani fuzzy inference system (FIS).

Inference runs on numpy arrays in this module. It exposes the firing
strength of each rule and the aggregated output profile. The T-norm,
T-conorm, implication, aggregation and defuzzification are all chosen by
name in the configuration.

The operator names are resolved once, when the FIS is constructed, to plain
functions held on the instance. scikit-fuzzy (skfuzzy) is only used by
``to_control_system``, which builds a ControlSystem mirror of a rule base
for cross-checking and for skfuzzy's viewers.

Rule bases themselves live in fis.rulebases.
"""

import functools
import logging
import operator
from typing import NamedTuple

import numpy as np
import pandas as pd
from skfuzzy import control as ctrl

from fis.defuzzification import DEFUZZIFIERS
from fis.fuzzy_sets import FuzzyVariable, fuzzify
from fis.operators import (T_CONORMS, T_NORMS, IMPLICATIONS, aggregate_and,
                           aggregate_or, fuzzy_not, resolve_operator)

logger = logging.getLogger(__name__)


class RuleCondition(NamedTuple):
    variable: str
    set: str
    negated: bool = False


class RuleConsequent(NamedTuple):
    variable: str
    set: str


class FuzzyRule(NamedTuple):
    id: str
    antecedent: tuple
    consequent: RuleConsequent
    weight: float = 1.0
    connective: str = "AND"


def make_rule(rule_id, antecedent, consequent, weight=1.0, connective="AND"):
    """Build a FuzzyRule from plain tuples.

    Example:
        make_rule("r1", [("similarity", "exact_match")],
                  ("confidence", "very_high"))
    """
    conditions = tuple(c if isinstance(c, RuleCondition) else RuleCondition(*c)
                       for c in antecedent)
    return FuzzyRule(rule_id, conditions, RuleConsequent(*consequent),
                     float(weight), connective.upper())


class InferenceResult(NamedTuple):
    crisp_output: float
    fired_rules: list
    universe: np.ndarray
    aggregated: np.ndarray


def _bounded_sum(a, b):
    return np.fmin(1.0, a + b)


def _probabilistic_or(a, b):
    return a + b - a * b


AGGREGATIONS = {
    "max": np.fmax,
    "sum": _bounded_sum,
    "probor": _probabilistic_or,
}

# Configuration used when none (or only part) is given
DEFAULT_FIS_CONFIG = {
    "t_norm": "min",
    "t_conorm": "max",
    "implication": "mamdani",
    "aggregation": "max",
    "defuzzification": "centroid",
    "resolution": 100,
}


class FIS:
    def __init__(self, config=None, **overrides):
        """Initialise the fuzzy-logic inference system.

        Adding variables and rules occurs later with methods.

        Args:
            config (dict, optional): Any subset of DEFAULT_FIS_CONFIG. Values
                are registry names or callables.
            **overrides: Individual config entries, e.g. resolution=200

        Raises:
            KeyError: unknown config key or operator name
            ValueError: resolution below 1
        """
        cfg = dict(DEFAULT_FIS_CONFIG)
        cfg.update(config or {})
        cfg.update(overrides)
        unknown = set(cfg) - set(DEFAULT_FIS_CONFIG)
        if unknown:
            raise KeyError(f"Unknown FIS config keys: {sorted(unknown)}")
        if int(cfg["resolution"]) < 1:
            raise ValueError("resolution must be at least 1")
        self.config = cfg
        self.resolution = int(cfg["resolution"])

        self.t_norm = resolve_operator(T_NORMS, cfg["t_norm"])
        self.t_conorm = resolve_operator(T_CONORMS, cfg["t_conorm"])
        self.implication = resolve_operator(IMPLICATIONS, cfg["implication"])
        self.aggregation = resolve_operator(AGGREGATIONS, cfg["aggregation"])
        self.defuzzifier = resolve_operator(DEFUZZIFIERS,
                                            cfg["defuzzification"])

        # {name: FuzzyVariable}
        self.variables = {}
        # Ordered rule base
        self.rules = []

    def add_variable(self, variable: FuzzyVariable) -> None:
        """Register a fuzzy variable; each name can be registered once."""
        existing = self.variables.get(variable.name)
        if existing is not None and existing is not variable:
            raise ValueError(f"Variable {variable.name!r} already registered")
        self.variables[variable.name] = variable

    def add_variables(self, *variables: FuzzyVariable) -> None:
        for v in variables:
            self.add_variable(v)

    def add_rule(self, rule: FuzzyRule) -> None:
        """Append a rule to the rule base.

        Raises:
            ValueError: negative weight or a connective other than AND / OR
        """
        if rule.weight < 0:
            raise ValueError(f"Rule {rule.id} has negative weight")
        if rule.connective not in ("AND", "OR"):
            raise ValueError(f"Rule {rule.id} connective must be AND or OR, "
                             f"got {rule.connective!r}")
        self.rules.append(rule)
        logger.debug("There are currently %d rules in the FIS.",
                     len(self.rules))

    def add_rules(self, rules) -> None:
        for rule in rules:
            self.add_rule(rule)

    def get_output_variable(self, name: str) -> FuzzyVariable:
        try:
            return self.variables[name]
        except KeyError:
            raise KeyError(f"Output variable {name!r} not found") from None

    def fuzzify_inputs(self, inputs: dict) -> dict:
        """Also known as fuzzification. Unregistered inputs are skipped."""
        fuzzified = {}
        for name, value in inputs.items():
            variable = self.variables.get(name)
            if variable is None:
                logger.debug("Ignoring input %r: no such variable", name)
                continue
            fuzzified[name] = fuzzify(value, variable)
        return fuzzified

    @staticmethod
    def evaluate_condition(condition: RuleCondition, fuzzified: dict) -> float:
        """Membership for one antecedent clause; 0 if the input is missing."""
        mu = fuzzified.get(condition.variable, {}).get(condition.set, 0.0)
        if condition.negated:
            mu = fuzzy_not(mu)
        return mu

    def evaluate_rule(self, rule: FuzzyRule, fuzzified: dict) -> float:
        """Firing strength of a rule, scaled by the rule weight."""
        values = [self.evaluate_condition(c, fuzzified)
                  for c in rule.antecedent]
        if rule.connective == "AND":
            strength = aggregate_and(values, self.t_norm)
        else:
            strength = aggregate_or(values, self.t_conorm)
        return float(strength) * rule.weight

    def aggregate_outputs(self, rule_results, output_variable: FuzzyVariable):
        """Combine the implied consequent sets of all fired rules.

        Args:
            rule_results: iterable of (FuzzyRule, firing_strength)
            output_variable: the variable the rules conclude on

        Returns:
            (x, mu): sampled universe and aggregated membership profile
        """
        x = output_variable.universe(self.resolution)
        mu = np.zeros_like(x)
        for rule, strength in rule_results:
            if strength == 0:
                continue
            consequent = output_variable.get_set(rule.consequent.set)
            implied = self.implication(strength, consequent.sample(x))
            mu = self.aggregation(mu, implied)
        return x, np.clip(mu, 0.0, 1.0)

    def defuzzify(self, x: np.ndarray, mu: np.ndarray) -> float:
        return self.defuzzifier(x, mu)

    def infer(self, inputs: dict, output_name: str) -> InferenceResult:
        """Fuzzify, fire rules, aggregate and defuzzify.

        Args:
            inputs (dict): {variable name: crisp value}
            output_name (str): variable the rules conclude on

        Returns:
            InferenceResult: crisp output plus every rule targeting the
            output with its firing strength

        Raises:
            KeyError: output variable was never registered
        """
        output_variable = self.get_output_variable(output_name)
        fuzzified = self.fuzzify_inputs(inputs)

        rule_results = []
        fired_rules = []
        for rule in self.rules:
            if rule.consequent.variable != output_name:
                continue
            strength = self.evaluate_rule(rule, fuzzified)
            rule_results.append((rule, strength))
            fired_rules.append({"rule_id": rule.id,
                                "firing_strength": strength})

        x, mu = self.aggregate_outputs(rule_results, output_variable)

        if not np.any(mu > 0):
            logger.warning("No rule fired for %r; returning domain midpoint",
                           output_name)
            lo, hi = output_variable.domain
            crisp = (lo + hi) / 2
        else:
            crisp = self.defuzzify(x, mu)

        return InferenceResult(float(crisp), fired_rules, x, mu)

    @staticmethod
    def fired_rules_frame(result: InferenceResult) -> pd.DataFrame:
        """Firing strengths as a dataframe indexed by rule id."""
        df = pd.DataFrame(result.fired_rules,
                          columns=["rule_id", "firing_strength"])
        return df.set_index("rule_id")

    def to_control_system(self, output_name: str) -> ctrl.ControlSystem:
        """Mirror the rules for one output as a skfuzzy ControlSystem.

        skfuzzy always clips consequents (min implication) and accumulates
        with max, so results only agree with ``infer`` for those settings.
        """
        output_variable = self.get_output_variable(output_name)
        rules = [r for r in self.rules if r.consequent.variable == output_name]

        antecedents = {}
        for name in sorted({c.variable for r in rules for c in r.antecedent}):
            variable = self.variables[name]
            ant = ctrl.Antecedent(variable.universe(self.resolution), name)
            for s in variable.sets:
                ant[s.name] = s.sample(ant.universe)
            antecedents[name] = ant

        method = self.config["defuzzification"]
        consequent = ctrl.Consequent(
            output_variable.universe(self.resolution), output_name,
            defuzzify_method=method if isinstance(method, str) else "centroid")
        for s in output_variable.sets:
            consequent[s.name] = s.sample(consequent.universe)

        sk_rules = []
        for rule in rules:
            terms = []
            for c in rule.antecedent:
                term = antecedents[c.variable][c.set]
                terms.append(~term if c.negated else term)
            combine = operator.and_ if rule.connective == "AND" else operator.or_
            antecedent = functools.reduce(combine, terms)
            target = consequent[rule.consequent.set]
            if rule.weight != 1.0:
                target = target % rule.weight
            sk_rules.append(ctrl.Rule(antecedent, target, label=rule.id,
                                      and_func=self.t_norm,
                                      or_func=self.t_conorm))
        return ctrl.ControlSystem(sk_rules)

    def create_control_simulation(self, output_name: str):
        control_system = self.to_control_system(output_name)
        simulation = ctrl.ControlSystemSimulation(control_system)
        return control_system, simulation
