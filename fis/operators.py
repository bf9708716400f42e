"""Fuzzy operators: T-norms (AND), T-conorms (OR), negations, implications
and aggregation operators over membership degrees in [0, 1].

T-norms satisfy T(a, 1) = a and T-conorms S(a, 0) = a; both families are
commutative, associative and monotone. For any a, b:

    drastic <= lukasiewicz <= product <= min      (T-norms)
    max <= probabilistic sum <= lukasiewicz <= drastic   (T-conorms)

References:
    Klement, E. P., Mesiar, R. & Pap, E. (2000). Triangular Norms.
    Yager, R. R. (1988). On ordered weighted averaging aggregation operators.
"""

import numpy as np

########## T-NORMS ##########

def t_norm_min(a: float, b: float) -> float:
    """Goedel / Zadeh minimum."""
    return min(a, b)


def t_norm_product(a: float, b: float) -> float:
    return a * b


def t_norm_lukasiewicz(a: float, b: float) -> float:
    """Bounded difference max(0, a + b - 1)."""
    return max(0.0, a + b - 1.0)


def t_norm_drastic(a: float, b: float) -> float:
    """Zero unless one operand is exactly 1."""
    if a == 1:
        return b
    if b == 1:
        return a
    return 0.0


def t_norm_hamacher(a: float, b: float, gamma: float = 0.0) -> float:
    """Hamacher family ab / (gamma + (1 - gamma)(a + b - ab)).

    gamma = 0 is the Hamacher product, gamma = 1 the algebraic product.
    """
    if gamma == 0:
        if a == 0 and b == 0:
            return 0.0
        return (a * b) / (a + b - a * b)
    denom = gamma + (1 - gamma) * (a + b - a * b)
    return 0.0 if denom == 0 else (a * b) / denom

########## T-CONORMS ##########

def t_conorm_max(a: float, b: float) -> float:
    return max(a, b)


def t_conorm_probabilistic_sum(a: float, b: float) -> float:
    """Algebraic sum a + b - ab, dual of the product."""
    return a + b - a * b


def t_conorm_lukasiewicz(a: float, b: float) -> float:
    """Bounded sum min(1, a + b)."""
    return min(1.0, a + b)


def t_conorm_drastic(a: float, b: float) -> float:
    """One unless one operand is exactly 0."""
    if a == 0:
        return b
    if b == 0:
        return a
    return 1.0

########## NEGATIONS ##########

def fuzzy_not(a: float) -> float:
    return 1.0 - a


def fuzzy_not_sugeno(a: float, lam: float = 0.0) -> float:
    """Sugeno class (1 - a) / (1 + lam * a), lam > -1. lam = 0 is 1 - a.

    Raises:
        ValueError: lam <= -1
    """
    if lam <= -1:
        raise ValueError(f"Sugeno negation needs lam > -1, got {lam}")
    return (1.0 - a) / (1.0 + lam * a)

########## IMPLICATIONS ##########
# Applied to a firing strength and a whole sampled consequent set, so these
# work elementwise on numpy arrays as well as on scalars.

def implication_mamdani(a, b):
    """Clipping: min(a, b)."""
    return np.fmin(a, b)


def implication_larsen(a, b):
    """Scaling: a * b."""
    return np.multiply(a, b)


def implication_kleene_dienes(a, b):
    return np.fmax(1.0 - a, b)


def implication_lukasiewicz(a, b):
    return np.fmin(1.0, 1.0 - a + b)

########## AGGREGATION ##########

def aggregate_and(values, t_norm=t_norm_min) -> float:
    """Fold values through a T-norm starting from the neutral element 1."""
    result = 1.0
    for v in values:
        result = t_norm(result, v)
    return result


def aggregate_or(values, t_conorm=t_conorm_max) -> float:
    """Fold values through a T-conorm starting from the neutral element 0."""
    result = 0.0
    for v in values:
        result = t_conorm(result, v)
    return result


def generate_owa_weights(n: int, kind: str = "average") -> np.ndarray:
    """Weights for the OWA operator.

    Args:
        n: Number of values to aggregate
        kind: "andlike" puts weight on the smallest values, "orlike" on the
            largest, "average" is uniform

    Returns:
        np.ndarray: n weights summing to 1
    """
    if n <= 0:
        return np.array([], dtype=float)
    i = np.arange(n, dtype=float)
    if kind == "andlike":
        return 2.0 * (i + 1) / (n * (n + 1))
    elif kind == "orlike":
        return 2.0 * (n - i) / (n * (n + 1))
    return np.full(n, 1.0 / n)


def owa_operator(values, weights=None) -> float:
    """Ordered weighted average: weights applied to the values sorted
    descending. Falls back to uniform weights if the lengths differ.
    """
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return 0.0
    if weights is None or len(weights) != values.size:
        weights = generate_owa_weights(values.size, "average")
    ordered = np.sort(values)[::-1]
    return float(np.sum(np.asarray(weights, dtype=float) * ordered))


def compensatory_and(values, gamma: float = 0.5) -> float:
    """Zimmermann-Zysno style blend product^(1 - gamma) * mean^gamma.

    gamma = 0 is the product T-norm, gamma = 1 the arithmetic mean.
    """
    values = list(values)
    if not values:
        return 1.0
    t = aggregate_and(values, t_norm_product)
    mean = sum(values) / len(values)
    return float(t ** (1.0 - gamma) * mean ** gamma)

########## REGISTRIES ##########

T_NORMS = {
    "min": t_norm_min,
    "product": t_norm_product,
    "lukasiewicz": t_norm_lukasiewicz,
    "drastic": t_norm_drastic,
    "hamacher": t_norm_hamacher,
}

T_CONORMS = {
    "max": t_conorm_max,
    "probabilistic_sum": t_conorm_probabilistic_sum,
    "lukasiewicz": t_conorm_lukasiewicz,
    "drastic": t_conorm_drastic,
}

IMPLICATIONS = {
    "mamdani": implication_mamdani,
    "larsen": implication_larsen,
    "kleene_dienes": implication_kleene_dienes,
    "lukasiewicz": implication_lukasiewicz,
}


def resolve_operator(registry: dict, name):
    """Look up an operator by name. Callables are passed through unchanged.

    Raises:
        KeyError: name is not in the registry
    """
    if callable(name):
        return name
    try:
        return registry[name]
    except KeyError:
        raise KeyError(f"Unknown operator {name!r}; "
                       f"choose from {sorted(registry)}") from None
