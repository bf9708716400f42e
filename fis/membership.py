"""Membership functions mapping a crisp value to a degree of membership.

Every function accepts either a scalar or a numpy array (a universe of
discourse). Scalars give back a float; arrays give back an array of the same
shape. Evaluation is mask-based, like the trapezium builders of the FIS
class, and the result is always clipped to [0, 1].

Shapes with a vertical edge (e.g. a == b for a triangle) are evaluated as a
step rather than dividing by zero, and the point on the edge belongs to the
core (mu = 1). Use ``create_membership_function`` when the
parameters come from a definition: it rejects degenerate shapes up front.

References:
    Zadeh, L. A. (1965). Fuzzy sets.
    Klir, G. J. & Yuan, B. (1995). Fuzzy Sets and Fuzzy Logic.
"""

import numpy as np
from scipy.special import expit


def _as_array(x):
    return np.atleast_1d(np.asarray(x, dtype=float))


def _finish(y: np.ndarray, x):
    y = np.clip(y, 0.0, 1.0)
    if np.ndim(x) == 0:
        return float(y[0])
    return y.reshape(np.shape(x))


def triangular(x, a: float, b: float, c: float):
    """Triangle with feet at a and c and its peak (mu = 1) at b.

    Args:
        x: Crisp value(s)
        a: Left foot
        b: Peak
        c: Right foot

    Returns:
        Membership degree(s) in [0, 1]
    """
    xa = _as_array(x)
    y = np.zeros_like(xa)

    rise = (xa > a) & (xa < b)
    y[rise] = (xa[rise] - a) / (b - a)

    y[xa == b] = 1.0

    fall = (xa > b) & (xa < c)
    y[fall] = (c - xa[fall]) / (c - b)
    return _finish(y, x)


def trapezoidal(x, a: float, b: float, c: float, d: float):
    """Trapezium rising on (a, b), plateau of 1 on [b, c], falling on (c, d).

    Args:
        x: Crisp value(s)
        a: Left foot
        b: Left edge of the core
        c: Right edge of the core
        d: Right foot

    Returns:
        Membership degree(s) in [0, 1]
    """
    xa = _as_array(x)
    y = np.zeros_like(xa)

    core = (xa >= b) & (xa <= c)
    y[core] = 1.0

    rise = (xa > a) & (xa < b)
    y[rise] = (xa[rise] - a) / (b - a)

    fall = (xa > c) & (xa < d)
    y[fall] = (d - xa[fall]) / (d - c)
    return _finish(y, x)


def gaussian(x, c: float, sigma: float):
    """Gaussian bell exp(-(x - c)^2 / (2 sigma^2)) centred on c."""
    xa = _as_array(x)
    if sigma == 0:
        return _finish((xa == c).astype(float), x)
    y = np.exp(-((xa - c) ** 2) / (2.0 * sigma ** 2))
    return _finish(y, x)


def generalized_bell(x, a: float, b: float, c: float):
    """Generalised bell 1 / (1 + |(x - c) / a|^(2b)).

    Args:
        x: Crisp value(s)
        a: Width
        b: Slope
        c: Centre
    """
    xa = _as_array(x)
    if a == 0:
        return _finish((xa == c).astype(float), x)
    y = 1.0 / (1.0 + np.abs((xa - c) / a) ** (2.0 * b))
    return _finish(y, x)


def sigmoid(x, a: float, c: float):
    """Logistic curve with slope a and crossover (mu = 0.5) at c.

    A positive slope rises, a negative slope falls.
    """
    xa = _as_array(x)
    return _finish(expit(a * (xa - c)), x)


def left_shoulder(x, a: float, b: float):
    """Full membership up to a, linear fall to 0 at b, 0 beyond."""
    xa = _as_array(x)
    y = np.zeros_like(xa)

    slope = (xa > a) & (xa < b)
    y[slope] = (b - xa[slope]) / (b - a)

    y[xa <= a] = 1.0
    return _finish(y, x)


def right_shoulder(x, a: float, b: float):
    """Zero membership up to a, linear rise to 1 at b, 1 beyond."""
    xa = _as_array(x)
    y = np.ones_like(xa)

    slope = (xa > a) & (xa < b)
    y[slope] = (xa[slope] - a) / (b - a)

    y[xa <= a] = 0.0
    y[xa >= b] = 1.0
    return _finish(y, x)


def pi_shaped(x, a: float, b: float, c: float, d: float):
    """Rising shoulder on (a, b], plateau on (b, c], falling shoulder to d."""
    xa = _as_array(x)
    y = np.where(xa <= b, right_shoulder(xa, a, b),
                 np.where(xa <= c, 1.0, left_shoulder(xa, c, d)))
    return _finish(y, x)


# kind: (function, number of shape parameters)
MF_KINDS = {
    "triangular": (triangular, 3),
    "trapezoidal": (trapezoidal, 4),
    "gaussian": (gaussian, 2),
    "generalized_bell": (generalized_bell, 3),
    "sigmoid": (sigmoid, 2),
    "left_shoulder": (left_shoulder, 2),
    "right_shoulder": (right_shoulder, 2),
    "pi_shaped": (pi_shaped, 4),
}


def validate_params(kind: str, params) -> tuple:
    """Check a (kind, params) definition and return the params as a tuple.

    Raises:
        ValueError: Unknown kind, wrong number of parameters or a degenerate
            shape that would divide by zero.
    """
    if kind not in MF_KINDS:
        raise ValueError(f"Unknown membership function type: {kind}. "
                         f"Known types: {sorted(MF_KINDS)}")
    _, n_params = MF_KINDS[kind]
    params = tuple(float(p) for p in params)
    if len(params) != n_params:
        raise ValueError(f"{kind} needs {n_params} parameters, "
                         f"got {len(params)}")

    if kind == "triangular":
        a, b, c = params
        if not a < b < c:
            raise ValueError(f"triangular must satisfy a < b < c, got {params}")
    elif kind in ("trapezoidal", "pi_shaped"):
        a, b, c, d = params
        if not a < b <= c < d:
            raise ValueError(f"{kind} must satisfy a < b <= c < d, "
                             f"got {params}")
    elif kind in ("left_shoulder", "right_shoulder"):
        a, b = params
        if not a < b:
            raise ValueError(f"{kind} must satisfy a < b, got {params}")
    elif kind == "gaussian":
        if params[1] <= 0:
            raise ValueError(f"gaussian sigma must be positive, got {params[1]}")
    elif kind == "generalized_bell":
        if params[0] == 0:
            raise ValueError("generalized_bell width a must be non-zero")
    elif kind == "sigmoid":
        if params[0] == 0:
            raise ValueError("sigmoid slope a must be non-zero")
    return params


class MembershipFunction:
    """A validated membership function built from a (kind, params) definition.

    Instances are callables over scalars or numpy universes and are not meant
    to be modified after construction.
    """
    __slots__ = ("kind", "params", "_func")

    def __init__(self, kind: str, params):
        self.params = validate_params(kind, params)
        self.kind = kind
        self._func = MF_KINDS[kind][0]

    def __call__(self, x):
        return self._func(x, *self.params)

    def __repr__(self):
        return f"MembershipFunction({self.kind!r}, {self.params})"

    def __eq__(self, other):
        if not isinstance(other, MembershipFunction):
            return NotImplemented
        return (self.kind, self.params) == (other.kind, other.params)

    def __hash__(self):
        return hash((self.kind, self.params))


def create_membership_function(kind: str, params) -> MembershipFunction:
    return MembershipFunction(kind, params)
