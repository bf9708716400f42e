"""General maths functions.
"""
import numpy as np

def compute_weighted_mean(w: np.ndarray, x: np.ndarray) -> float:
    """Compute the weighted mean of an array.

    Args:
        w (np.ndarray): The weights (memberships, firing strengths).
        x (np.ndarray): The values.

    Returns:
        float: The weighted mean, or 0.0 if the weights sum to zero.
    """
    w = np.asarray(w, dtype=float)
    x = np.asarray(x, dtype=float)
    total = np.sum(w)
    if total == 0:
        return 0.0
    return float(np.sum((w / total) * x))


def harmonic_mean(a: float, b: float) -> float:
    """Harmonic mean of two non-negative scores; 0 if both are 0."""
    if a + b <= 0:
        return 0.0
    return 2.0 * a * b / (a + b)


def safe_mean(values) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    values = np.asarray(list(values), dtype=float)
    if values.size == 0:
        return 0.0
    return float(np.mean(values))
