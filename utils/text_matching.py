"""String similarity used to match returned activity titles to expected names."""

import numpy as np


def levenshtein_distance(s1: str, s2: str) -> int:
    """Edit distance (insert, delete, substitute all cost 1)."""
    m, n = len(s1), len(s2)
    dp = np.zeros((m + 1, n + 1), dtype=int)
    dp[:, 0] = np.arange(m + 1)
    dp[0, :] = np.arange(n + 1)

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if s1[i - 1] == s2[j - 1]:
                dp[i, j] = dp[i - 1, j - 1]
            else:
                dp[i, j] = 1 + min(dp[i - 1, j], dp[i, j - 1],
                                   dp[i - 1, j - 1])
    return int(dp[m, n])


def _normalise(s: str) -> str:
    return s.lower().strip()


def string_similarity(s1: str, s2: str) -> float:
    """Normalised Levenshtein similarity in [0, 1].

    Case and surrounding whitespace are ignored. Identical strings score 1;
    if either string is empty (and they differ) the score is 0.
    """
    a, b = _normalise(s1), _normalise(s2)
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return 1.0 - levenshtein_distance(a, b) / max(len(a), len(b))


def find_matching_name(title: str, expected_names, threshold: float = 0.6
                       ) -> dict:
    """Best expected name for a returned title.

    Equality or containment in either direction is an immediate match with
    similarity 1. Otherwise the most similar name is reported, matched only
    if its similarity reaches threshold.

    Returns:
        dict: {"matched": bool, "matched_name": str or None, "similarity"}
    """
    best = {"matched": False, "matched_name": None, "similarity": 0.0}
    t = _normalise(title)
    for name in expected_names:
        e = _normalise(name)
        if t == e or e in t or t in e:
            return {"matched": True, "matched_name": name, "similarity": 1.0}
        sim = string_similarity(t, e)
        if sim > best["similarity"]:
            matched = sim >= threshold
            best = {"matched": matched,
                    "matched_name": name if matched else None,
                    "similarity": sim}
    return best
