import datetime
import json
import os
import subprocess
from typing import Any, Dict, Optional

import numpy as np


def _git_commit_hash() -> Optional[str]:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], text=True,
                                      stderr=subprocess.DEVNULL)
        return out.strip()
    except (OSError, subprocess.CalledProcessError):
        return None


def _to_json(value):
    """Make numpy scalars and NaN JSON friendly (NaN becomes null)."""
    if isinstance(value, dict):
        return {str(k): _to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    if isinstance(value, (np.integer,)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        return None if np.isnan(value) else float(value)
    if isinstance(value, np.bool_):
        return bool(value)
    return value


def build_run_summary(report: Dict[str, Any], cases_path: str = None
                      ) -> Dict[str, Any]:
    """Condense a comparison report into a JSON-ready run summary.

    Args:
        report: Output of verif.comparison.build_comparison_report.
        cases_path: Where the evaluation cases were read from.
    """
    averages = report["averages"]
    difference = report["difference"]
    cases = report["cases"]
    return {
        "created_utc": datetime.datetime.now(datetime.timezone.utc)
                       .strftime("%Y-%m-%dT%H:%M:%SZ"),
        "cases_path": cases_path,
        "n_cases": int(len(cases)),
        "n_unmeasurable": int((~cases["measurable"]).sum())
                          if "measurable" in cases else 0,
        "averages": averages.to_dict(orient="index"),
        "llm_minus_fuzzy": None if difference is None
                           else difference.to_dict(),
    }


def write_run_summary(
    data_root: str,
    run_id: str,
    summary: Dict[str, Any],
) -> str:
    """Write a compact JSON summary for an evaluation run under
    <data_root>/<run_id>/run.json.

    Args:
        data_root: Base directory for outputs.
        run_id: Unique identifier for the run (e.g., a time stamp).
        summary: Dict containing run metadata and metrics.

    Returns:
        The path written to.
    """
    out_dir = os.path.join(data_root, str(run_id))
    os.makedirs(out_dir, exist_ok=True)

    # Attach code commit hash if available
    if not summary.get("code_commit"):
        summary["code_commit"] = _git_commit_hash()

    out_path = os.path.join(out_dir, "run.json")
    with open(out_path, "w") as f:
        json.dump(_to_json(summary), f, indent=2, sort_keys=True)
    return out_path
