#!/usr/bin/env python3
"""Score fuzzy and LLM query parsers against gold-standard cases.

Reads a JSON list of evaluation cases (see verif.comparison), computes fuzzy
precision / recall / F1 and filter accuracy per case, and prints per-model
averages with the LLM-minus-fuzzy differences.

Example:
    python scripts/evaluate_queries.py -c cases.json -o runs --plot
"""

from __future__ import annotations

import argparse
import datetime as dt
import json
import logging
import os
import sys
from pathlib import Path

import pandas as pd

# Ensure repo root is on sys.path so the packages can be imported when this
# script is run directly from a checkout.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from utils.runlog import build_run_summary, write_run_summary  # noqa: E402
from verif.comparison import build_comparison_report  # noqa: E402


def _load_cases(path: str) -> list:
    with open(path) as f:
        cases = json.load(f)
    if not isinstance(cases, list):
        raise argparse.ArgumentTypeError(
            f"Expected a JSON list of cases in '{path}'")
    return cases


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare query parsers with fuzzy precision and recall.",
    )
    parser.add_argument(
        "-c",
        "--cases",
        required=True,
        help="JSON file with a list of evaluation cases.",
    )
    parser.add_argument(
        "-o",
        "--output-root",
        default=None,
        help="If set, write a run summary under <output-root>/<run-id>/.",
    )
    parser.add_argument(
        "--run-id",
        default=None,
        help="Run identifier (default: UTC time stamp).",
    )
    parser.add_argument(
        "--plot",
        action="store_true",
        help="Save a bar chart of per-model averages next to the summary.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Default: INFO.",
    )
    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    cases = _load_cases(args.cases)
    logging.info("Evaluating %d cases from %s", len(cases), args.cases)
    report = build_comparison_report(cases)

    if report["cases"].empty:
        logging.error("Nothing to evaluate")
        return 1

    with pd.option_context("display.float_format", "{:.3f}".format,
                           "display.width", 120):
        print(report["cases"][["id", "model", "precision", "recall", "f1",
                               "filter_accuracy", "summary"]]
              .to_string(index=False))
        print()
        print(report["averages"].to_string())
        if report["difference"] is not None:
            print()
            print("LLM minus fuzzy:")
            print(report["difference"].to_string())

    if args.output_root:
        run_id = args.run_id or dt.datetime.now(dt.timezone.utc).strftime(
            "%Y%m%d%H%M%S")
        summary = build_run_summary(report, cases_path=args.cases)
        path = write_run_summary(args.output_root, run_id, summary)
        logging.info("Wrote run summary to %s", path)

        if args.plot:
            from viz.plotting import plot_model_comparison
            fig_path = os.path.join(os.path.dirname(path), "comparison.png")
            plot_model_comparison(report["averages"], save_path=fig_path)
            logging.info("Saved comparison chart to %s", fig_path)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
