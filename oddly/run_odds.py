#!/usr/bin/env python3
from __future__ import annotations

"""CLI entry point that prints the odds table for a "pick K of N" game."""

import argparse
import json
import logging
import math
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from oddly.odds_engine import OddsConfig, OddsEngine


def sanitize(value: Any) -> Any:
    """Strip NaN/Inf values so JSON dumps stay valid."""
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, list):
        return [sanitize(v) for v in value]
    if isinstance(value, dict):
        return {k: sanitize(v) for k, v in value.items()}
    return value


def main() -> None:
    parser = argparse.ArgumentParser(description="Compute hypergeometric match odds for a lottery-style draw.")
    parser.add_argument("--max-value", type=int, default=52, help="Pool size N (numbers 1..N).")
    parser.add_argument("--quantity", type=int, default=6, help="Numbers drawn per set (K).")
    parser.add_argument("--sets", type=int, default=1, help="Independent sets played (S).")
    parser.add_argument(
        "--previous-sets",
        type=int,
        help="Also report each chance as it was with this many sets (prev* fields).",
    )
    parser.add_argument("--log-threshold", type=int, default=300, help="n above which C(n, r) uses logs.")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), stream=sys.stderr)

    config = OddsConfig(combinationsLogThreshold=args.log_threshold)
    engine = OddsEngine(config)
    previous = None
    if args.previous_sets is not None:
        previous = engine.compute_odds(args.max_value, args.quantity, args.previous_sets)
    result = engine.compute_odds(args.max_value, args.quantity, args.sets, previous=previous)

    output = {
        "maxValue": args.max_value,
        "quantity": args.quantity,
        "numSets": args.sets,
        "config": asdict(config),
        **result.to_dict(),
    }
    print(json.dumps(sanitize(output), indent=2))


if __name__ == "__main__":
    main()
