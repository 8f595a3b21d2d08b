#!/usr/bin/env python3
from __future__ import annotations

"""CLI entry point that draws one or more number sets from a seeded generator."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from oddly.history import HistoryEntry, common_pairs, most_and_least_frequent, number_frequencies
from oddly.mersenne_twister import create_rng
from oddly.number_utils import available_numbers, draw_set, has_enough_numbers

logger = logging.getLogger("oddly.run_generate")


def generate_sets(
    max_value: int,
    quantity: int,
    count: int,
    seed: int | None,
    exclude_used: bool,
) -> Dict[str, Any]:
    """Draw ``count`` sets; with ``exclude_used`` no number repeats across sets."""
    rng = create_rng(seed)
    used: List[int] = []
    sets: List[List[int]] = []
    for _ in range(count):
        pool = available_numbers(max_value, used) if exclude_used else list(range(1, max_value + 1))
        if not has_enough_numbers(len(pool), quantity):
            logger.warning(
                "only %d numbers left, %d needed; stopping after %d sets",
                len(pool), quantity, len(sets),
            )
            break
        numbers = draw_set(pool, quantity, rng)
        sets.append(numbers)
        if exclude_used:
            used.extend(numbers)
    return {
        "seed": rng.initial_seed,
        "sets": sets,
        "remaining": len(available_numbers(max_value, used)),
    }


def analyse(sets: List[List[int]], quantity: int, max_value: int) -> Dict[str, Any]:
    """Frequency and pair summary for the generated sets."""
    entries = [HistoryEntry(numbers=s, quantity=quantity, maxValue=max_value) for s in sets]
    frequencies = number_frequencies(entries)
    most, least = most_and_least_frequent(frequencies)
    return {
        "frequencies": [asdict(f) for f in frequencies],
        "mostFrequent": [asdict(f) for f in most],
        "leastFrequent": [asdict(f) for f in least],
        "commonPairs": common_pairs(entries),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate lottery-style number sets.")
    parser.add_argument("--max-value", type=int, default=52)
    parser.add_argument("--quantity", type=int, default=6)
    parser.add_argument("--count", type=int, default=1, help="Number of sets to draw.")
    parser.add_argument("--seed", type=int, help="Deterministic RNG seed (default: clock).")
    parser.add_argument("--exclude-used", action="store_true", help="Never reuse a number across sets.")
    parser.add_argument("--sorted", action="store_true", help="Sort each set ascending.")
    parser.add_argument("--analyze", action="store_true", help="Append frequency and pair statistics.")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), stream=sys.stderr)

    output = generate_sets(args.max_value, args.quantity, args.count, args.seed, args.exclude_used)
    if args.sorted:
        output["sets"] = [sorted(s) for s in output["sets"]]
    output["maxValue"] = args.max_value
    output["quantity"] = args.quantity
    if args.analyze:
        output["analysis"] = analyse(output["sets"], args.quantity, args.max_value)
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
