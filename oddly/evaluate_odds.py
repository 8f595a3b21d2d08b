#!/usr/bin/env python3
from __future__ import annotations

"""Batch runner that checks analytic odds against Monte Carlo match frequencies."""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from oddly.mersenne_twister import create_rng
from oddly.number_utils import count_matches, draw_set
from oddly.odds_engine import OddsEngine

logger = logging.getLogger("oddly.evaluate_odds")

DEFAULT_GAMES: List[Tuple[int, int]] = [(10, 3), (40, 6), (49, 6), (52, 6), (69, 5)]
SET_COUNTS = (1, 10, 100, 1000, 10000)


def parse_game(text: str) -> Tuple[int, int]:
    """Parse ``N:K`` (pool size, numbers drawn)."""
    try:
        pool, drawn = (int(part) for part in text.split(":"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected N:K, got {text!r}") from exc
    return pool, drawn


def run_analytic(engine: OddsEngine, max_value: int, quantity: int, sets: int) -> Dict[str, Any]:
    """Compute the odds table on a cold cache and time it."""
    engine.clear_caches()
    start = time.perf_counter()
    result = engine.compute_odds(max_value, quantity, sets)
    elapsed = (time.perf_counter() - start) * 1000.0
    jackpot_curve = [
        {
            "sets": s,
            "adjustedChance": engine.adjusted_probability(result.for_match(quantity).singleChance, s),
        }
        for s in SET_COUNTS
    ]
    return {
        "totalCombinations": result.totalCombinations,
        "singleChances": [entry.singleChance for entry in result.perMatchOdds],
        "adjustedChances": [entry.adjustedChance for entry in result.perMatchOdds],
        "jackpotCurve": jackpot_curve,
        "runtimeMs": elapsed,
    }


def run_monte_carlo(max_value: int, quantity: int, trials: int, seed: int) -> Dict[str, Any]:
    """Draw one winning set, then ``trials`` tickets, and histogram the match counts."""
    rng = create_rng(seed)
    pool = list(range(1, max_value + 1))
    winning = draw_set(pool, quantity, rng)
    histogram = [0] * (quantity + 1)
    start = time.perf_counter()
    for _ in range(trials):
        histogram[count_matches(draw_set(pool, quantity, rng), winning)] += 1
    elapsed = (time.perf_counter() - start) * 1000.0
    return {
        "winningSet": winning,
        "histogram": histogram,
        "frequencies": [count / trials for count in histogram],
        "runtimeMs": elapsed,
    }


def total_variation(expected: Sequence[float], observed: Sequence[float]) -> float:
    """Half the L1 distance between two distributions over the same support."""
    return 0.5 * sum(abs(e - o) for e, o in zip(expected, observed))


def main() -> None:
    parser = argparse.ArgumentParser(description="Compare analytic odds with simulated match frequencies.")
    parser.add_argument("--game", type=parse_game, action="append", help="Game as N:K; repeatable.")
    parser.add_argument("--sets", type=int, default=1, help="Independent sets played (S).")
    parser.add_argument("--trials", type=int, default=20000, help="Simulated tickets per game.")
    parser.add_argument("--seed", type=int, default=1337)
    parser.add_argument("--output", required=True, help="Path to write JSON summary.")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), stream=sys.stderr)

    games = args.game or DEFAULT_GAMES
    engine = OddsEngine()
    results: List[Dict[str, Any]] = []

    for idx, (max_value, quantity) in enumerate(games):
        analytic = run_analytic(engine, max_value, quantity, args.sets)
        simulated = run_monte_carlo(max_value, quantity, args.trials, args.seed + idx)
        distance = total_variation(analytic["singleChances"], simulated["frequencies"])
        logger.info("game %d/%d: total variation %.5f", max_value, quantity, distance)
        results.append(
            {
                "game": f"{quantity}/{max_value}",
                "maxValue": max_value,
                "quantity": quantity,
                "numSets": args.sets,
                "trials": args.trials,
                "analytic": analytic,
                "monteCarlo": simulated,
                "totalVariation": distance,
            }
        )

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w") as f:
        json.dump(results, f, indent=2)

    print(f"Wrote odds evaluation for {len(results)} games to {output_path}")


if __name__ == "__main__":
    main()
