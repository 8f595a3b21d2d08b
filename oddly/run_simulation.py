#!/usr/bin/env python3
from __future__ import annotations

"""CLI entry point for running the LottoSimulator until it hits the winning set."""

import argparse
import json
import logging
import signal
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from oddly.mersenne_twister import create_rng
from oddly.run_odds import sanitize
from oddly.simulation import LottoSimulator, SimulationConfig, SimulationProgress

logger = logging.getLogger("oddly.run_simulation")


def log_progress(progress: SimulationProgress) -> None:
    """Report notifying progress updates on stderr."""
    if progress.shouldNotify:
        logger.info(
            "attempt %d: best match %d %s",
            progress.currentAttempt,
            progress.bestMatch.count,
            progress.bestMatch.numbers,
        )


def main() -> None:
    parser = argparse.ArgumentParser(description="Keep drawing sets until one matches the winning set.")
    parser.add_argument("--max-value", type=int, default=20)
    parser.add_argument("--quantity", type=int, default=3)
    parser.add_argument("--seed", type=int, default=1337, help="Deterministic RNG seed.")
    parser.add_argument("--winning", type=int, nargs="+", help="Fixed winning set (default: drawn).")
    parser.add_argument("--max-attempts", type=int, default=1000000)
    parser.add_argument("--notify-every", type=int, default=1000)
    parser.add_argument("--throttle", action="store_true", help="Sleep for the accelerated delay between batches.")
    parser.add_argument("--no-acceleration", action="store_true")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), stream=sys.stderr)

    config = SimulationConfig(
        maxAttempts=args.max_attempts,
        notificationFrequency=args.notify_every,
        enableAcceleration=not args.no_acceleration,
        throttle=args.throttle,
    )
    simulator = LottoSimulator(
        args.quantity,
        args.max_value,
        config=config,
        rng=create_rng(args.seed),
        on_progress=log_progress,
    )
    if args.winning:
        simulator.set_winning_set(args.winning)

    # Ctrl-C ends the run at the next attempt and still prints the result.
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: simulator.stop())
    try:
        result = simulator.run()
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    output = {"config": config.__dict__, **result.to_dict()}
    print(json.dumps(sanitize(output), indent=2))


if __name__ == "__main__":
    main()
