#!/usr/bin/env python3
from __future__ import annotations

"""Plotting utility that visualises analytic odds against simulated frequencies."""

import argparse
import json
import math
from pathlib import Path
from typing import Any, Dict, List

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


def load_summary(path: Path) -> List[Dict[str, Any]]:
    """Parse the JSON summary emitted by evaluate_odds.py."""
    with path.open() as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError("Summary file must contain a list of game records")
    return data


def build_figure(summary: List[Dict[str, Any]]):
    """Lay out the four comparison panels and return the figure."""
    fig, axes = plt.subplots(2, 2, figsize=(14, 10))

    ax0 = axes[0, 0]
    for entry in summary:
        matches = list(range(entry["quantity"] + 1))
        line = ax0.plot(matches, entry["analytic"]["singleChances"], label=entry["game"])[0]
        ax0.scatter(
            matches,
            entry["monteCarlo"]["frequencies"],
            marker="x",
            color=line.get_color(),
        )
    ax0.set_yscale("symlog", linthresh=1e-6)
    ax0.set_xlabel("Numbers matched")
    ax0.set_ylabel("Probability (line) / simulated frequency (x)")
    ax0.set_title("Single-Set Match Odds")
    ax0.legend()

    ax1 = axes[0, 1]
    games = [entry["game"] for entry in summary]
    log_combos = [math.log10(entry["analytic"]["totalCombinations"]) for entry in summary]
    ax1.bar(games, log_combos, color="#2563eb")
    ax1.set_xlabel("Game (K/N)")
    ax1.set_ylabel("log10(total combinations)")
    ax1.set_title("Size of the Combination Space")

    ax2 = axes[1, 0]
    for entry in summary:
        curve = entry["analytic"]["jackpotCurve"]
        ax2.plot(
            [point["sets"] for point in curve],
            [point["adjustedChance"] for point in curve],
            marker="o",
            label=entry["game"],
        )
    ax2.set_xscale("log")
    ax2.set_yscale("log")
    ax2.set_xlabel("Sets played")
    ax2.set_ylabel("Chance of at least one full match")
    ax2.set_title("Jackpot Odds vs. Number of Sets")
    ax2.legend()

    ax3 = axes[1, 1]
    ax3.bar(games, [entry["totalVariation"] for entry in summary], color="#a855f7")
    ax3.set_xlabel("Game (K/N)")
    ax3.set_ylabel("Total variation distance")
    ax3.set_title("Analytic vs. Simulated Distribution Gap")

    fig.tight_layout()
    return fig


def main() -> None:
    parser = argparse.ArgumentParser(description="Plot analytic odds against Monte Carlo frequencies.")
    parser.add_argument("--summary", required=True, help="JSON output from evaluate_odds.py")
    parser.add_argument("--output", required=True, help="Path to save the figure (PNG/SVG).")
    args = parser.parse_args()

    summary = load_summary(Path(args.summary))
    if not summary:
        raise ValueError("Summary is empty")

    fig = build_figure(summary)
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=200)
    plt.close(fig)
    print(f"Saved odds plot to {output_path}")


if __name__ == "__main__":
    main()
