from __future__ import annotations

"""Frequency and pair statistics over previously generated number sets."""

import time
from collections import Counter
from dataclasses import dataclass, field
from itertools import combinations as pairs_of
from typing import Dict, List, Sequence, Tuple


@dataclass
class HistoryEntry:
    numbers: List[int]
    quantity: int
    maxValue: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class NumberFrequency:
    number: int
    count: int
    percentage: float


def number_frequencies(entries: Sequence[HistoryEntry]) -> List[NumberFrequency]:
    """Count every number from 1 up to the largest pool seen across ``entries``."""
    if not entries:
        return []
    highest = max(entry.maxValue for entry in entries)
    counts = Counter(n for entry in entries for n in entry.numbers)
    total = sum(len(entry.numbers) for entry in entries)
    return [
        NumberFrequency(
            number=n,
            count=counts.get(n, 0),
            percentage=(counts.get(n, 0) / total * 100.0) if total else 0.0,
        )
        for n in range(1, highest + 1)
    ]


def most_and_least_frequent(
    frequencies: Sequence[NumberFrequency], limit: int = 5
) -> Tuple[List[NumberFrequency], List[NumberFrequency]]:
    """Split drawn numbers into the top ``limit`` and bottom ``limit`` by count.

    Numbers never drawn are ignored. The least-frequent list stays empty until
    more than ``limit`` distinct numbers have been drawn, so the two lists
    never overlap.
    """
    drawn = sorted((f for f in frequencies if f.count > 0), key=lambda f: f.count, reverse=True)
    most = drawn[:limit]
    least = list(reversed(drawn[max(limit, len(drawn) - limit):]))
    return most, least


def common_pairs(entries: Sequence[HistoryEntry], limit: int = 10) -> List[Dict[str, object]]:
    """Most frequent unordered pairs appearing together in one set."""
    counts: Counter = Counter()
    for entry in entries:
        for a, b in pairs_of(sorted(set(entry.numbers)), 2):
            counts[(a, b)] += 1
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [{"pair": [a, b], "count": count} for (a, b), count in ranked[:limit]]
