from __future__ import annotations

"""Helpers that turn a pool of available numbers into drawn sets."""

from typing import Iterable, List, Optional, Sequence

from oddly.errors import InsufficientRangeError, InvalidArgumentError, describe_call, require_int
from oddly.mersenne_twister import MersenneTwister, get_default_rng


def _is_contiguous_from_one(pool: Sequence[int]) -> bool:
    """True when ``pool`` holds exactly the numbers 1..len(pool)."""
    return bool(pool) and min(pool) == 1 and max(pool) == len(pool)


def draw_set(
    pool: Sequence[int],
    quantity: int,
    rng: Optional[MersenneTwister] = None,
) -> List[int]:
    """Draw ``quantity`` distinct numbers from ``pool`` without touching the caller's sequence."""
    call = describe_call("draw_set", pool_size=len(pool), quantity=quantity)
    quantity = require_int(quantity, call, "quantity")
    if quantity < 0:
        raise InvalidArgumentError(f"{call}: quantity must be non-negative")
    if quantity > len(pool):
        raise InsufficientRangeError(
            f"{call}: cannot draw {quantity} numbers from a pool of {len(pool)}"
        )
    if len(set(pool)) != len(pool):
        raise InvalidArgumentError(f"{call}: pool contains duplicate numbers")

    rng = rng or get_default_rng()
    if _is_contiguous_from_one(pool):
        return rng.unique_ints(quantity, 1, len(pool))
    return rng.partial_shuffle(list(pool), quantity)


def available_numbers(max_value: int, used_numbers: Iterable[int]) -> List[int]:
    """Return 1..max_value minus anything already used, in ascending order."""
    used = set(used_numbers)
    return [n for n in range(1, max_value + 1) if n not in used]


def has_enough_numbers(available_count: int, required_count: int) -> bool:
    return available_count >= required_count


def count_matches(set_a: Iterable[int], set_b: Iterable[int]) -> int:
    """Count how many numbers of ``set_a`` also appear in ``set_b``."""
    lookup = set(set_b)
    return sum(1 for num in set_a if num in lookup)


def sets_equal(set_a: Sequence[int], set_b: Sequence[int]) -> bool:
    """Compare two number sets ignoring order."""
    if len(set_a) != len(set_b):
        return False
    return sorted(set_a) == sorted(set_b)
