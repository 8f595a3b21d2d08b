"""Deterministic MT19937 generator used by every number picker and simulation in this repo."""

from __future__ import annotations

import logging
import math
import time
from typing import List, MutableSequence, Optional, Tuple

from oddly.errors import InsufficientRangeError, InvalidArgumentError, describe_call, require_ints

logger = logging.getLogger(__name__)

STATE_SIZE = 624
SHIFT_SIZE = 397
MATRIX_A = 0x9908B0DF
UPPER_MASK = 0x80000000
LOWER_MASK = 0x7FFFFFFF
SEED_MULTIPLIER = 1812433253

UINT32_MASK = 0xFFFFFFFF
UINT32_RANGE = 1 << 32
UINT32_SCALE = float(UINT32_RANGE)

# unique_ints switches from rejection sampling to a partial shuffle above this
# fraction of the range size.
SHUFFLE_DENSITY_THRESHOLD = 1.0 / 3.0

GeneratorState = Tuple[Tuple[int, ...], int]


def _time_seed() -> int:
    """Millisecond wall clock folded into 32 bits."""
    return int(time.time() * 1000) & UINT32_MASK


def normalize_seed(value: object) -> int:
    """Truncate a numeric seed toward zero and reduce it modulo 2**32."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"seed({value!r}): seed must be a number")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidArgumentError(f"seed({value!r}): seed must be finite")
        value = math.trunc(value)
    return value & UINT32_MASK


class MersenneTwister:
    """MT19937 with a Math.random-like float interface plus range and set sampling."""

    def __init__(self, seed: Optional[float] = None) -> None:
        self._mt: List[int] = [0] * STATE_SIZE
        self.initial_seed = 0
        self.seed(seed)

    def seed(self, value: Optional[float] = None) -> None:
        """(Re)initialise the state; ``None`` seeds from the clock."""
        seed = _time_seed() if value is None else normalize_seed(value)
        mt = [0] * STATE_SIZE
        mt[0] = seed
        for i in range(1, STATE_SIZE):
            prev = mt[i - 1]
            mt[i] = (SEED_MULTIPLIER * (prev ^ (prev >> 30)) + i) & UINT32_MASK
        self._mt = mt
        self._index = STATE_SIZE
        self.initial_seed = seed

    def twist(self) -> None:
        """Regenerate all 624 words of untempered state."""
        mt = self._mt
        for i in range(STATE_SIZE):
            x = (mt[i] & UPPER_MASK) | (mt[(i + 1) % STATE_SIZE] & LOWER_MASK)
            x_a = x >> 1
            if x & 1:
                x_a ^= MATRIX_A
            mt[i] = mt[(i + SHIFT_SIZE) % STATE_SIZE] ^ x_a
        self._index = 0

    def next_uint32(self) -> int:
        """Return the next tempered 32-bit unsigned word."""
        if self._index >= STATE_SIZE:
            self.twist()
        y = self._mt[self._index]
        self._index += 1

        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y & UINT32_MASK

    # Floats -----------------------------------------------------------

    def random(self) -> float:
        """Return a float in [0, 1) with 32-bit resolution."""
        return self.next_uint32() / UINT32_SCALE

    def random_inclusive(self) -> float:
        """Return a float in [0, 1]."""
        return self.next_uint32() / float(UINT32_MASK)

    def random_exclusive(self) -> float:
        """Return a float in (0, 1)."""
        return (self.next_uint32() + 0.5) / UINT32_SCALE

    def float_range(self, low: float, high: float) -> float:
        """Return a float in [low, high)."""
        return low + self.random() * (high - low)

    # Integers ---------------------------------------------------------

    def int_range(self, low: int, high: int) -> int:
        """Return an integer in [low, high] without modulo bias.

        Words at or above the largest multiple of the range size are redrawn,
        so every value in the range is backed by the same number of words.
        """
        low, high = require_ints("int_range", low=low, high=high)
        if low > high:
            low, high = high, low
        span = high - low + 1
        if span > UINT32_RANGE:
            raise InvalidArgumentError(
                f"{describe_call('int_range', low=low, high=high)}: range is wider than 2**32 values"
            )
        limit = (UINT32_RANGE // span) * span
        while True:
            r = self.next_uint32()
            if r < limit:
                return low + r % span

    def unique_ints(self, count: int, low: int, high: int) -> List[int]:
        """Return ``count`` distinct integers drawn from [low, high]."""
        count, low, high = require_ints("unique_ints", count=count, low=low, high=high)
        call = describe_call("unique_ints", count=count, low=low, high=high)
        if count < 0:
            raise InvalidArgumentError(f"{call}: count must be non-negative")
        size = max(0, high - low + 1)
        if count > size:
            raise InsufficientRangeError(
                f"{call}: cannot draw {count} unique values from a range of {size}"
            )
        if count == 0:
            return []

        if count > size * SHUFFLE_DENSITY_THRESHOLD:
            logger.debug("%s: dense request, partial shuffle", call)
            return self.partial_shuffle(list(range(low, high + 1)), count)

        logger.debug("%s: sparse request, rejection sampling", call)
        result: List[int] = []
        used = set()
        while len(result) < count:
            value = self.int_range(low, high)
            if value not in used:
                used.add(value)
                result.append(value)
        return result

    def partial_shuffle(self, values: MutableSequence[int], count: int) -> List[int]:
        """Fisher-Yates over the last ``count`` slots of ``values`` (in place); return that tail."""
        n = len(values)
        for i in range(n - 1, n - count - 1, -1):
            j = self.int_range(0, i)
            values[i], values[j] = values[j], values[i]
        return list(values[n - count:])

    # State ------------------------------------------------------------

    def get_state(self) -> GeneratorState:
        """Snapshot the state words and cursor."""
        return tuple(self._mt), self._index

    def set_state(self, state: GeneratorState) -> None:
        """Restore a snapshot taken by :meth:`get_state`."""
        words, index = state
        if len(words) != STATE_SIZE:
            raise InvalidArgumentError(
                f"set_state: expected {STATE_SIZE} state words, got {len(words)}"
            )
        if not 0 <= index <= STATE_SIZE:
            raise InvalidArgumentError(f"set_state: cursor {index} outside [0, {STATE_SIZE}]")
        self._mt = [int(w) & UINT32_MASK for w in words]
        self._index = index


_default_rng: Optional[MersenneTwister] = None


def create_rng(seed: Optional[float] = None) -> MersenneTwister:
    """Build a fresh generator, clock-seeded unless ``seed`` is given."""
    return MersenneTwister(seed)


def get_default_rng() -> MersenneTwister:
    """Process-wide generator used when a caller does not supply one."""
    global _default_rng
    if _default_rng is None:
        _default_rng = MersenneTwister()
    return _default_rng
