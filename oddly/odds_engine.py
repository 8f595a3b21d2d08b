from __future__ import annotations

"""Memoised combinatorics and hypergeometric odds for "match m of K drawn from N" games."""

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from oddly.errors import InvalidArgumentError, NumericalRangeError, describe_call, require_ints

logger = logging.getLogger(__name__)

# Largest integer a float64 represents exactly; log-path results below this are
# recomputed as exact counts.
FLOAT_EXACT_LIMIT = 2 ** 53


@dataclass
class OddsConfig:
    maxFactorialInput: int = 300
    maxSafeFactorial: int = 170
    bigIntThreshold: int = 20
    factorialChunkSize: int = 10
    stirlingCutover: int = 20
    combinationsLogThreshold: int = 300
    hypergeometricLogN: int = 100
    hypergeometricLogK: int = 50
    hypergeometricLogSample: int = 50
    autoClearMaxValue: int = 100
    autoClearQuantity: int = 20


# Factorial terms -------------------------------------------------------


@dataclass(frozen=True)
class DirectValue:
    """A factorial small enough to accumulate straight into a float."""

    n: int
    value: float

    def resolve(self) -> float:
        return self.value


@dataclass(frozen=True)
class BigIntValue:
    """An exact arbitrary-precision factorial."""

    n: int
    value: int

    def resolve(self) -> float:
        try:
            return float(self.value)
        except OverflowError as exc:
            raise NumericalRangeError(
                f"factorial(n={self.n}): value exceeds the float range; use factorial_exact or log_factorial"
            ) from exc


@dataclass(frozen=True)
class LogDomainValue:
    """The natural log of a factorial, for values never materialised."""

    n: int
    value: float

    def resolve(self) -> float:
        try:
            return math.exp(self.value)
        except OverflowError as exc:
            raise NumericalRangeError(
                f"factorial(n={self.n}): exp({self.value:.3f}) exceeds the float range"
            ) from exc


FactorialValue = Union[DirectValue, BigIntValue, LogDomainValue]


# Results ---------------------------------------------------------------


@dataclass
class MatchOdds:
    matchCount: int
    singleChance: float
    adjustedChance: float
    prevSingleChance: Optional[float] = None
    prevAdjustedChance: Optional[float] = None


@dataclass
class OddsResult:
    totalCombinations: float
    perMatchOdds: List[MatchOdds] = field(default_factory=list)

    def for_match(self, match_count: int) -> MatchOdds:
        """Return the entry for ``match_count``."""
        for entry in self.perMatchOdds:
            if entry.matchCount == match_count:
                return entry
        raise KeyError(match_count)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalCombinations": self.totalCombinations,
            "perMatchOdds": [
                {k: v for k, v in asdict(entry).items() if v is not None}
                for entry in self.perMatchOdds
            ],
        }


def adjusted_probability(p: float, num_sets: int) -> float:
    """Chance of at least one success over ``num_sets`` independent tries of probability ``p``."""
    (num_sets,) = require_ints("adjusted_probability", num_sets=num_sets)
    if (
        isinstance(p, bool)
        or not isinstance(p, (int, float))
        or not 0.0 <= p <= 1.0
    ):
        raise InvalidArgumentError(
            f"{describe_call('adjusted_probability', p=p, num_sets=num_sets)}: p must lie in [0, 1]"
        )
    if num_sets < 0:
        raise InvalidArgumentError(
            f"{describe_call('adjusted_probability', p=p, num_sets=num_sets)}: num_sets must be non-negative"
        )
    p = float(p)
    if num_sets == 0:
        return 0.0
    if num_sets == 1:
        return p
    if p >= 1.0:
        return 1.0
    # 1 - (1 - p)**num_sets, kept accurate when p is tiny.
    return min(1.0, -math.expm1(num_sets * math.log1p(-p)))


class OddsEngine:
    """Owns the memo tables behind factorial, combinations and hypergeometric lookups."""

    def __init__(self, config: Optional[OddsConfig] = None) -> None:
        self.config = config or OddsConfig()
        self._factorial_cache: Dict[int, int] = {0: 1, 1: 1}
        self._combinations_cache: Dict[Tuple[int, int], float] = {}
        self._hypergeometric_cache: Dict[Tuple[int, int, int, int], float] = {}

    # Factorials -------------------------------------------------------

    def factorial(self, n: int) -> float:
        """Return n! as a float."""
        return self.factorial_value(n).resolve()

    def factorial_exact(self, n: int) -> int:
        """Return n! as an exact integer."""
        (n,) = require_ints("factorial_exact", n=n)
        self._check_factorial_input(n, "factorial_exact")
        return self._exact_factorial(n)

    def factorial_value(self, n: int) -> FactorialValue:
        """Return n! tagged with the representation it was computed in."""
        (n,) = require_ints("factorial", n=n)
        self._check_factorial_input(n, "factorial")
        if n <= self.config.bigIntThreshold:
            return DirectValue(n, float(self._exact_factorial(n)))
        return BigIntValue(n, self._exact_factorial(n))

    def log_factorial(self, n: int) -> float:
        """Return ln(n!), switching to the Stirling series for large n."""
        return self.log_factorial_value(n).value

    def log_factorial_value(self, n: int) -> LogDomainValue:
        (n,) = require_ints("log_factorial", n=n)
        if n < 0:
            raise InvalidArgumentError(f"log_factorial(n={n}): n must be non-negative")
        if n < self.config.stirlingCutover:
            return LogDomainValue(n, math.log(self._exact_factorial(n)))
        inv = 1.0 / n
        inv2 = inv * inv
        value = (
            n * math.log(n)
            - n
            + 0.5 * math.log(2.0 * math.pi * n)
            + inv / 12.0
            - inv * inv2 / 360.0
            + inv * inv2 * inv2 / 1260.0
        )
        return LogDomainValue(n, value)

    # Combinations -----------------------------------------------------

    def combinations(self, n: int, r: int) -> float:
        """Return C(n, r) as a float."""
        n, r = require_ints("combinations", n=n, r=r)
        if n < 0 or r < 0:
            raise InvalidArgumentError(
                f"{describe_call('combinations', n=n, r=r)}: arguments must be non-negative"
            )
        if r > n:
            return 0.0
        if r == 0 or r == n:
            return 1.0
        if r == 1:
            return float(n)
        if r > n - r:
            r = n - r

        key = (n, r)
        cached = self._combinations_cache.get(key)
        if cached is not None:
            return cached

        if n > self.config.combinationsLogThreshold:
            result = self._combinations_log(n, r)
        else:
            try:
                result = self._combinations_direct(n, r)
            except ArithmeticError as exc:
                logger.debug("combinations(%d, %d): direct path failed (%s), using logs", n, r, exc)
                result = self._combinations_log(n, r)

        self._combinations_cache[key] = result
        return result

    def total_combinations(self, n: int, r: int) -> float:
        """C(n, r) as a float, ``inf`` when the count is beyond the float range."""
        try:
            return self.combinations(n, r)
        except NumericalRangeError:
            logger.debug("combinations(%d, %d) overflows a float, reporting inf", n, r)
            return math.inf

    def log_combinations(self, n: int, r: int) -> float:
        """Return ln C(n, r); ``-inf`` when r > n."""
        n, r = require_ints("log_combinations", n=n, r=r)
        if n < 0 or r < 0:
            raise InvalidArgumentError(
                f"{describe_call('log_combinations', n=n, r=r)}: arguments must be non-negative"
            )
        if r > n:
            return -math.inf
        if r == 0 or r == n:
            return 0.0
        if r == 1:
            return math.log(n)
        if r > n - r:
            r = n - r
        return self.log_factorial(n) - self.log_factorial(r) - self.log_factorial(n - r)

    # Hypergeometric ---------------------------------------------------

    def hypergeometric(self, k: int, N: int, K: int, n: int) -> float:
        """P(exactly k successes) drawing n from N items of which K are successes."""
        k, N, K, n = require_ints("hypergeometric", k=k, N=N, K=K, n=n)
        if min(k, N, K, n) < 0:
            raise InvalidArgumentError(
                f"{describe_call('hypergeometric', k=k, N=N, K=K, n=n)}: parameters must be non-negative"
            )
        if K > N:
            raise InvalidArgumentError(
                f"{describe_call('hypergeometric', k=k, N=N, K=K, n=n)}: K cannot exceed N"
            )
        if n > N:
            raise InvalidArgumentError(
                f"{describe_call('hypergeometric', k=k, N=N, K=K, n=n)}: n cannot exceed N"
            )
        if k > n or k > K or n - k > N - K:
            return 0.0

        key = (k, N, K, n)
        cached = self._hypergeometric_cache.get(key)
        if cached is not None:
            return cached

        cfg = self.config
        if N > cfg.hypergeometricLogN or K > cfg.hypergeometricLogK or n > cfg.hypergeometricLogSample:
            result = self._hypergeometric_log(k, N, K, n)
        else:
            try:
                result = (
                    self.combinations(K, k)
                    * self.combinations(N - K, n - k)
                    / self.combinations(N, n)
                )
            except ArithmeticError as exc:
                logger.debug(
                    "hypergeometric(%d, %d, %d, %d): direct path failed (%s), using logs",
                    k, N, K, n, exc,
                )
                result = self._hypergeometric_log(k, N, K, n)

        result = min(1.0, max(0.0, result))
        self._hypergeometric_cache[key] = result
        return result

    # Odds -------------------------------------------------------------

    def adjusted_probability(self, p: float, num_sets: int) -> float:
        return adjusted_probability(p, num_sets)

    def compute_odds(
        self,
        N: int,
        K: int,
        S: int,
        previous: Optional[OddsResult] = None,
    ) -> OddsResult:
        """Total combinations plus single-set and S-set odds for every match count 0..K."""
        N, K, S = require_ints("compute_odds", N=N, K=K, S=S)
        if not 1 <= K <= N:
            raise InvalidArgumentError(
                f"{describe_call('compute_odds', N=N, K=K, S=S)}: K must satisfy 1 <= K <= N"
            )
        if S < 1:
            raise InvalidArgumentError(
                f"{describe_call('compute_odds', N=N, K=K, S=S)}: S must be at least 1"
            )

        prev_by_match: Dict[int, MatchOdds] = {}
        if previous is not None:
            prev_by_match = {entry.matchCount: entry for entry in previous.perMatchOdds}

        total = self.total_combinations(N, K)
        per_match: List[MatchOdds] = []
        for m in range(K + 1):
            single = self.hypergeometric(m, N, K, K)
            prev = prev_by_match.get(m)
            per_match.append(
                MatchOdds(
                    matchCount=m,
                    singleChance=single,
                    adjustedChance=adjusted_probability(single, S),
                    prevSingleChance=prev.singleChance if prev else None,
                    prevAdjustedChance=prev.adjustedChance if prev else None,
                )
            )

        if N > self.config.autoClearMaxValue or K > self.config.autoClearQuantity:
            self.clear_caches()
        return OddsResult(totalCombinations=total, perMatchOdds=per_match)

    # Caches -----------------------------------------------------------

    def clear_caches(self) -> None:
        """Drop every memoised value except 0! and 1!."""
        logger.debug("clearing odds caches: %s", self.cache_info())
        self._factorial_cache = {0: 1, 1: 1}
        self._combinations_cache.clear()
        self._hypergeometric_cache.clear()

    def cache_info(self) -> Dict[str, int]:
        return {
            "factorial": len(self._factorial_cache),
            "combinations": len(self._combinations_cache),
            "hypergeometric": len(self._hypergeometric_cache),
        }

    # Internal helpers -------------------------------------------------

    def _check_factorial_input(self, n: int, operation: str) -> None:
        if n < 0:
            raise InvalidArgumentError(f"{operation}(n={n}): factorial is not defined for negative numbers")
        if n > self.config.maxFactorialInput:
            raise InvalidArgumentError(
                f"{operation}(n={n}): exceeds the supported maximum of {self.config.maxFactorialInput}"
            )

    def _exact_factorial(self, n: int) -> int:
        """Extend the memo from the largest cached value at or below n."""
        cache = self._factorial_cache
        if n in cache:
            return cache[n]
        start = max(key for key in cache if key <= n)
        result = cache[start]

        if n <= self.config.bigIntThreshold:
            for i in range(start + 1, n + 1):
                result *= i
                if i % 5 == 0 or i == n:
                    cache[i] = result
            return result

        chunk = max(1, self.config.factorialChunkSize)
        for chunk_start in range(start + 1, n + 1, chunk):
            chunk_end = min(chunk_start + chunk - 1, n)
            result *= math.prod(range(chunk_start, chunk_end + 1))
            if chunk_end % 10 == 0 or chunk_end == n:
                cache[chunk_end] = result
        return result

    def _combinations_direct(self, n: int, r: int) -> float:
        if n > self.config.maxFactorialInput:
            raise NumericalRangeError(f"combinations(n={n}, r={r}): n is beyond the direct factorial range")
        exact = self._exact_factorial(n) // (self._exact_factorial(r) * self._exact_factorial(n - r))
        return float(exact)

    def _combinations_log(self, n: int, r: int) -> float:
        log_value = self.log_factorial(n) - self.log_factorial(r) - self.log_factorial(n - r)
        try:
            result = math.exp(log_value)
        except OverflowError as exc:
            raise NumericalRangeError(
                f"combinations(n={n}, r={r}): result exceeds the float range (ln C = {log_value:.3f})"
            ) from exc
        if result < FLOAT_EXACT_LIMIT:
            # Small enough to be an exact float; take the exact count.
            return float(math.comb(n, r))
        return result

    def _hypergeometric_log(self, k: int, N: int, K: int, n: int) -> float:
        log_prob = (
            self.log_combinations(K, k)
            + self.log_combinations(N - K, n - k)
            - self.log_combinations(N, n)
        )
        try:
            return math.exp(log_prob)
        except OverflowError as exc:
            raise NumericalRangeError(
                f"hypergeometric(k={k}, N={N}, K={K}, n={n}): ln P = {log_prob:.3f} is out of range"
            ) from exc
