from __future__ import annotations

"""Repeated-draw simulation: keep drawing sets until one matches a winning set."""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from oddly.errors import InvalidArgumentError, describe_call, require_ints
from oddly.mersenne_twister import MersenneTwister, create_rng
from oddly.number_utils import count_matches
from oddly.odds_engine import OddsEngine

logger = logging.getLogger(__name__)

STATUS_IDLE = "idle"
STATUS_RUNNING = "running"
STATUS_PAUSED = "paused"
STATUS_COMPLETED = "completed"

REASON_MATCH_FOUND = "match_found"
REASON_MAX_ATTEMPTS = "max_attempts"
REASON_STOPPED = "stopped"
REASON_PAUSED = "paused"

# Attempt counts at which the acceleration curve starts a new band.
ACCELERATION_THRESHOLDS = (10, 100, 1000, 10000, 100000, 1000000)
QUIET_PROGRESS_INTERVAL = 10000


@dataclass
class SimulationConfig:
    maxAttempts: int = 1000000
    notificationFrequency: int = 1000
    enableAcceleration: bool = True
    minSpeed: int = 500
    maxSpeed: int = 10
    accelerationFactor: int = 5
    throttle: bool = False


@dataclass
class BestMatch:
    count: int = 0
    numbers: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "set": list(self.numbers)}


@dataclass
class SimulationProgress:
    currentAttempt: int
    bestMatch: BestMatch
    shouldNotify: bool
    currentSpeed: float


@dataclass
class SimulationResult:
    reason: str
    attempts: int
    bestMatch: BestMatch
    winningSet: List[int]
    quantity: int
    maxValue: int
    seed: int
    expectedAttempts: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reason": self.reason,
            "attempts": self.attempts,
            "bestMatch": self.bestMatch.to_dict(),
            "winningSet": list(self.winningSet),
            "quantity": self.quantity,
            "maxValue": self.maxValue,
            "seed": self.seed,
            "expectedAttempts": self.expectedAttempts,
        }


ProgressCallback = Callable[[SimulationProgress], None]


def calculate_accelerated_delay(current_attempt: int, config: SimulationConfig) -> float:
    """Inter-batch delay in ms: starts at minSpeed and eases toward maxSpeed band by band."""
    if not config.enableAcceleration:
        return float(config.minSpeed)

    band = sum(1 for threshold in ACCELERATION_THRESHOLDS if current_attempt >= threshold)
    lower = ACCELERATION_THRESHOLDS[band - 1] if band > 0 else 0
    upper = ACCELERATION_THRESHOLDS[band] if band < len(ACCELERATION_THRESHOLDS) else config.maxAttempts
    if upper > lower:
        progress = min(1.0, max(0.0, (current_attempt - lower) / (upper - lower)))
    else:
        progress = 1.0

    power = min(10, max(1, config.accelerationFactor)) / 5.0
    curve = progress ** (1.0 / power)
    min_delay = float(config.minSpeed)
    max_delay = float(max(config.maxSpeed, 1))
    delay = min_delay - curve * (min_delay - max_delay)
    return max(min(min_delay, delay), max_delay)


def batch_size_for(current_attempt: int, config: SimulationConfig) -> int:
    """Attempts per batch; batches grow as the run gets longer."""
    if not config.enableAcceleration:
        return 1000
    if current_attempt > 100000:
        return 10000
    if current_attempt > 10000:
        return 5000
    if current_attempt > 1000:
        return 2000
    return 1000


class LottoSimulator:
    """Draws random sets against a fixed winning set, cooperatively interruptible between attempts."""

    def __init__(
        self,
        quantity: int,
        max_value: int,
        config: Optional[SimulationConfig] = None,
        rng: Optional[MersenneTwister] = None,
        on_progress: Optional[ProgressCallback] = None,
        sleep_fn: Callable[[float], None] = time.sleep,
    ) -> None:
        quantity, max_value = require_ints("LottoSimulator", quantity=quantity, max_value=max_value)
        if not 1 <= quantity <= max_value:
            raise InvalidArgumentError(
                f"{describe_call('LottoSimulator', quantity=quantity, max_value=max_value)}: "
                "quantity must satisfy 1 <= quantity <= max_value"
            )
        self.quantity = quantity
        self.max_value = max_value
        self.config = config or SimulationConfig()
        self.rng = rng or create_rng()
        self._on_progress = on_progress
        self._sleep = sleep_fn
        self._stop_requested = threading.Event()
        self._pause_requested = threading.Event()

        self.status = STATUS_IDLE
        self.winning_set: List[int] = []
        self.current_attempt = 0
        self.best_match = BestMatch()
        self.current_speed = float(self.config.minSpeed)
        self._last_notification_at = 0

    # Winning set ------------------------------------------------------

    def generate_winning_set(self) -> List[int]:
        """Draw and store a fresh winning set from 1..max_value."""
        self.winning_set = self.rng.unique_ints(self.quantity, 1, self.max_value)
        return list(self.winning_set)

    def set_winning_set(self, numbers: Sequence[int]) -> None:
        call = describe_call("set_winning_set", numbers=list(numbers))
        if len(numbers) != self.quantity:
            raise InvalidArgumentError(f"{call}: expected {self.quantity} numbers")
        if len(set(numbers)) != len(numbers):
            raise InvalidArgumentError(f"{call}: numbers must be distinct")
        if any(not 1 <= n <= self.max_value for n in numbers):
            raise InvalidArgumentError(f"{call}: numbers must lie in 1..{self.max_value}")
        self.winning_set = list(numbers)

    # Control ----------------------------------------------------------

    def start(self) -> None:
        """Reset counters and mark the run as started."""
        if not self.winning_set:
            self.generate_winning_set()
        self.current_attempt = 0
        self.best_match = BestMatch()
        self.current_speed = float(self.config.minSpeed)
        self._last_notification_at = 0
        self._stop_requested.clear()
        self._pause_requested.clear()
        self.status = STATUS_RUNNING

    def pause(self) -> None:
        self._pause_requested.set()

    def resume(self) -> None:
        if self.status != STATUS_PAUSED:
            return
        self._pause_requested.clear()
        self.status = STATUS_RUNNING

    def stop(self) -> None:
        self._stop_requested.set()
        if self.status == STATUS_PAUSED:
            self.status = STATUS_IDLE

    def run(self) -> SimulationResult:
        """Run batches until a full match, the attempt cap, or a pause/stop request."""
        if self.status == STATUS_IDLE:
            self.start()
        elif self.status == STATUS_COMPLETED:
            raise RuntimeError("simulation already completed; call start() to run it again")
        elif self.status == STATUS_PAUSED:
            raise RuntimeError("simulation is paused; call resume() before run()")

        while True:
            for _ in range(batch_size_for(self.current_attempt, self.config)):
                if self._stop_requested.is_set():
                    self.status = STATUS_IDLE
                    return self._result(REASON_STOPPED)
                if self._pause_requested.is_set():
                    self.status = STATUS_PAUSED
                    return self._result(REASON_PAUSED)
                reason = self.step()
                if reason is not None:
                    self.status = STATUS_COMPLETED
                    logger.info(
                        "simulation finished after %d attempts (%s), best match %d/%d",
                        self.current_attempt, reason, self.best_match.count, self.quantity,
                    )
                    return self._result(reason)

            if self.config.throttle:
                self.current_speed = calculate_accelerated_delay(self.current_attempt, self.config)
                self._sleep(self.current_speed / 1000.0)

    def step(self) -> Optional[str]:
        """Play one attempt; return the completion reason if the run is over."""
        numbers = self.rng.unique_ints(self.quantity, 1, self.max_value)
        matches = count_matches(numbers, self.winning_set)
        self.current_attempt += 1
        if matches > self.best_match.count:
            self.best_match = BestMatch(count=matches, numbers=numbers)

        if self.current_attempt - self._last_notification_at >= self.config.notificationFrequency:
            self._last_notification_at = self.current_attempt
            self._emit_progress(should_notify=True)
        elif self.current_attempt % QUIET_PROGRESS_INTERVAL == 0:
            self._emit_progress(should_notify=False)

        if matches == self.quantity:
            return REASON_MATCH_FOUND
        if self.current_attempt >= self.config.maxAttempts:
            return REASON_MAX_ATTEMPTS
        return None

    def snapshot(self) -> Dict[str, Any]:
        """Current run state as a JSON-ready dict."""
        return {
            "status": self.status,
            "running": self.status == STATUS_RUNNING,
            "currentAttempt": self.current_attempt,
            "bestMatch": self.best_match.to_dict(),
            "winningSet": list(self.winning_set),
            "currentSpeed": self.current_speed,
        }

    # Internal helpers -------------------------------------------------

    def _emit_progress(self, should_notify: bool) -> None:
        if self._on_progress is None:
            return
        self._on_progress(
            SimulationProgress(
                currentAttempt=self.current_attempt,
                bestMatch=BestMatch(self.best_match.count, list(self.best_match.numbers)),
                shouldNotify=should_notify,
                currentSpeed=self.current_speed,
            )
        )

    def _result(self, reason: str) -> SimulationResult:
        return SimulationResult(
            reason=reason,
            attempts=self.current_attempt,
            bestMatch=BestMatch(self.best_match.count, list(self.best_match.numbers)),
            winningSet=list(self.winning_set),
            quantity=self.quantity,
            maxValue=self.max_value,
            seed=self.rng.initial_seed,
            expectedAttempts=OddsEngine().total_combinations(self.max_value, self.quantity),
        )
