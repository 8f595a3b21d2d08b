"""Seeded MT19937 number picking plus hypergeometric odds for lottery-style draws."""

from .errors import InsufficientRangeError, InvalidArgumentError, NumericalRangeError, OddlyError
from .mersenne_twister import MersenneTwister, create_rng, get_default_rng
from .number_utils import draw_set, count_matches
from .odds_engine import OddsEngine, OddsConfig, OddsResult, MatchOdds, adjusted_probability
from .simulation import LottoSimulator, SimulationConfig, SimulationResult

__all__ = [
    "MersenneTwister",
    "create_rng",
    "get_default_rng",
    "draw_set",
    "count_matches",
    "OddsEngine",
    "OddsConfig",
    "OddsResult",
    "MatchOdds",
    "adjusted_probability",
    "LottoSimulator",
    "SimulationConfig",
    "SimulationResult",
    "OddlyError",
    "InvalidArgumentError",
    "InsufficientRangeError",
    "NumericalRangeError",
]
