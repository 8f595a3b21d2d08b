"""Combinatorics and odds checks for OddsEngine."""

import logging
import math

import pytest

from oddly.errors import InvalidArgumentError, NumericalRangeError
from oddly.odds_engine import (
    BigIntValue,
    DirectValue,
    OddsConfig,
    OddsEngine,
    adjusted_probability,
)


@pytest.fixture
def engine():
    return OddsEngine()


# Factorials -------------------------------------------------------------


def test_small_factorials(engine):
    assert engine.factorial(0) == 1.0
    assert engine.factorial(1) == 1.0
    assert engine.factorial(5) == 120.0
    assert engine.factorial(20) == float(math.factorial(20))


def test_factorial_representation_tags(engine):
    assert isinstance(engine.factorial_value(20), DirectValue)
    large = engine.factorial_value(21)
    assert isinstance(large, BigIntValue)
    assert large.value == math.factorial(21)
    assert engine.factorial(170) == pytest.approx(float(math.factorial(170)), rel=1e-15)


def test_factorial_beyond_float_range(engine):
    with pytest.raises(NumericalRangeError):
        engine.factorial(171)
    assert engine.factorial_exact(200) == math.factorial(200)
    assert engine.factorial_exact(300) == math.factorial(300)


@pytest.mark.parametrize("bad", [-1, 301, 2.5, True])
def test_factorial_rejects_bad_input(engine, bad):
    with pytest.raises(InvalidArgumentError):
        engine.factorial(bad)


def test_factorial_memo_matches_fresh_computation():
    engine = OddsEngine()
    ascending = [engine.factorial_exact(n) for n in range(0, 301, 7)]
    fresh = OddsEngine()
    descending = [fresh.factorial_exact(n) for n in range(300, -1, -7)][::-1]
    assert ascending == descending == [math.factorial(n) for n in range(0, 301, 7)]


def test_log_factorial_tracks_lgamma(engine):
    for n in (0, 1, 2, 10, 19, 20, 21, 50, 170, 500, 10000):
        assert engine.log_factorial(n) == pytest.approx(math.lgamma(n + 1), rel=1e-12, abs=1e-12)
    with pytest.raises(InvalidArgumentError):
        engine.log_factorial(-3)


# Combinations ----------------------------------------------------------


def test_known_combinations(engine):
    assert engine.combinations(52, 6) == 20358520
    assert engine.combinations(49, 6) == 13983816
    assert engine.combinations(10, 3) == 120


def test_combination_identities(engine):
    for n in (0, 1, 7, 52, 300):
        assert engine.combinations(n, 0) == 1
        assert engine.combinations(n, n) == 1
    for n in (1, 7, 52):
        assert engine.combinations(n, 1) == n
    assert engine.combinations(5, 6) == 0
    for n, r in [(52, 6), (40, 13), (300, 120)]:
        assert engine.combinations(n, r) == engine.combinations(n, n - r)


def test_pascal_rule(engine):
    for n in range(2, 40):
        for r in range(1, n):
            expected = engine.combinations(n - 1, r - 1) + engine.combinations(n - 1, r)
            assert engine.combinations(n, r) == expected


def test_log_path_agrees_with_direct_path():
    direct = OddsEngine()
    logged = OddsEngine(OddsConfig(combinationsLogThreshold=10))
    for n, r in [(52, 6), (49, 6), (69, 5), (120, 40)]:
        assert logged.combinations(n, r) == pytest.approx(direct.combinations(n, r), rel=1e-9)


def test_large_combinations(engine):
    assert engine.combinations(1000, 3) == 166167000
    assert engine.combinations(1000, 6) == math.comb(1000, 6)
    assert engine.log_combinations(5000, 2500) == pytest.approx(
        math.lgamma(5001) - 2 * math.lgamma(2501), rel=1e-12
    )
    with pytest.raises(NumericalRangeError):
        engine.combinations(5000, 2500)
    assert engine.total_combinations(5000, 2500) == math.inf
    assert engine.total_combinations(52, 6) == 20358520


def test_combinations_fall_back_to_logs(caplog):
    engine = OddsEngine(OddsConfig(combinationsLogThreshold=1000))
    caplog.set_level(logging.DEBUG, logger="oddly.odds_engine")
    assert engine.combinations(400, 3) == math.comb(400, 3)
    assert "direct path failed" in caplog.text


def test_log_combinations_edges(engine):
    assert engine.log_combinations(4, 5) == -math.inf
    assert engine.log_combinations(9, 0) == 0.0
    assert engine.log_combinations(52, 6) == pytest.approx(math.log(20358520), rel=1e-12)


def test_combinations_validation_message(engine):
    with pytest.raises(InvalidArgumentError, match=r"combinations\(n=-1, r=2\)"):
        engine.combinations(-1, 2)
    with pytest.raises(InvalidArgumentError):
        engine.combinations(10, 2.5)


# Hypergeometric ----------------------------------------------------------


@pytest.mark.parametrize("N,K,n", [(52, 6, 6), (10, 3, 3), (49, 6, 6), (200, 20, 20), (500, 60, 40)])
def test_hypergeometric_sums_to_one(engine, N, K, n):
    total = sum(engine.hypergeometric(k, N, K, n) for k in range(0, min(K, n) + 1))
    assert total == pytest.approx(1.0, abs=1e-9)


def test_hypergeometric_known_value(engine):
    assert engine.hypergeometric(3, 49, 6, 6) == pytest.approx(246820 / 13983816, rel=1e-12)
    assert engine.hypergeometric(6, 52, 6, 6) == pytest.approx(1 / 20358520, rel=1e-12)


def test_hypergeometric_impossible_outcomes(engine):
    assert engine.hypergeometric(4, 10, 3, 3) == 0.0
    assert engine.hypergeometric(0, 10, 8, 5) == 0.0
    assert engine.hypergeometric(3, 10, 3, 2) == 0.0


def test_hypergeometric_validation(engine):
    with pytest.raises(InvalidArgumentError, match="hypergeometric"):
        engine.hypergeometric(1, 10, 11, 3)
    with pytest.raises(InvalidArgumentError):
        engine.hypergeometric(1, 10, 3, 11)
    with pytest.raises(InvalidArgumentError):
        engine.hypergeometric(-1, 10, 3, 3)


def test_hypergeometric_paths_agree():
    direct = OddsEngine()
    logged = OddsEngine(OddsConfig(hypergeometricLogN=5, hypergeometricLogK=1, hypergeometricLogSample=1))
    for k in range(7):
        assert logged.hypergeometric(k, 52, 6, 6) == pytest.approx(direct.hypergeometric(k, 52, 6, 6), rel=1e-9)


def test_hypergeometric_falls_back_to_logs(caplog):
    engine = OddsEngine(
        OddsConfig(hypergeometricLogN=10 ** 6, hypergeometricLogK=10 ** 6, hypergeometricLogSample=10 ** 6)
    )
    caplog.set_level(logging.DEBUG, logger="oddly.odds_engine")
    total = sum(engine.hypergeometric(k, 2000, 300, 300) for k in range(301))
    assert total == pytest.approx(1.0, abs=1e-9)
    assert "hypergeometric(0, 2000, 300, 300): direct path failed" in caplog.text


def test_hypergeometric_stays_in_unit_interval(engine):
    for k in range(0, 41):
        value = engine.hypergeometric(k, 500, 60, 40)
        assert 0.0 <= value <= 1.0


# Adjusted probability ----------------------------------------------------


def test_adjusted_probability_edges():
    assert adjusted_probability(0.3, 1) == 0.3
    assert adjusted_probability(0.3, 0) == 0.0
    assert adjusted_probability(0.0, 1000) == 0.0
    assert adjusted_probability(1.0, 5) == 1.0
    assert adjusted_probability(0.5, 2) == pytest.approx(0.75)


def test_adjusted_probability_is_monotonic():
    p = 1 / 13983816
    values = [adjusted_probability(p, s) for s in (1, 10, 100, 1000, 10000)]
    assert values == sorted(values)
    assert len(set(values)) == len(values)


def test_adjusted_probability_tiny_p():
    assert adjusted_probability(1e-12, 1000) == pytest.approx(1e-9, rel=1e-6)


def test_adjusted_probability_validation(engine):
    with pytest.raises(InvalidArgumentError):
        adjusted_probability(1.5, 3)
    with pytest.raises(InvalidArgumentError):
        adjusted_probability(0.2, -1)
    with pytest.raises(InvalidArgumentError):
        engine.adjusted_probability(0.2, 1.5)


# compute_odds ------------------------------------------------------------


def test_compute_odds_six_from_fifty_two(engine):
    result = engine.compute_odds(52, 6, 1)
    assert result.totalCombinations == 20358520
    assert [entry.matchCount for entry in result.perMatchOdds] == list(range(7))
    assert result.for_match(6).singleChance == pytest.approx(1 / 20358520, rel=1e-12)
    for entry in result.perMatchOdds:
        assert entry.adjustedChance == entry.singleChance
    assert sum(entry.singleChance for entry in result.perMatchOdds) == pytest.approx(1.0, abs=1e-12)


def test_compute_odds_more_sets_never_hurt(engine):
    hundred = engine.compute_odds(10, 3, 100)
    thousand = engine.compute_odds(10, 3, 1000)
    assert hundred.totalCombinations == 120
    for low, high in zip(hundred.perMatchOdds, thousand.perMatchOdds):
        assert low.singleChance == high.singleChance
        assert high.adjustedChance >= low.adjustedChance
        if low.matchCount > 0 and low.adjustedChance < 1.0:
            assert high.adjustedChance > low.adjustedChance
    assert thousand.for_match(3).adjustedChance > hundred.for_match(3).adjustedChance


def test_compute_odds_records_previous_run(engine):
    first = engine.compute_odds(49, 6, 1)
    second = engine.compute_odds(49, 6, 10, previous=first)
    entry = second.for_match(6)
    assert entry.prevSingleChance == first.for_match(6).singleChance
    assert entry.prevAdjustedChance == first.for_match(6).adjustedChance
    assert "prevSingleChance" not in first.to_dict()["perMatchOdds"][0]
    assert "prevSingleChance" in second.to_dict()["perMatchOdds"][0]
    with pytest.raises(KeyError):
        second.for_match(7)


@pytest.mark.parametrize("args", [(10, 0, 1), (10, 11, 1), (10, 3, 0), (10.5, 3, 1)])
def test_compute_odds_rejects_bad_arguments(engine, args):
    with pytest.raises(InvalidArgumentError):
        engine.compute_odds(*args)


def test_compute_odds_beyond_float_total(engine):
    result = engine.compute_odds(1100, 550, 1)
    assert result.totalCombinations == math.inf
    assert len(result.perMatchOdds) == 551
    assert result.for_match(550).singleChance == 0.0
    assert sum(entry.singleChance for entry in result.perMatchOdds) == pytest.approx(1.0, abs=1e-9)
    assert all(0.0 <= entry.adjustedChance <= 1.0 for entry in result.perMatchOdds)


def test_engine_usable_after_error(engine):
    with pytest.raises(NumericalRangeError):
        engine.combinations(5000, 2500)
    assert engine.combinations(52, 6) == 20358520


# Caches ------------------------------------------------------------------


def test_cached_results_match_fresh_engine():
    warm = OddsEngine()
    first = warm.compute_odds(40, 6, 5).to_dict()
    second = warm.compute_odds(40, 6, 5).to_dict()
    assert first == second == OddsEngine().compute_odds(40, 6, 5).to_dict()


def test_results_unchanged_across_cache_clear():
    engine = OddsEngine()
    before = engine.compute_odds(52, 6, 3).to_dict()
    engine.clear_caches()
    assert engine.compute_odds(52, 6, 3).to_dict() == before

    first = engine.factorial_exact(250)
    engine.clear_caches()
    assert engine.factorial_exact(250) == first == math.factorial(250)


def test_large_games_clear_caches():
    engine = OddsEngine()
    engine.compute_odds(52, 6, 1)
    assert engine.cache_info()["hypergeometric"] > 0
    engine.compute_odds(101, 3, 1)
    assert engine.cache_info() == {"factorial": 2, "combinations": 0, "hypergeometric": 0}


def test_clear_caches_keeps_base_cases(engine):
    engine.factorial(30)
    engine.combinations(40, 6)
    engine.clear_caches()
    assert engine.cache_info() == {"factorial": 2, "combinations": 0, "hypergeometric": 0}
    assert engine.factorial(0) == 1.0
    assert engine.factorial(1) == 1.0
    assert engine.factorial(12) == 479001600.0


def test_engines_do_not_share_caches():
    a = OddsEngine()
    b = OddsEngine()
    a.combinations(52, 6)
    assert b.cache_info()["combinations"] == 0
