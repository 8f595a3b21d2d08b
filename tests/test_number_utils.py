import pytest

from oddly.errors import InsufficientRangeError, InvalidArgumentError
from oddly.mersenne_twister import MersenneTwister
from oddly.number_utils import (
    available_numbers,
    count_matches,
    draw_set,
    has_enough_numbers,
    sets_equal,
)


def test_draw_set_leaves_pool_untouched():
    pool = [2, 4, 6, 8, 10, 12, 14]
    snapshot = list(pool)
    drawn = draw_set(pool, 4, MersenneTwister(9))
    assert pool == snapshot
    assert len(drawn) == 4
    assert len(set(drawn)) == 4
    assert set(drawn) <= set(pool)


def test_contiguous_pool_uses_unique_ints():
    drawn = draw_set(list(range(1, 53)), 6, MersenneTwister(21))
    assert drawn == MersenneTwister(21).unique_ints(6, 1, 52)


def test_unordered_contiguous_pool_is_recognised():
    drawn = draw_set([3, 1, 2, 4, 5], 2, MersenneTwister(4))
    assert drawn == MersenneTwister(4).unique_ints(2, 1, 5)


def test_draw_whole_pool():
    pool = [5, 7, 11, 13]
    assert sorted(draw_set(pool, 4, MersenneTwister(1))) == pool
    assert draw_set(pool, 0, MersenneTwister(1)) == []


def test_draw_set_errors():
    rng = MersenneTwister(1)
    with pytest.raises(InsufficientRangeError):
        draw_set([1, 2, 3], 4, rng)
    with pytest.raises(InvalidArgumentError):
        draw_set([1, 2, 3], -1, rng)
    with pytest.raises(InvalidArgumentError):
        draw_set([1, 1, 2], 2, rng)
    with pytest.raises(InvalidArgumentError, match="draw_set"):
        draw_set([1, 2, 3], 1.5, rng)


def test_draw_set_defaults_to_shared_rng():
    drawn = draw_set(list(range(1, 11)), 3)
    assert len(set(drawn)) == 3


def test_available_numbers():
    assert available_numbers(6, [2, 5]) == [1, 3, 4, 6]
    assert available_numbers(3, []) == [1, 2, 3]
    assert available_numbers(2, [1, 2]) == []


def test_has_enough_numbers():
    assert has_enough_numbers(6, 6)
    assert not has_enough_numbers(5, 6)


def test_count_matches_and_sets_equal():
    assert count_matches([1, 2, 3, 4], [4, 3, 9]) == 2
    assert count_matches([], [1]) == 0
    assert sets_equal([3, 1, 2], [1, 2, 3])
    assert not sets_equal([1, 2], [1, 2, 3])
    assert not sets_equal([1, 2, 4], [1, 2, 3])
