"""
Unit tests for RandomSource helpers (choice, weighted choice, shuffle).
"""

from collections import Counter

import pytest

from review_autogen.domain.randomness import SystemRandomSource


def test_shuffle_returns_permutation():
    rng = SystemRandomSource(seed=3)
    items = ["a", "b", "b", "c", "d", "e"]

    shuffled = rng.shuffle(items)

    assert Counter(shuffled) == Counter(items)
    assert items == ["a", "b", "b", "c", "d", "e"]  # input untouched


def test_shuffle_empty_and_single():
    rng = SystemRandomSource(seed=3)
    assert rng.shuffle([]) == []
    assert rng.shuffle(["only"]) == ["only"]


def test_shuffle_walks_down_from_last_index(scripted_rng):
    """Test Fisher-Yates draw bounds: partner for index i comes from [0, i]."""
    rng = scripted_rng(ints=[0, 1, 0])

    result = rng.shuffle(["a", "b", "c", "d"])

    assert rng.calls == [("randint", 0, 3), ("randint", 0, 2), ("randint", 0, 1)]
    # i=3 <-> 0: d b c a ; i=2 <-> 1: d c b a ; i=1 <-> 0: c d b a
    assert result == ["c", "d", "b", "a"]


def test_shuffle_permutations_are_uniform():
    """Test each of the 6 permutations of [1, 2, 3] appears about equally often."""
    rng = SystemRandomSource(seed=11)
    trials = 60000

    counts = Counter(tuple(rng.shuffle([1, 2, 3])) for _ in range(trials))

    assert len(counts) == 6
    for count in counts.values():
        assert count == pytest.approx(trials / 6, rel=0.05)


def test_weighted_choice_follows_bag():
    rng = SystemRandomSource(seed=5)
    trials = 30000

    counts = Counter(rng.weighted_choice([3, 4, 4, 5, 5, 5]) for _ in range(trials))

    assert counts[3] / trials == pytest.approx(1 / 6, abs=0.015)
    assert counts[4] / trials == pytest.approx(2 / 6, abs=0.015)
    assert counts[5] / trials == pytest.approx(3 / 6, abs=0.015)


def test_choice_from_empty_sequence_raises():
    with pytest.raises(IndexError):
        SystemRandomSource(seed=1).choice([])


def test_randint_inclusive_bounds():
    rng = SystemRandomSource(seed=8)
    draws = {rng.randint(1, 3) for _ in range(500)}
    assert draws == {1, 2, 3}


def test_uniform_range():
    rng = SystemRandomSource(seed=8)
    assert all(0.0 <= rng.uniform() < 1.0 for _ in range(1000))
