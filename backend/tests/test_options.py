"""Tests for option shuffling."""
from collections import Counter

from engines.options import shuffle_options


def test_shuffle_is_permutation():
    options = shuffle_options("right", ["a", "b", "c"])
    assert sorted(options) == sorted(["right", "a", "b", "c"])
    assert len(options) == 4


def test_shuffle_keeps_duplicates():
    options = shuffle_options("x", ["x", "y"])
    assert Counter(options) == Counter(["x", "x", "y"])


def test_shuffle_without_distractors():
    assert shuffle_options("only", []) == ["only"]


def test_correct_answer_position_varies():
    positions = {shuffle_options("right", ["a", "b", "c"]).index("right") for _ in range(200)}
    assert len(positions) > 1


def test_inputs_not_mutated():
    wrong = ["a", "b", "c"]
    shuffle_options("right", wrong)
    assert wrong == ["a", "b", "c"]
