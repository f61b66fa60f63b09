"""Multiple-choice option shuffling for placement questions."""
import random
from typing import Sequence

# OS entropy so option order is not predictable from earlier listings
_rng = random.SystemRandom()


def shuffle_options(correct_answer: str, wrong_answers: Sequence[str]) -> list[str]:
    """Merge the correct answer with its distractors in uniformly random order.

    Every input appears exactly once. Call per presentation; results are
    intentionally not cached or reproducible.
    """
    options = [correct_answer, *wrong_answers]
    _rng.shuffle(options)
    return options
