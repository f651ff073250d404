from fractions import Fraction
from typing import Optional

from fairdice.dice import Die

# Diagonal marker: a die is never played against itself.
UNDEFINED = None


def win_probability(die1: Die, die2: Die) -> Fraction:
    """Probability that a roll of die1 is strictly greater than a roll of die2."""
    wins = sum(1 for f1 in die1.faces for f2 in die2.faces if f1 > f2)
    return Fraction(wins, len(die1) * len(die2))


class ProbabilityMatrix:
    """Pairwise win probabilities, indexed by (row die, column die)."""

    def __init__(self, probabilities: dict[tuple[int, int], Fraction], size: int):
        self._probabilities = dict(probabilities)
        self._size = size

    def __getitem__(self, key: tuple[int, int]) -> Optional[Fraction]:
        i, j = key
        if not (0 <= i < self._size and 0 <= j < self._size):
            raise KeyError(key)
        if i == j:
            return UNDEFINED
        return self._probabilities[i, j]

    def __len__(self) -> int:
        return self._size

    def rows(self) -> list[list[Optional[Fraction]]]:
        return [[self[i, j] for j in range(self._size)] for i in range(self._size)]


def compute(dice: list[Die]) -> ProbabilityMatrix:
    probabilities = {
        (i, j): win_probability(die_i, die_j)
        for i, die_i in enumerate(dice)
        for j, die_j in enumerate(dice)
        if i != j
    }
    return ProbabilityMatrix(probabilities, len(dice))
