"""Non-transitive dice game with provably fair, commit-reveal random rolls."""

from fairdice.dice import DiceParser, Die
from fairdice.fair_random import CombinedResult, Commitment, FairRandomProtocol
from fairdice.probability import ProbabilityMatrix, compute, win_probability

__all__ = [
    "CombinedResult",
    "Commitment",
    "DiceParser",
    "Die",
    "FairRandomProtocol",
    "ProbabilityMatrix",
    "compute",
    "win_probability",
]
