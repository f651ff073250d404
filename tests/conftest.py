import io

import pytest

from fairdice.dice import DiceParser
from fairdice.fair_random import FairRandomProtocol
from fairdice.ui import ConsoleSession

CLASSIC_DICE = ["2,2,4,4,9,9", "1,1,6,6,8,8", "3,3,5,5,7,7"]


class FixedProtocol(FairRandomProtocol):
    """Real HMAC commitments, but committed values come from a script."""

    def __init__(self, values):
        self.values = list(values)
        self.commitments = []

    def draw_value(self, range_):
        return self.values.pop(0) % range_

    def commit(self, range_):
        commitment = super().commit(range_)
        self.commitments.append(commitment)
        return commitment


@pytest.fixture
def classic_dice():
    return DiceParser.parse(CLASSIC_DICE)


@pytest.fixture
def make_session():
    def _make(script: str, max_retries=5):
        return ConsoleSession(io.StringIO(script), io.StringIO(), max_retries=max_retries)
    return _make
