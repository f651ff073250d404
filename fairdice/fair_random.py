"""
Commit-reveal fair random number generation.

The computer draws a secret key and a value in 0..range-1, publishes
HMAC(key, value) and only then asks the counterpart for their own number.
The final result is (counterpart + value) mod range. It is uniform as long as
the computer's value is, whatever number the counterpart picks, and the
counterpart can check the revealed key and value against the published HMAC.
"""
import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass, field

from fairdice.config import HMAC_ALGORITHM, KEY_SIZE_BYTES
from fairdice.errors import InvalidRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Commitment:
    range: int
    digest: str
    secret_key: bytes = field(repr=False)
    committed_value: int = field(repr=False)


@dataclass(frozen=True)
class CombinedResult:
    counterpart_value: int
    committed_value: int
    range: int
    result: int
    secret_key: bytes
    digest: str

    @property
    def key_hex(self) -> str:
        return self.secret_key.hex()


def _check_range(range_) -> int:
    if isinstance(range_, bool) or not isinstance(range_, int) or range_ < 1:
        raise InvalidRange(range_)
    return range_


class FairRandomProtocol:
    @staticmethod
    def generate_key() -> bytes:
        return secrets.token_bytes(KEY_SIZE_BYTES)

    @staticmethod
    def draw_value(range_: int) -> int:
        return secrets.randbelow(_check_range(range_))

    @staticmethod
    def calculate_hmac(key: bytes, value: int) -> str:
        message_bytes = str(value).encode('utf-8')
        return hmac.new(key, message_bytes, getattr(hashlib, HMAC_ALGORITHM)).hexdigest()

    def commit(self, range_: int) -> Commitment:
        _check_range(range_)
        key = self.generate_key()
        value = self.draw_value(range_)
        digest = self.calculate_hmac(key, value)
        logger.debug("Committed to a value in 0..%d (HMAC=%s)", range_ - 1, digest)
        return Commitment(range=range_, digest=digest, secret_key=key, committed_value=value)

    @staticmethod
    def publish_digest(commitment: Commitment) -> str:
        return commitment.digest

    def reveal(self, commitment: Commitment, counterpart_value: int) -> CombinedResult:
        """
        Combine the counterpart's number with the committed one.
        The modulo is always applied, so numbers outside 0..range-1 (negative
        ones included) are wrapped rather than rejected.
        """
        if isinstance(counterpart_value, bool) or not isinstance(counterpart_value, int):
            raise TypeError(f"Counterpart value must be an integer, got {counterpart_value!r}.")
        result = (counterpart_value + commitment.committed_value) % commitment.range
        logger.debug(
            "Revealed: (%d + %d) mod %d = %d",
            commitment.committed_value, counterpart_value, commitment.range, result,
        )
        return CombinedResult(
            counterpart_value=counterpart_value,
            committed_value=commitment.committed_value,
            range=commitment.range,
            result=result,
            secret_key=commitment.secret_key,
            digest=commitment.digest,
        )

    def verify(self, secret_key: bytes, committed_value: int, digest: str) -> bool:
        if not isinstance(secret_key, (bytes, bytearray)) or not isinstance(digest, str):
            return False
        if isinstance(committed_value, bool) or not isinstance(committed_value, int):
            return False
        expected = self.calculate_hmac(bytes(secret_key), committed_value)
        try:
            matches = hmac.compare_digest(expected, digest)
        except TypeError:
            # non-ASCII digest text
            matches = False
        if not matches:
            logger.warning("HMAC verification failed for value %d", committed_value)
        return matches
