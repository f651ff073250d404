import hashlib
import hmac
from collections import Counter

import pytest

from fairdice.errors import InvalidRange
from fairdice.fair_random import FairRandomProtocol

# chi-square critical values at p = 0.9999
CHI2_CRITICAL = {1: 15.14, 5: 25.74}
TRIALS = 6000


def chi_square(samples, range_):
    counts = Counter(samples)
    expected = len(samples) / range_
    return sum((counts.get(v, 0) - expected) ** 2 / expected for v in range(range_))


def flip_bit(data: bytes, bit: int) -> bytes:
    flipped = bytearray(data)
    flipped[bit // 8] ^= 1 << (bit % 8)
    return bytes(flipped)


@pytest.fixture
def protocol():
    return FairRandomProtocol()


@pytest.mark.parametrize("range_", [1, 2, 6, 20, 1000])
def test_commit_produces_value_in_range_and_verifiable_digest(protocol, range_):
    commitment = protocol.commit(range_)
    assert 0 <= commitment.committed_value < range_
    assert commitment.range == range_
    assert len(commitment.secret_key) == 32
    assert protocol.verify(commitment.secret_key, commitment.committed_value, commitment.digest)


def test_digest_is_lowercase_sha3_hmac_of_decimal_value(protocol):
    commitment = protocol.commit(6)
    expected = hmac.new(
        commitment.secret_key, str(commitment.committed_value).encode(), hashlib.sha3_256
    ).hexdigest()
    assert protocol.publish_digest(commitment) == expected
    assert expected == expected.lower()
    assert len(expected) == 64


@pytest.mark.parametrize("bad_range", [0, -1, 2.5, "6", None, True])
def test_commit_rejects_invalid_range(protocol, bad_range):
    with pytest.raises(InvalidRange):
        protocol.commit(bad_range)


def test_invalid_range_is_a_value_error(protocol):
    with pytest.raises(ValueError):
        protocol.draw_value(0)


def test_verify_detects_any_single_bit_change(protocol):
    commitment = protocol.commit(6)
    key, value, digest = commitment.secret_key, commitment.committed_value, commitment.digest

    for bit in range(len(key) * 8):
        assert not protocol.verify(flip_bit(key, bit), value, digest)

    for bit in range(8):
        assert not protocol.verify(key, value ^ (1 << bit), digest)

    raw_digest = bytes.fromhex(digest)
    for bit in range(len(raw_digest) * 8):
        assert not protocol.verify(key, value, flip_bit(raw_digest, bit).hex())


def test_verify_rejects_case_changes_in_the_digest(protocol):
    commitment = protocol.commit(6)
    key, value, digest = commitment.secret_key, commitment.committed_value, commitment.digest
    assert not protocol.verify(key, value, digest.upper())
    # a single hex letter in upper case is a one-bit change of the published text
    position = next(i for i, ch in enumerate(digest) if ch in "abcdef")
    tampered = digest[:position] + digest[position].upper() + digest[position + 1:]
    assert not protocol.verify(key, value, tampered)


def test_verify_never_raises_on_malformed_input(protocol):
    commitment = protocol.commit(3)
    key, value, digest = commitment.secret_key, commitment.committed_value, commitment.digest
    assert not protocol.verify(key, value, "zz")
    assert not protocol.verify(key, value, "é" * 64)
    assert not protocol.verify(key, value, None)
    assert not protocol.verify(key.hex(), value, digest)
    assert not protocol.verify(key, str(value), digest)


def test_reveal_combines_modulo_range(protocol):
    commitment = protocol.commit(6)
    combined = protocol.reveal(commitment, 4)
    assert combined.result == (4 + commitment.committed_value) % 6
    assert combined.secret_key == commitment.secret_key
    assert combined.committed_value == commitment.committed_value
    assert combined.key_hex == commitment.secret_key.hex()
    assert protocol.verify(combined.secret_key, combined.committed_value, combined.digest)


@pytest.mark.parametrize("counterpart", [6, 13, -1, -7])
def test_reveal_wraps_out_of_range_counterpart_values(protocol, counterpart):
    commitment = protocol.commit(6)
    combined = protocol.reveal(commitment, counterpart)
    assert combined.result == (counterpart + commitment.committed_value) % 6
    assert 0 <= combined.result < 6


def test_reveal_rejects_non_integer_counterpart(protocol):
    commitment = protocol.commit(6)
    with pytest.raises(TypeError):
        protocol.reveal(commitment, "3")


def test_commitment_repr_hides_secrets(protocol):
    commitment = protocol.commit(6)
    text = repr(commitment)
    assert commitment.secret_key.hex() not in text
    assert "secret_key" not in text
    assert "committed_value" not in text
    assert commitment.digest in text


@pytest.mark.parametrize("range_", [2, 6])
def test_committed_values_are_uniform(protocol, range_):
    samples = [protocol.commit(range_).committed_value for _ in range(TRIALS)]
    assert set(samples) == set(range(range_))
    assert chi_square(samples, range_) < CHI2_CRITICAL[range_ - 1]


@pytest.mark.parametrize("strategy", ["always_zero", "always_max", "alternating", "chasing"])
def test_combined_result_stays_uniform_for_any_counterpart(protocol, strategy):
    range_ = 6
    results = []
    previous = 0
    for trial in range(TRIALS):
        if strategy == "always_zero":
            counterpart = 0
        elif strategy == "always_max":
            counterpart = range_ - 1
        elif strategy == "alternating":
            counterpart = trial % 2
        else:
            # aim at the previous result, the best a counterpart can do without seeing the value
            counterpart = (range_ - previous) % range_
        commitment = protocol.commit(range_)
        previous = protocol.reveal(commitment, counterpart).result
        results.append(previous)
    assert chi_square(results, range_) < CHI2_CRITICAL[range_ - 1]
