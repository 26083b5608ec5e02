"""Tests for breaking CTR under a reused nonce."""

import pytest

from aes_attack.attacks.ctr import (
    transpose,
    xor_single_byte,
    recover_fixed_nonce_keystream,
    apply_keystream,
    break_fixed_nonce_ctr,
)
from aes_attack.modes import CTR, ctr_keystream
from aes_attack.aes_core import key_expansion
from aes_attack.human import human_resemblance_score
from aes_attack.oracles import encrypt_fixed_nonce_ctr
from aes_attack.randomness import RandomSource
from aes_attack.scenarios.corpus import SENTENCES
from aes_attack.trace import TraceRecorder


KEY = bytes(range(100, 116))
NONCE = bytes(8)


def accuracy(recovered: list[bytes], plaintexts: list[bytes]) -> float:
    total = matches = 0
    for got, want in zip(recovered, plaintexts):
        for a, b in zip(got, want):
            total += 1
            matches += a == b
    return matches / total


class TestHelpers:
    """Column helpers."""

    def test_transpose(self) -> None:
        assert transpose([b"abc", b"def"]) == [b"ad", b"be", b"cf"]
        assert transpose([]) == []

    def test_xor_single_byte(self) -> None:
        assert xor_single_byte(b"\x00\xff", 0x0f) == b"\x0f\xf0"

    def test_apply_keystream_truncates(self) -> None:
        assert apply_keystream([b"\x01\x02\x03"], b"\x01\x02") == [b"\x00\x00"]


class TestFixedNonce:
    """Statistical keystream recovery."""

    def test_recovers_most_of_corpus(self) -> None:
        ciphertexts = encrypt_fixed_nonce_ctr(KEY, SENTENCES, NONCE)
        recovered = break_fixed_nonce_ctr(ciphertexts)

        length = min(len(c) for c in ciphertexts)
        assert all(len(r) == length for r in recovered)
        assert accuracy(recovered, SENTENCES) >= 0.8

    def test_keystream_matches_real_keystream_mostly(self) -> None:
        ciphertexts = encrypt_fixed_nonce_ctr(KEY, SENTENCES, NONCE)
        guessed = recover_fixed_nonce_keystream(ciphertexts)
        actual = ctr_keystream(key_expansion(KEY), CTR(NONCE).nonce, len(guessed))
        hits = sum(a == b for a, b in zip(guessed, actual))
        assert hits / len(guessed) >= 0.8

    def test_custom_scorer_ties_pick_lowest(self) -> None:
        """A constant scorer with no tie-breaker keeps the first candidate, 0."""
        keystream = recover_fixed_nonce_keystream(
            [b"abc", b"defg"], scorer=lambda data: 1.0, tie_breaker=None,
        )
        assert keystream == bytes(3)

    def test_tie_breaker_prefers_english(self) -> None:
        """Several candidates stay inside the alphabet; frequency picks the real one."""
        column = b"the dog is in the old house so we rest"
        ciphertexts = [bytes([b ^ 0x42]) for b in column]
        assert human_resemblance_score(xor_single_byte(column, 0x01)) == 1.0

        assert recover_fixed_nonce_keystream(ciphertexts) == b"\x42"
        assert recover_fixed_nonce_keystream(ciphertexts, tie_breaker=None) != b"\x42"

    @pytest.mark.parametrize("seed", range(6))
    @pytest.mark.parametrize("count", [30, 40])
    def test_accuracy_across_keys(self, seed: int, count: int) -> None:
        rng = RandomSource(seed=seed)
        plaintexts = SENTENCES[:count]
        ciphertexts = encrypt_fixed_nonce_ctr(rng.key(), plaintexts, rng.nonce())
        assert accuracy(break_fixed_nonce_ctr(ciphertexts), plaintexts) >= 0.8

    def test_trace_per_position(self) -> None:
        ciphertexts = encrypt_fixed_nonce_ctr(KEY, SENTENCES[:10], NONCE)
        tracer = TraceRecorder()
        keystream = recover_fixed_nonce_keystream(ciphertexts, tracer=tracer)
        events = tracer.events("keystream_byte")
        assert len(events) == len(keystream)
        assert events[0]["position"] == 0

    def test_empty_input(self) -> None:
        with pytest.raises(ValueError, match="At least one ciphertext"):
            recover_fixed_nonce_keystream([])
