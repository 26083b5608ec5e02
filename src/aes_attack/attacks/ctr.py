"""Breaking CTR when the nonce is reused.

Every ciphertext encrypted under the same key and nonce is XORed with the
same keystream, so byte j of every ciphertext shares keystream byte j.
Each keystream byte is guessed independently by scoring the column of
candidate plaintext bytes it produces.
"""

from __future__ import annotations

from ..human import english_frequency_score, human_resemblance_score
from ..interfaces import Scorer
from ..trace import TraceRecorder


def transpose(rows: list[bytes]) -> list[bytes]:
    """Columns of equal-length rows."""
    if not rows:
        return []
    return [bytes(column) for column in zip(*rows)]


def xor_single_byte(data: bytes, key_byte: int) -> bytes:
    return bytes(b ^ key_byte for b in data)


def recover_fixed_nonce_keystream(
    ciphertexts: list[bytes],
    scorer: Scorer = human_resemblance_score,
    tracer: TraceRecorder | None = None,
    tie_breaker: Scorer | None = english_frequency_score,
) -> bytes:
    """Guess the shared keystream up to the shortest ciphertext's length.

    Candidates are ranked by `scorer`. Several candidates usually reach the
    top score (XOR by 0x01 keeps most letters letters), so among those the
    highest `tie_breaker` score wins. Remaining ties keep the lowest
    candidate.

    Args:
        ciphertexts: Ciphertexts produced under one key and nonce
        scorer: Plaintext plausibility heuristic; higher is better
        tracer: Optional trace recorder
        tie_breaker: Secondary heuristic for candidates with equal score,
            or None to keep the lowest candidate

    Returns:
        One keystream byte per position
    """
    if not ciphertexts:
        raise ValueError("At least one ciphertext is required")

    length = min(len(c) for c in ciphertexts)
    columns = transpose([c[:length] for c in ciphertexts])

    keystream = bytearray()
    for position, column in enumerate(columns):
        best_rank = (-1.0, -1.0)
        best_byte = 0
        for candidate in range(256):
            plaintext = xor_single_byte(column, candidate)
            score = scorer(plaintext)
            if score < best_rank[0]:
                continue
            rank = (score, tie_breaker(plaintext) if tie_breaker else 0.0)
            if rank > best_rank:
                best_rank = rank
                best_byte = candidate
        keystream.append(best_byte)
        if tracer:
            tracer.event(
                "ctr_fixed_nonce", "keystream_byte",
                position=position, value=best_byte, score=round(best_rank[0], 4),
            )

    return bytes(keystream)


def apply_keystream(ciphertexts: list[bytes], keystream: bytes) -> list[bytes]:
    """XOR each ciphertext's prefix with the keystream."""
    return [
        bytes(c ^ k for c, k in zip(ciphertext, keystream))
        for ciphertext in ciphertexts
    ]


def break_fixed_nonce_ctr(
    ciphertexts: list[bytes],
    scorer: Scorer = human_resemblance_score,
    tracer: TraceRecorder | None = None,
    tie_breaker: Scorer | None = english_frequency_score,
) -> list[bytes]:
    """Recover the plaintext prefixes of ciphertexts sharing a CTR keystream."""
    keystream = recover_fixed_nonce_keystream(ciphertexts, scorer, tracer, tie_breaker)
    return apply_keystream(ciphertexts, keystream)
