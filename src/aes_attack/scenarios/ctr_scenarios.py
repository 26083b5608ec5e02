"""CTR scenario: statistical recovery under a reused nonce."""

from __future__ import annotations

from ..attacks.ctr import break_fixed_nonce_ctr
from ..interfaces import AttackConfig, AttackResult, BaseScenario
from ..oracles import encrypt_fixed_nonce_ctr
from ..randomness import RandomSource
from ..trace import TraceRecorder
from .corpus import SENTENCES


class CtrFixedNonceScenario(BaseScenario):
    """Break a corpus encrypted under one key and one nonce.

    Per-column scoring is heuristic: a column of capital letters
    ties with its case-flipped twin, so success is judged
    on byte accuracy rather than exact recovery.
    """

    name = "ctr_fixed_nonce"
    description = "Statistical recovery of AES-CTR plaintexts sharing a nonce"

    def __init__(
        self,
        config: AttackConfig | None = None,
        plaintexts: list[bytes] | None = None,
        threshold: float = 0.8,
    ):
        super().__init__(config)
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {threshold}")
        self.plaintexts = plaintexts or SENTENCES
        self.threshold = threshold

    def run(self, rng: RandomSource, tracer: TraceRecorder | None = None) -> AttackResult:
        ciphertexts = encrypt_fixed_nonce_ctr(rng.key(), self.plaintexts, rng.nonce())

        recovered_lines = break_fixed_nonce_ctr(ciphertexts, tracer=tracer)
        length = min(len(c) for c in ciphertexts)
        expected_lines = [p[:length] for p in self.plaintexts]

        total = length * len(expected_lines)
        matches = sum(
            got == want
            for recovered, expected in zip(recovered_lines, expected_lines)
            for got, want in zip(recovered, expected)
        )
        accuracy = matches / total if total else 0.0

        result = AttackResult(
            recovered=b"\n".join(recovered_lines),
            expected=b"\n".join(expected_lines),
            correct=accuracy >= self.threshold,
        )
        result.add_note(f"Ciphertexts observed: {len(ciphertexts)}")
        result.add_note(f"Byte accuracy: {accuracy:.3f} over {length} positions")
        if not result.correct:
            result.error_detail = f"Accuracy {accuracy:.3f} below threshold {self.threshold}"
        return result
