"""ECB scenarios: mode detection, byte-at-a-time and cut-and-paste."""

from __future__ import annotations

from ..attacks.ecb import (
    byte_at_a_time_ecb_decrypt,
    byte_at_a_time_ecb_decrypt_with_prefix,
    detect_block_cipher_mode,
    ecb_cut_and_paste,
)
from ..counters import QueryCounter
from ..interfaces import AttackConfig, AttackResult, BaseScenario
from ..oracles import (
    build_ecb_suffix_oracle,
    build_prefixed_ecb_oracle,
    build_profile_oracles,
    build_random_mode_oracle,
)
from ..profile import DEFAULT_UID, encode_kv
from ..randomness import RandomSource
from ..trace import TraceRecorder
from .corpus import ECB_SECRET


class DetectModeScenario(BaseScenario):
    """Tell ECB from CBC for oracles that pick a mode at random."""

    name = "detect_mode"
    description = "Detect ECB vs CBC behind a randomly keyed oracle"

    def __init__(self, config: AttackConfig | None = None, trials: int = 16):
        super().__init__(config)
        if trials < 1:
            raise ValueError(f"trials must be >= 1, got {trials}")
        self.trials = trials

    def run(self, rng: RandomSource, tracer: TraceRecorder | None = None) -> AttackResult:
        counter = QueryCounter()
        # Enough repeats to fill two aligned blocks whatever the random padding
        probe = bytes([self.config.placeholder_byte]) * (16 * self.config.detection_blocks)

        detected = []
        actual = []
        for trial in range(self.trials):
            oracle, mode = build_random_mode_oracle(rng)
            guess = detect_block_cipher_mode(counter.wrap(oracle)(probe))
            detected.append(guess.value)
            actual.append(mode.value)
            if tracer:
                tracer.event(self.name, "mode_detected", trial=trial, detected=guess.value, actual=mode.value)

        recovered = " ".join(detected).encode()
        expected = " ".join(actual).encode()
        result = AttackResult(
            recovered=recovered,
            expected=expected,
            correct=recovered == expected,
            queries=counter.count,
        )
        hits = sum(d == a for d, a in zip(detected, actual))
        result.add_note(f"{hits}/{self.trials} modes detected correctly")
        if not result.correct:
            result.error_detail = f"Misdetected {self.trials - hits} of {self.trials} oracles"
        return result


class EcbByteAtATimeScenario(BaseScenario):
    """Recover a secret appended to attacker input under ECB."""

    name = "ecb_byte_at_a_time"
    description = "Byte-at-a-time decryption of AES-ECB(input || secret)"

    def __init__(self, config: AttackConfig | None = None, secret: bytes = ECB_SECRET):
        super().__init__(config)
        self.secret = secret

    def run(self, rng: RandomSource, tracer: TraceRecorder | None = None) -> AttackResult:
        counter = QueryCounter()
        oracle = counter.wrap(build_ecb_suffix_oracle(rng.key(), self.secret))

        recovered = byte_at_a_time_ecb_decrypt(oracle, self.config, tracer=tracer)
        return _secret_result(recovered, self.secret, counter)


class EcbByteAtATimePrefixScenario(BaseScenario):
    """Byte-at-a-time decryption behind a random-length prefix."""

    name = "ecb_byte_at_a_time_prefix"
    description = "Byte-at-a-time decryption of AES-ECB(random_prefix || input || secret)"

    # Prefix length is drawn from 0..MAX_PREFIX
    MAX_PREFIX = 47

    def __init__(self, config: AttackConfig | None = None, secret: bytes = ECB_SECRET):
        super().__init__(config)
        self.secret = secret

    def run(self, rng: RandomSource, tracer: TraceRecorder | None = None) -> AttackResult:
        key = rng.key()
        prefix = rng.get_bytes(rng.randint(0, self.MAX_PREFIX), "prefixes")
        counter = QueryCounter()
        oracle = counter.wrap(build_prefixed_ecb_oracle(key, prefix, self.secret))

        recovered = byte_at_a_time_ecb_decrypt_with_prefix(oracle, self.config, tracer=tracer)
        result = _secret_result(recovered, self.secret, counter)
        result.add_note(f"Random prefix length: {len(prefix)}")
        return result


class EcbCutAndPasteScenario(BaseScenario):
    """Forge an admin profile from ECB-encrypted user profiles."""

    name = "ecb_cut_and_paste"
    description = "ECB cut-and-paste forgery of a role=admin profile"

    def __init__(self, config: AttackConfig | None = None, email: str = "foo12@bar.com"):
        super().__init__(config)
        self.email = email

    def run(self, rng: RandomSource, tracer: TraceRecorder | None = None) -> AttackResult:
        encrypt_profile, decrypt_profile = build_profile_oracles(rng.key())
        counter = QueryCounter()

        forged = ecb_cut_and_paste(counter.wrap(encrypt_profile), email=self.email, tracer=tracer)
        profile = decrypt_profile(forged)

        recovered = encode_kv(profile).encode("latin-1")
        expected = encode_kv(
            {"email": self.email, "uid": str(DEFAULT_UID), "role": "admin"}
        ).encode("latin-1")
        result = AttackResult(
            recovered=recovered,
            expected=expected,
            correct=recovered == expected,
            queries=counter.count,
        )
        if not result.correct:
            result.error_detail = f"Forged profile decodes to {recovered.decode('latin-1')!r}"
        return result


def _secret_result(recovered: bytes, secret: bytes, counter: QueryCounter) -> AttackResult:
    result = AttackResult(
        recovered=recovered,
        expected=secret,
        correct=recovered == secret,
        queries=counter.count,
    )
    if not result.correct:
        result.error_detail = f"Recovered {len(recovered)} of {len(secret)} bytes"
        for i, (got, want) in enumerate(zip(recovered, secret)):
            if got != want:
                result.error_detail += f"; first mismatch at byte {i}"
                break
    return result
