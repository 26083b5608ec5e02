"""CBC scenarios: bit flipping and the padding oracle."""

from __future__ import annotations

from ..attacks.cbc import cbc_bitflip, cbc_padding_oracle_attack, strip_recovered_padding
from ..counters import QueryCounter
from ..human import human_resemblance_score
from ..interfaces import AttackConfig, AttackResult, BaseScenario
from ..modes import CBC, encrypt
from ..oracles import ADMIN_TOKEN, build_cbc_bitflip_oracles, build_padding_oracle
from ..randomness import RandomSource
from ..trace import TraceRecorder
from .corpus import SENTENCES


class CbcBitflipScenario(BaseScenario):
    """Smuggle `;admin=true;` past an escaping CBC cookie encoder."""

    name = "cbc_bitflip"
    description = "CBC bit-flipping to inject ;admin=true; into an escaped cookie"

    def run(self, rng: RandomSource, tracer: TraceRecorder | None = None) -> AttackResult:
        encrypt_userdata, decrypt_cookie, is_admin = build_cbc_bitflip_oracles(rng.key(), rng.iv())
        counter = QueryCounter()

        forged = cbc_bitflip(
            counter.wrap(encrypt_userdata),
            counter.wrap(decrypt_cookie),
            target=ADMIN_TOKEN,
            config=self.config,
            tracer=tracer,
        )

        admin = is_admin(forged)
        result = AttackResult(
            recovered=decrypt_cookie(forged),
            expected=ADMIN_TOKEN,
            correct=admin,
            queries=counter.count,
        )
        if not admin:
            result.error_detail = "Decrypted cookie does not contain the admin token"
        return result


class CbcPaddingOracleScenario(BaseScenario):
    """Decrypt a session token with a padding-validity oracle."""

    name = "cbc_padding_oracle"
    description = "CBC padding oracle decryption of a random session token"

    def __init__(self, config: AttackConfig | None = None, plaintexts: list[bytes] | None = None):
        super().__init__(config)
        self.plaintexts = plaintexts or SENTENCES

    def run(self, rng: RandomSource, tracer: TraceRecorder | None = None) -> AttackResult:
        key = rng.key()
        iv = rng.iv()
        session = rng.choice(self.plaintexts)
        ciphertext = encrypt(session, key, CBC(iv))

        counter = QueryCounter()
        oracle = counter.wrap(build_padding_oracle(key, iv))

        raw = cbc_padding_oracle_attack(ciphertext, oracle, iv=iv, tracer=tracer)
        recovered = strip_recovered_padding(raw)
        score = human_resemblance_score(recovered)

        result = AttackResult(
            recovered=recovered,
            expected=session,
            correct=recovered == session,
            queries=counter.count,
        )
        result.add_note(f"Human resemblance: {score:.2f}")
        if not result.correct:
            result.error_detail = (
                f"Recovered {len(raw)} of {len(ciphertext)} bytes"
            )
        return result
