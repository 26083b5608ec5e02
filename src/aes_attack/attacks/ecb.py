"""Chosen-plaintext attacks on ECB.

- detect_block_cipher_mode / detect_block_size / confirm_oracle_mode
- byte_at_a_time_ecb_decrypt: recover a secret appended by the oracle
- byte_at_a_time_ecb_decrypt_with_prefix: same, behind a random-length prefix
- ecb_cut_and_paste: forge a profile ciphertext with a chosen role
"""

from __future__ import annotations

from typing import Callable

from ..interfaces import AttackConfig, EncryptionOracle, ModeMismatchError, OracleProtocolError
from ..modes import ModeName
from ..padding import pkcs7_pad
from ..profile import profile_for
from ..trace import TraceRecorder
from ..utils import split_blocks, get_block


ATTACK = "ecb"


def detect_block_cipher_mode(ciphertext: bytes, block_size: int = 16) -> ModeName:
    """Guess ECB vs CBC from repeated ciphertext blocks.

    Raises:
        ValueError: If the ciphertext is shorter than two blocks
    """
    chunks = split_blocks(ciphertext, block_size)
    if len(chunks) < 2:
        raise ValueError(
            "Can't detect block cipher mode when ciphertext is less than 2 blocks long"
        )
    if len(set(chunks)) < len(chunks):
        return ModeName.ECB
    return ModeName.CBC


def _has_adjacent_repeat(ciphertext: bytes, block_size: int) -> bool:
    chunks = split_blocks(ciphertext, block_size)
    return any(
        len(a) == block_size and a == b
        for a, b in zip(chunks, chunks[1:])
    )


def detect_block_size(oracle: EncryptionOracle, config: AttackConfig | None = None) -> int:
    """Find the oracle's block size from runs of a repeated byte.

    Raises:
        OracleProtocolError: If no block size in range shows a repeat
    """
    config = config or AttackConfig()
    fill = bytes([config.placeholder_byte])

    for count in range(1, config.max_block_size * 8 + 1):
        ciphertext = oracle(fill * count)
        for block_size in range(config.max_block_size, config.min_block_size - 1, -1):
            if _has_adjacent_repeat(ciphertext, block_size):
                return block_size

    raise OracleProtocolError(
        f"Block size not in range {config.min_block_size}..{config.max_block_size}"
    )


def confirm_oracle_mode(
    oracle: EncryptionOracle,
    block_size: int,
    config: AttackConfig | None = None,
) -> None:
    """Raise ModeMismatchError unless the oracle encrypts in ECB."""
    config = config or AttackConfig()
    probe = bytes([config.placeholder_byte]) * (block_size * config.detection_blocks)
    detected = detect_block_cipher_mode(oracle(probe), block_size)
    if detected is not ModeName.ECB:
        raise ModeMismatchError(ModeName.ECB.value, detected.value)


def _short_block(block_size: int, placeholder: int, known_length: int) -> bytes:
    """Fill that pushes the next unknown byte to the end of a block."""
    return bytes([placeholder]) * (block_size - (known_length % block_size) - 1)


def _last_byte_map(
    oracle: EncryptionOracle,
    crafted: bytes,
    block_index: int,
    block_size: int,
    alphabet: bytes,
) -> dict[bytes, int]:
    """Map ciphertext block -> candidate for every candidate last byte."""
    lookup: dict[bytes, int] = {}
    for candidate in alphabet:
        ciphertext = oracle(crafted + bytes([candidate]))
        lookup[get_block(ciphertext, block_index, block_size)] = candidate
    return lookup


def byte_at_a_time_ecb_decrypt(
    oracle: EncryptionOracle,
    config: AttackConfig | None = None,
    controlled_block_index: int = 0,
    prefix: bytes = b"",
    tracer: TraceRecorder | None = None,
) -> bytes:
    """Recover the bytes an ECB oracle appends to attacker input.

    Args:
        oracle: Encryption oracle
        config: Attack parameters
        controlled_block_index: First ciphertext block fully controlled
            once `prefix` has been sent
        prefix: Bytes sent before every crafted input (alignment fill)
        tracer: Optional trace recorder

    Returns:
        Recovered secret; stops at the first byte that is not in the
        alphabet (normally the padding).
    """
    config = config or AttackConfig()

    block_size = detect_block_size(oracle, config)
    confirm_oracle_mode(oracle, block_size, config)
    if tracer:
        tracer.event(ATTACK, "block_size", block_size=block_size)
        tracer.event(ATTACK, "mode_confirmed", mode=ModeName.ECB.value)

    start = controlled_block_index * block_size
    limit = len(oracle(prefix)) - start

    known = bytearray()
    while len(known) < limit:
        short = _short_block(block_size, config.placeholder_byte, len(known))
        block_index = controlled_block_index + len(known) // block_size

        lookup = _last_byte_map(
            oracle, prefix + short + bytes(known), block_index, block_size, config.alphabet,
        )
        target = get_block(oracle(prefix + short), block_index, block_size)

        candidate = lookup.get(target)
        if candidate is None:
            # non-alphabet or padding byte reached
            if tracer:
                tracer.event(ATTACK, "search_exhausted", position=len(known))
            break

        known.append(candidate)
        if tracer:
            tracer.event(ATTACK, "byte_recovered", position=len(known) - 1, recovered=bytes(known))

    return bytes(known)


def first_changed_block(a: bytes, b: bytes, block_size: int) -> int:
    """Index of the first block that differs between two ciphertexts."""
    for i, (x, y) in enumerate(zip(split_blocks(a, block_size), split_blocks(b, block_size))):
        if x != y:
            return i
    raise OracleProtocolError("Oracle output does not depend on its input")


def find_prefix_alignment(
    oracle: EncryptionOracle,
    block_size: int,
    config: AttackConfig | None = None,
) -> tuple[int, int]:
    """Measure an unknown prefix the oracle puts before attacker input.

    Returns:
        Tuple of (index of the first block holding attacker input,
        number of fill bytes that complete the prefix's last block)
    """
    config = config or AttackConfig()
    fills = (config.placeholder_byte, config.alternate_byte)

    baseline = oracle(b"")
    index = min(
        first_changed_block(baseline, oracle(bytes([fill])), block_size)
        for fill in fills
    )

    def block_at(fill: int, count: int) -> bytes:
        return get_block(oracle(bytes([fill]) * count), index, block_size)

    # The block stops changing once it holds only prefix and fill bytes;
    # checking two fill bytes rules out a secret byte equal to the fill.
    for padding in range(1, block_size + 1):
        if all(block_at(f, padding) == block_at(f, padding + 1) for f in fills):
            return index, padding % block_size

    raise OracleProtocolError("Could not align attacker input to a block boundary")


def byte_at_a_time_ecb_decrypt_with_prefix(
    oracle: EncryptionOracle,
    config: AttackConfig | None = None,
    tracer: TraceRecorder | None = None,
) -> bytes:
    """Byte-at-a-time decryption when the oracle prepends a fixed random prefix.

    Returns:
        Recovered secret
    """
    config = config or AttackConfig()

    block_size = detect_block_size(oracle, config)
    confirm_oracle_mode(oracle, block_size, config)

    index, padding = find_prefix_alignment(oracle, block_size, config)
    controlled_block_index = index if padding == 0 else index + 1
    if tracer:
        tracer.event(
            ATTACK, "prefix_alignment",
            first_block=index, padding=padding, controlled_block=controlled_block_index,
        )

    return byte_at_a_time_ecb_decrypt(
        oracle,
        config,
        controlled_block_index=controlled_block_index,
        prefix=bytes([config.placeholder_byte]) * padding,
        tracer=tracer,
    )


def ecb_cut_and_paste(
    oracle: Callable[[str], bytes],
    encoder: Callable[[str], str] = profile_for,
    email: str = "foo@bar.com",
    field: str = "role",
    value: str = "admin",
    block_size: int = 16,
    filler: str = "A",
    email_field: str = "email",
    tracer: TraceRecorder | None = None,
) -> bytes:
    """Forge a ciphertext whose `field` decrypts to `value`.

    The encoder is the public plaintext layout the oracle uses; only the
    ciphertexts come from the oracle.

    Args:
        oracle: Encrypts the encoding of an email under ECB
        encoder: email -> encoded profile, as the oracle builds it
        email: Benign email used as the base query; the forged profile
            carries it left-padded with filler unless the role value
            already starts a block
        field: Field to overwrite; must be the last encoded field
        value: Value to forge
        block_size: Cipher block size
        filler: Character used to shift fields onto block boundaries
        email_field: Key the encoder stores the email under
        tracer: Optional trace recorder

    Returns:
        Spliced ciphertext
    """
    layout = encoder(email)
    email_marker = f"{email_field}={email}"
    email_start = layout.index(email_marker) + len(email_field) + 1
    marker = f"{field}="
    value_start = layout.rindex(marker) + len(marker)
    benign_value = layout[value_start:]

    if "&" in benign_value:
        raise ValueError(f"Field {field!r} is not the last encoded field")
    if len(benign_value) >= block_size or len(value) >= block_size:
        raise ValueError("Field values must fit a single padded block")

    # Query 1: padded value at a block boundary inside the email field
    lead = (-email_start) % block_size
    crafted_value = pkcs7_pad(value.encode("latin-1"), block_size).decode("latin-1")
    first = oracle(filler * lead + crafted_value + email)
    value_block_index = (email_start + lead) // block_size
    value_block = get_block(first, value_block_index, block_size)

    # Query 2: field value starts the final block
    shift = (-value_start) % block_size
    second = oracle(filler * shift + email)

    forged = second[:-block_size] + value_block
    if tracer:
        tracer.event(
            "ecb_cut_and_paste", "block_spliced",
            source_block=value_block_index, shift=shift, ciphertext=forged,
        )
    return forged
