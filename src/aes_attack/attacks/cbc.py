"""Attacks on CBC.

Bit flipping: flipping bit b of ciphertext block n flips bit b of
plaintext block n+1 (block n decrypts to garbage).

Padding oracle: a "padding OK" signal on forged (previous, current)
pairs reveals the intermediate value D_K(current) one byte at a time,
from the last byte backwards.
"""

from __future__ import annotations

from ..interfaces import (
    AttackConfig,
    DecryptionOracle,
    EncryptionOracle,
    OracleProtocolError,
    PaddingOracle,
)
from ..padding import is_valid_pkcs7
from ..trace import TraceRecorder
from ..utils import split_blocks, xor_bytes
from .ecb import first_changed_block


FORBIDDEN_DELIMITERS = b";="


def find_input_alignment(
    oracle: EncryptionOracle,
    block_size: int = 16,
    config: AttackConfig | None = None,
) -> tuple[int, int]:
    """Locate attacker input inside a chained ciphertext.

    In CBC every block from the first changed byte onward differs, so the
    first differing block marks where the varying byte landed.

    Returns:
        Tuple of (index of the first block fully controlled after
        alignment, number of fill bytes needed to reach it)
    """
    config = config or AttackConfig()
    fill = bytes([config.placeholder_byte])
    probe_a = bytes([config.placeholder_byte])
    probe_b = bytes([config.alternate_byte])

    def changed_block(count: int) -> int:
        return first_changed_block(
            oracle(fill * count + probe_a),
            oracle(fill * count + probe_b),
            block_size,
        )

    first = changed_block(0)
    for count in range(1, block_size + 1):
        if changed_block(count) > first:
            padding = count % block_size
            return (first if padding == 0 else first + 1), padding

    raise OracleProtocolError("Could not align attacker input to a block boundary")


def cbc_bitflip(
    encrypt_oracle: EncryptionOracle,
    decrypt_oracle: DecryptionOracle,
    target: bytes = b";admin=true;",
    block_size: int = 16,
    config: AttackConfig | None = None,
    tracer: TraceRecorder | None = None,
) -> bytes:
    """Forge a CBC ciphertext whose plaintext contains `target`, even though
    the oracle escapes the delimiters in its input.

    Args:
        encrypt_oracle: Encrypts attacker input inside a fixed template
        decrypt_oracle: Reveals the plaintext of a ciphertext
        target: Bytes to smuggle in (at most one block)
        block_size: Cipher block size
        config: Attack parameters
        tracer: Optional trace recorder

    Returns:
        Forged ciphertext
    """
    config = config or AttackConfig()
    if len(target) > block_size:
        raise ValueError(f"Target must fit one block ({block_size} bytes), got {len(target)}")

    sacrificial_index, padding = find_input_alignment(encrypt_oracle, block_size, config)

    sought = bytearray(target)
    positions = []
    for pos, byte in enumerate(target):
        if byte in FORBIDDEN_DELIMITERS:
            sought[pos] = config.flip_placeholder
            positions.append(pos)

    crafted = (
        bytes([config.placeholder_byte]) * padding
        + b"\x01" * block_size
        + bytes(sought)
    )
    forged = bytearray(encrypt_oracle(crafted))

    sacrificial_start = sacrificial_index * block_size
    target_start = sacrificial_start + block_size

    for pos in positions:
        offset = sacrificial_start + pos
        original = forged[offset]
        wanted = target[pos]
        for i in range(256):
            forged[offset] = (original + i) % 256
            plaintext = decrypt_oracle(bytes(forged))
            if plaintext[target_start + pos] == wanted:
                if tracer:
                    tracer.event(
                        "cbc_bitflip", "byte_flipped",
                        position=pos, wanted=chr(wanted), value=forged[offset],
                    )
                break
        else:
            forged[offset] = original
            if tracer:
                tracer.event("cbc_bitflip", "search_exhausted", position=pos)

    return bytes(forged)


def _recover_intermediate(
    previous: bytes,
    current: bytes,
    padding_oracle: PaddingOracle,
    block_size: int,
) -> bytes | None:
    """Recover D_K(current) using forged copies of `previous`.

    Returns:
        The intermediate block, or None if some byte has no valid guess
    """
    intermediate = [0] * block_size

    for pad in range(1, block_size + 1):
        position = block_size - pad
        forged = bytearray(previous)
        for j in range(position + 1, block_size):
            forged[j] = intermediate[j] ^ pad

        found = None
        for guess in range(256):
            forged[position] = guess
            if not padding_oracle(bytes(forged) + current):
                continue
            if pad == 1 and position > 0:
                # rule out a longer accidental padding such as 02 02
                check = bytearray(forged)
                check[position - 1] ^= 0xFF
                if not padding_oracle(bytes(check) + current):
                    continue
            found = guess
            break

        if found is None:
            return None
        intermediate[position] = found ^ pad

    return bytes(intermediate)


def cbc_padding_oracle_attack(
    ciphertext: bytes,
    padding_oracle: PaddingOracle,
    iv: bytes | None = None,
    block_size: int = 16,
    tracer: TraceRecorder | None = None,
) -> bytes:
    """Decrypt a CBC ciphertext with nothing but a padding-validity oracle.

    Args:
        ciphertext: Block-aligned CBC ciphertext
        padding_oracle: Returns True when a ciphertext has valid padding
        iv: IV used for the first block; without it recovery starts at the
            second block
        block_size: Cipher block size
        tracer: Optional trace recorder

    Returns:
        Recovered plaintext, padding included. Stops after the last block
        that could be fully recovered.
    """
    if len(ciphertext) % block_size != 0:
        raise ValueError(
            f"Ciphertext length must be a multiple of {block_size}, got {len(ciphertext)}"
        )

    blocks = split_blocks(ciphertext, block_size)
    if iv is not None:
        if len(iv) != block_size:
            raise ValueError(f"IV must be {block_size} bytes, got {len(iv)}")
        blocks = [iv] + blocks

    recovered = bytearray()
    for index in range(len(blocks) - 1):
        previous, current = blocks[index], blocks[index + 1]
        intermediate = _recover_intermediate(previous, current, padding_oracle, block_size)
        if intermediate is None:
            if tracer:
                tracer.event("cbc_padding_oracle", "search_exhausted", block=index)
            break

        plaintext_block = xor_bytes(intermediate, previous)
        recovered += plaintext_block
        if tracer:
            tracer.event(
                "cbc_padding_oracle", "block_recovered",
                block=index, plaintext=plaintext_block,
            )

    return bytes(recovered)


def strip_recovered_padding(plaintext: bytes, block_size: int = 16) -> bytes:
    """Remove PKCS#7 padding if present; otherwise return plaintext unchanged."""
    if is_valid_pkcs7(plaintext, block_size):
        return plaintext[:-plaintext[-1]]
    return plaintext
