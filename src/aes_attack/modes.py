"""ECB, CBC and CTR modes of operation over the AES-128 cipher core.

The engine is stateless: the mode (and its IV or nonce) is passed on every
call and the key is expanded once per call. Padding is applied on
ECB/CBC encryption according to the padding policy; decryption never
strips it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .aes_core import BLOCK_SIZE, key_expansion, encrypt_block, decrypt_block
from .padding import pkcs7_pad
from .utils import split_blocks, xor_bytes


NONCE_SIZE = 8
COUNTER_SIZE = BLOCK_SIZE - NONCE_SIZE


class ModeName(str, Enum):
    """Block cipher mode identifiers."""

    ECB = "ecb"
    CBC = "cbc"
    CTR = "ctr"


class Padding(Enum):
    """Padding policy applied before ECB/CBC encryption."""

    PKCS7 = "pkcs7"
    NONE = "none"


@dataclass(frozen=True)
class ECB:
    """Electronic codebook: every block encrypted independently."""

    @property
    def name(self) -> ModeName:
        return ModeName.ECB


@dataclass(frozen=True)
class CBC:
    """Cipher block chaining with an explicit IV."""

    iv: bytes

    def __post_init__(self) -> None:
        if len(self.iv) != BLOCK_SIZE:
            raise ValueError(f"IV must be 16 bytes, got {len(self.iv)}")

    @property
    def name(self) -> ModeName:
        return ModeName.CBC


@dataclass(frozen=True)
class CTR:
    """Counter mode: keystream = E(nonce || counter), counter big-endian."""

    nonce: bytes

    def __post_init__(self) -> None:
        if len(self.nonce) != NONCE_SIZE:
            raise ValueError(f"Nonce must be 8 bytes, got {len(self.nonce)}")

    @property
    def name(self) -> ModeName:
        return ModeName.CTR


Mode = Union[ECB, CBC, CTR]


def counter_block(nonce: bytes, counter: int) -> bytes:
    """Build the keystream input for block number `counter`."""
    return nonce + counter.to_bytes(COUNTER_SIZE, "big")


def ctr_keystream(words: list[list[int]], nonce: bytes, length: int) -> bytes:
    """Generate `length` keystream bytes for a nonce."""
    blocks = []
    for counter in range((length + BLOCK_SIZE - 1) // BLOCK_SIZE):
        blocks.append(encrypt_block(counter_block(nonce, counter), words))
    return b"".join(blocks)[:length]


def ctr_transform(data: bytes, key: bytes, nonce: bytes) -> bytes:
    """CTR encryption and decryption (the same operation)."""
    keystream = ctr_keystream(key_expansion(key), CTR(nonce).nonce, len(data))
    return xor_bytes(data, keystream)


def _require_aligned(data: bytes, what: str) -> None:
    if len(data) % BLOCK_SIZE != 0:
        raise ValueError(
            f"{what} length must be a multiple of {BLOCK_SIZE}, got {len(data)}"
        )


def encrypt(
    plaintext: bytes,
    key: bytes,
    mode: Mode,
    padding: Padding = Padding.PKCS7,
) -> bytes:
    """Encrypt arbitrary-length plaintext.

    Args:
        plaintext: Bytes to encrypt
        key: 16-byte AES key
        mode: ECB(), CBC(iv) or CTR(nonce)
        padding: PKCS7 pads ECB/CBC input; NONE requires aligned input.
            Ignored for CTR.

    Returns:
        Ciphertext bytes
    """
    if isinstance(mode, CTR):
        return ctr_transform(plaintext, key, mode.nonce)

    words = key_expansion(key)
    if padding is Padding.PKCS7:
        plaintext = pkcs7_pad(plaintext, BLOCK_SIZE)
    else:
        _require_aligned(plaintext, "Plaintext")

    blocks = split_blocks(plaintext, BLOCK_SIZE)

    if isinstance(mode, ECB):
        return b"".join(encrypt_block(block, words) for block in blocks)

    if isinstance(mode, CBC):
        previous = mode.iv
        out = []
        for block in blocks:
            previous = encrypt_block(xor_bytes(block, previous), words)
            out.append(previous)
        return b"".join(out)

    raise ValueError(f"Unsupported mode: {mode!r}")


def decrypt(ciphertext: bytes, key: bytes, mode: Mode) -> bytes:
    """Decrypt ciphertext. Padding is left in place for the caller.

    Args:
        ciphertext: Bytes to decrypt (block aligned for ECB/CBC)
        key: 16-byte AES key
        mode: ECB(), CBC(iv) or CTR(nonce)

    Returns:
        Plaintext bytes, still padded
    """
    if isinstance(mode, CTR):
        return ctr_transform(ciphertext, key, mode.nonce)

    words = key_expansion(key)
    _require_aligned(ciphertext, "Ciphertext")
    blocks = split_blocks(ciphertext, BLOCK_SIZE)

    if isinstance(mode, ECB):
        return b"".join(decrypt_block(block, words) for block in blocks)

    if isinstance(mode, CBC):
        previous = mode.iv
        out = []
        for block in blocks:
            out.append(xor_bytes(decrypt_block(block, words), previous))
            previous = block
        return b"".join(out)

    raise ValueError(f"Unsupported mode: {mode!r}")


def parse_mode(name: str, iv: bytes | None = None, nonce: bytes | None = None) -> Mode:
    """Build a mode tag from its name and parameter.

    Raises:
        ValueError: If the name is unknown or its parameter is missing
    """
    mode_name = ModeName(name.lower())
    if mode_name is ModeName.ECB:
        return ECB()
    if mode_name is ModeName.CBC:
        if iv is None:
            raise ValueError("CBC mode requires an IV")
        return CBC(iv)
    if nonce is None:
        raise ValueError("CTR mode requires a nonce")
    return CTR(nonce)
