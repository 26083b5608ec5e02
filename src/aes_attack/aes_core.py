"""
AES-128 block cipher built from its primitive transformations.

Round structure (FIPS-197 Sec. 5.1 / 5.3):
- Encrypt: AddRoundKey(0), 9 x {SubBytes, ShiftRows, MixColumns,
  AddRoundKey}, then SubBytes, ShiftRows, AddRoundKey(10)
- Decrypt: AddRoundKey(10), 9 x {InvShiftRows, InvSubBytes,
  AddRoundKey, InvMixColumns}, then InvShiftRows, InvSubBytes,
  AddRoundKey(0)

All transforms take a 4x4 state (see utils) and return a new one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .gf import gf_mul
from .utils import bytes_to_state, state_to_bytes, copy_state

if TYPE_CHECKING:
    from .trace import TraceRecorder


BLOCK_SIZE = 16
KEY_SIZE = 16

# Nb, Nk, Nr for AES-128
NB = 4
NK = 4
NR = 10

# AES S-box lookup table
SBOX = bytes([
    0x63, 0x7c, 0x77, 0x7b, 0xf2, 0x6b, 0x6f, 0xc5, 0x30, 0x01, 0x67, 0x2b, 0xfe, 0xd7, 0xab, 0x76,
    0xca, 0x82, 0xc9, 0x7d, 0xfa, 0x59, 0x47, 0xf0, 0xad, 0xd4, 0xa2, 0xaf, 0x9c, 0xa4, 0x72, 0xc0,
    0xb7, 0xfd, 0x93, 0x26, 0x36, 0x3f, 0xf7, 0xcc, 0x34, 0xa5, 0xe5, 0xf1, 0x71, 0xd8, 0x31, 0x15,
    0x04, 0xc7, 0x23, 0xc3, 0x18, 0x96, 0x05, 0x9a, 0x07, 0x12, 0x80, 0xe2, 0xeb, 0x27, 0xb2, 0x75,
    0x09, 0x83, 0x2c, 0x1a, 0x1b, 0x6e, 0x5a, 0xa0, 0x52, 0x3b, 0xd6, 0xb3, 0x29, 0xe3, 0x2f, 0x84,
    0x53, 0xd1, 0x00, 0xed, 0x20, 0xfc, 0xb1, 0x5b, 0x6a, 0xcb, 0xbe, 0x39, 0x4a, 0x4c, 0x58, 0xcf,
    0xd0, 0xef, 0xaa, 0xfb, 0x43, 0x4d, 0x33, 0x85, 0x45, 0xf9, 0x02, 0x7f, 0x50, 0x3c, 0x9f, 0xa8,
    0x51, 0xa3, 0x40, 0x8f, 0x92, 0x9d, 0x38, 0xf5, 0xbc, 0xb6, 0xda, 0x21, 0x10, 0xff, 0xf3, 0xd2,
    0xcd, 0x0c, 0x13, 0xec, 0x5f, 0x97, 0x44, 0x17, 0xc4, 0xa7, 0x7e, 0x3d, 0x64, 0x5d, 0x19, 0x73,
    0x60, 0x81, 0x4f, 0xdc, 0x22, 0x2a, 0x90, 0x88, 0x46, 0xee, 0xb8, 0x14, 0xde, 0x5e, 0x0b, 0xdb,
    0xe0, 0x32, 0x3a, 0x0a, 0x49, 0x06, 0x24, 0x5c, 0xc2, 0xd3, 0xac, 0x62, 0x91, 0x95, 0xe4, 0x79,
    0xe7, 0xc8, 0x37, 0x6d, 0x8d, 0xd5, 0x4e, 0xa9, 0x6c, 0x56, 0xf4, 0xea, 0x65, 0x7a, 0xae, 0x08,
    0xba, 0x78, 0x25, 0x2e, 0x1c, 0xa6, 0xb4, 0xc6, 0xe8, 0xdd, 0x74, 0x1f, 0x4b, 0xbd, 0x8b, 0x8a,
    0x70, 0x3e, 0xb5, 0x66, 0x48, 0x03, 0xf6, 0x0e, 0x61, 0x35, 0x57, 0xb9, 0x86, 0xc1, 0x1d, 0x9e,
    0xe1, 0xf8, 0x98, 0x11, 0x69, 0xd9, 0x8e, 0x94, 0x9b, 0x1e, 0x87, 0xe9, 0xce, 0x55, 0x28, 0xdf,
    0x8c, 0xa1, 0x89, 0x0d, 0xbf, 0xe6, 0x42, 0x68, 0x41, 0x99, 0x2d, 0x0f, 0xb0, 0x54, 0xbb, 0x16,
])


def _invert_sbox(sbox: bytes) -> bytes:
    inverse = bytearray(256)
    for i, v in enumerate(sbox):
        inverse[v] = i
    return bytes(inverse)


INV_SBOX = _invert_sbox(SBOX)

# Round constants
RCON = bytes([0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x80, 0x1b, 0x36])

MIX_MATRIX = (
    (0x02, 0x03, 0x01, 0x01),
    (0x01, 0x02, 0x03, 0x01),
    (0x01, 0x01, 0x02, 0x03),
    (0x03, 0x01, 0x01, 0x02),
)

INV_MIX_MATRIX = (
    (0x0e, 0x0b, 0x0d, 0x09),
    (0x09, 0x0e, 0x0b, 0x0d),
    (0x0d, 0x09, 0x0e, 0x0b),
    (0x0b, 0x0d, 0x09, 0x0e),
)

# Products by every MixColumns coefficient, filled from gf_mul at import
MUL_TABLES = {
    c: bytes(gf_mul(c, x) for x in range(256))
    for c in sorted({c for row in MIX_MATRIX + INV_MIX_MATRIX for c in row})
}


# ──────────────────────────────────────────────────────────────────
# State transforms
# ──────────────────────────────────────────────────────────────────

def _substitute(state: list[list[int]], table: bytes) -> list[list[int]]:
    return [[table[b] for b in row] for row in state]


def sub_bytes(state: list[list[int]]) -> list[list[int]]:
    """Apply the S-box to each byte."""
    return _substitute(state, SBOX)


def inv_sub_bytes(state: list[list[int]]) -> list[list[int]]:
    """Apply the inverse S-box to each byte."""
    return _substitute(state, INV_SBOX)


def shift_rows(state: list[list[int]]) -> list[list[int]]:
    """Cyclically shift row i left by i positions."""
    return [state[row][row:] + state[row][:row] for row in range(4)]


def inv_shift_rows(state: list[list[int]]) -> list[list[int]]:
    """Cyclically shift row i right by i positions."""
    return [state[row][4 - row:] + state[row][:4 - row] for row in range(4)]


def _mix(state: list[list[int]], matrix: tuple[tuple[int, ...], ...]) -> list[list[int]]:
    result = [[0] * 4 for _ in range(4)]
    for col in range(4):
        for row in range(4):
            value = 0
            for k in range(4):
                value ^= MUL_TABLES[matrix[row][k]][state[k][col]]
            result[row][col] = value
    return result


def mix_columns(state: list[list[int]]) -> list[list[int]]:
    """Multiply each column by the fixed MixColumns matrix over GF(2^8)."""
    return _mix(state, MIX_MATRIX)


def inv_mix_columns(state: list[list[int]]) -> list[list[int]]:
    """Multiply each column by the inverse MixColumns matrix."""
    return _mix(state, INV_MIX_MATRIX)


def add_round_key(state: list[list[int]], round_key: list[list[int]]) -> list[list[int]]:
    """XOR state with round key."""
    return [
        [state[row][col] ^ round_key[row][col] for col in range(4)]
        for row in range(4)
    ]


# ──────────────────────────────────────────────────────────────────
# Key schedule
# ──────────────────────────────────────────────────────────────────

def rot_word(word: list[int]) -> list[int]:
    """Cyclic left rotation of a four-byte word."""
    return word[1:] + word[:1]


def sub_word(word: list[int]) -> list[int]:
    """Apply the S-box to each byte of a four-byte word."""
    return [SBOX[b] for b in word]


def key_expansion(key: bytes) -> list[list[int]]:
    """
    Expand a 16-byte key into the 44-word AES-128 key schedule.

    Args:
        key: 16-byte AES key

    Returns:
        44 words of 4 bytes each; round i uses words [4i, 4i+4)
    """
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be 16 bytes, got {len(key)}")

    words = [list(key[i:i + 4]) for i in range(0, KEY_SIZE, 4)]

    for i in range(NK, NB * (NR + 1)):
        temp = words[i - 1][:]
        if i % NK == 0:
            temp = sub_word(rot_word(temp))
            temp[0] ^= RCON[i // NK - 1]
        words.append([words[i - NK][j] ^ temp[j] for j in range(4)])

    return words


def round_key(words: list[list[int]], round_num: int) -> list[list[int]]:
    """
    Build the round key state for a round from the key schedule.

    Word j of the round becomes column j of the state.
    """
    if not 0 <= round_num <= NR:
        raise ValueError(f"round_num must be 0..{NR}, got {round_num}")
    columns = words[round_num * NB:(round_num + 1) * NB]
    return [[columns[col][row] for col in range(4)] for row in range(4)]


def _check_inputs(block: bytes, words: list[list[int]]) -> None:
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"Block must be 16 bytes, got {len(block)}")
    if len(words) != NB * (NR + 1):
        raise ValueError(f"Key schedule must have 44 words, got {len(words)}")


def _trace(tracer: TraceRecorder | None, round_num: int, operation: str,
           state: list[list[int]]) -> None:
    if tracer is not None:
        tracer.record(round=round_num, operation=operation, state=copy_state(state))


# ──────────────────────────────────────────────────────────────────
# Cipher core
# ──────────────────────────────────────────────────────────────────

def encrypt_block(
    block: bytes,
    words: list[list[int]],
    tracer: TraceRecorder | None = None,
) -> bytes:
    """
    Encrypt exactly one 16-byte block with an expanded key.

    Args:
        block: 16-byte plaintext block
        words: 44-word key schedule from key_expansion()
        tracer: Optional recorder receiving the state after each transform

    Returns:
        16-byte ciphertext block
    """
    _check_inputs(block, words)

    state = bytes_to_state(block)
    _trace(tracer, 0, "Input", state)

    state = add_round_key(state, round_key(words, 0))
    _trace(tracer, 0, "AddRoundKey", state)

    for round_num in range(1, NR):
        state = sub_bytes(state)
        _trace(tracer, round_num, "SubBytes", state)
        state = shift_rows(state)
        _trace(tracer, round_num, "ShiftRows", state)
        state = mix_columns(state)
        _trace(tracer, round_num, "MixColumns", state)
        state = add_round_key(state, round_key(words, round_num))
        _trace(tracer, round_num, "AddRoundKey", state)

    # Final round: no MixColumns
    state = sub_bytes(state)
    _trace(tracer, NR, "SubBytes", state)
    state = shift_rows(state)
    _trace(tracer, NR, "ShiftRows", state)
    state = add_round_key(state, round_key(words, NR))
    _trace(tracer, NR, "AddRoundKey", state)

    return state_to_bytes(state)


def decrypt_block(
    block: bytes,
    words: list[list[int]],
    tracer: TraceRecorder | None = None,
) -> bytes:
    """
    Decrypt exactly one 16-byte block with an expanded key.

    Args:
        block: 16-byte ciphertext block
        words: 44-word key schedule from key_expansion()
        tracer: Optional recorder receiving the state after each transform

    Returns:
        16-byte plaintext block
    """
    _check_inputs(block, words)

    state = bytes_to_state(block)
    _trace(tracer, NR, "Input", state)

    state = add_round_key(state, round_key(words, NR))
    _trace(tracer, NR, "AddRoundKey", state)

    for round_num in range(NR - 1, 0, -1):
        state = inv_shift_rows(state)
        _trace(tracer, round_num, "InvShiftRows", state)
        state = inv_sub_bytes(state)
        _trace(tracer, round_num, "InvSubBytes", state)
        state = add_round_key(state, round_key(words, round_num))
        _trace(tracer, round_num, "AddRoundKey", state)
        state = inv_mix_columns(state)
        _trace(tracer, round_num, "InvMixColumns", state)

    state = inv_shift_rows(state)
    _trace(tracer, 0, "InvShiftRows", state)
    state = inv_sub_bytes(state)
    _trace(tracer, 0, "InvSubBytes", state)
    state = add_round_key(state, round_key(words, 0))
    _trace(tracer, 0, "AddRoundKey", state)

    return state_to_bytes(state)


def aes128_encrypt(key: bytes, block: bytes, tracer: TraceRecorder | None = None) -> bytes:
    """Expand key and encrypt a single block."""
    return encrypt_block(block, key_expansion(key), tracer)


def aes128_decrypt(key: bytes, block: bytes, tracer: TraceRecorder | None = None) -> bytes:
    """Expand key and decrypt a single block."""
    return decrypt_block(block, key_expansion(key), tracer)
