"""
Utility functions for byte/state conversions, hex formatting and block handling.

AES state is 4x4 bytes in column-major order:
  state[row][col] where row, col in [0..3]

Column-major mapping from 16-byte array:
  byte[0]  -> state[0][0]
  byte[1]  -> state[1][0]
  byte[2]  -> state[2][0]
  byte[3]  -> state[3][0]
  byte[4]  -> state[0][1]
  ...
  byte[15] -> state[3][3]
"""

import base64
from pathlib import Path


def bytes_to_state(data: bytes) -> list[list[int]]:
    """
    Convert 16 bytes to 4x4 AES state (column-major).

    Args:
        data: 16 bytes of input

    Returns:
        4x4 list of integers (0-255)
    """
    if len(data) != 16:
        raise ValueError(f"Expected 16 bytes, got {len(data)}")

    state = [[0 for _ in range(4)] for _ in range(4)]
    for col in range(4):
        for row in range(4):
            state[row][col] = data[col * 4 + row]
    return state


def state_to_bytes(state: list[list[int]]) -> bytes:
    """
    Convert 4x4 AES state to 16 bytes (column-major).
    """
    result = []
    for col in range(4):
        for row in range(4):
            result.append(state[row][col])
    return bytes(result)


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert hex string to bytes.
    """
    return bytes.fromhex(hex_str)


def bytes_to_hex(data: bytes) -> str:
    """
    Convert bytes to lowercase hex string.
    """
    return data.hex()


def state_to_hex(state: list[list[int]]) -> str:
    """
    Convert state to hex string (via bytes).
    """
    return bytes_to_hex(state_to_bytes(state))


def format_state_grid(state: list[list[int]]) -> str:
    """
    Format state as a readable 4x4 grid.

    Returns multi-line string like:
      2b 28 ab 09
      7e ae f7 cf
      15 d2 15 4f
      16 a6 88 3c
    """
    lines = []
    for row in range(4):
        row_hex = [f"{state[row][col]:02x}" for col in range(4)]
        lines.append("  " + " ".join(row_hex))
    return "\n".join(lines)


def copy_state(state: list[list[int]]) -> list[list[int]]:
    """
    Deep copy a 4x4 state.
    """
    return [[state[row][col] for col in range(4)] for row in range(4)]


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """
    XOR two byte sequences of equal length.
    """
    if len(a) != len(b):
        raise ValueError(f"Length mismatch: {len(a)} vs {len(b)}")
    return bytes(x ^ y for x, y in zip(a, b))


def split_blocks(data: bytes, block_size: int = 16) -> list[bytes]:
    """
    Split data into consecutive chunks of block_size bytes.

    The final chunk is shorter when len(data) is not a multiple of
    block_size.
    """
    if block_size <= 0:
        raise ValueError(f"block_size must be positive, got {block_size}")
    return [data[i:i + block_size] for i in range(0, len(data), block_size)]


def get_block(data: bytes, index: int, block_size: int = 16) -> bytes:
    """
    Return block number `index` of data (may be short or empty past the end).
    """
    return data[index * block_size:(index + 1) * block_size]


def b64_to_bytes(text: str) -> bytes:
    """
    Decode a base64 string.
    """
    return base64.b64decode(text)


def bytes_to_b64(data: bytes) -> str:
    """
    Encode bytes as a base64 string.
    """
    return base64.b64encode(data).decode("ascii")


def load_base64_lines(path: str | Path) -> list[bytes]:
    """
    Load a file holding one base64 value per line.

    Blank lines are skipped.
    """
    with open(path, "r") as f:
        return [b64_to_bytes(line.strip()) for line in f if line.strip()]
