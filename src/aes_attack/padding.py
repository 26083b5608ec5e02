"""PKCS#7 padding (RFC 5652 Sec. 6.3)."""

from __future__ import annotations

from enum import Enum


class PaddingValidity(Enum):
    """Outcome of validating PKCS#7 padding."""

    VALID = "valid"
    INVALID_LAST_BYTE = "invalid_last_byte"
    INCONSISTENT = "inconsistent"


class PaddingError(ValueError):
    """Raised by strip_pkcs7() when padding does not validate."""

    def __init__(self, validity: PaddingValidity):
        super().__init__(f"Invalid PKCS#7 padding: {validity.value}")
        self.validity = validity


def _check_block_size(block_size: int) -> None:
    if not 1 <= block_size <= 255:
        raise ValueError(f"block_size must be 1..255, got {block_size}")


def pkcs7_pad(data: bytes, block_size: int = 16) -> bytes:
    """Append n bytes of value n so len(result) is a multiple of block_size.

    A full block of padding is added when data is already aligned.
    """
    _check_block_size(block_size)
    pad_len = block_size - (len(data) % block_size)
    return data + bytes([pad_len]) * pad_len


def validate_pkcs7(data: bytes, block_size: int = 16) -> PaddingValidity:
    """Classify the padding at the end of data.

    Args:
        data: Decrypted bytes
        block_size: Cipher block size

    Returns:
        INVALID_LAST_BYTE if the last byte is 0, larger than block_size or
        longer than data; INCONSISTENT if the trailing bytes disagree with
        it; VALID otherwise.
    """
    _check_block_size(block_size)
    if not data:
        return PaddingValidity.INVALID_LAST_BYTE

    pad_len = data[-1]
    if pad_len == 0 or pad_len > block_size or pad_len > len(data):
        return PaddingValidity.INVALID_LAST_BYTE

    if any(b != pad_len for b in data[-pad_len:]):
        return PaddingValidity.INCONSISTENT

    return PaddingValidity.VALID


def is_valid_pkcs7(data: bytes, block_size: int = 16) -> bool:
    """Collapse validate_pkcs7() to a boolean."""
    return validate_pkcs7(data, block_size) is PaddingValidity.VALID


def strip_pkcs7(data: bytes, block_size: int = 16) -> bytes:
    """Validate and remove PKCS#7 padding.

    Raises:
        PaddingError: If the padding is not valid
    """
    validity = validate_pkcs7(data, block_size)
    if validity is not PaddingValidity.VALID:
        raise PaddingError(validity)
    return data[:-data[-1]]
