"""Golden reference AES implementation using PyCryptodome."""

from __future__ import annotations

from Crypto.Cipher import AES
from Crypto.Util.Padding import pad

from .modes import Mode, ECB, CBC, CTR, Padding


def golden_encrypt(key: bytes, plaintext: bytes) -> bytes:
    """Encrypt a single block using PyCryptodome as golden reference.

    Args:
        key: 16-byte AES-128 key
        plaintext: 16-byte plaintext block

    Returns:
        16-byte ciphertext block

    Raises:
        ValueError: If key or plaintext is not 16 bytes
    """
    if len(key) != 16:
        raise ValueError(f"Key must be 16 bytes, got {len(key)}")
    if len(plaintext) != 16:
        raise ValueError(f"Plaintext must be 16 bytes, got {len(plaintext)}")

    cipher = AES.new(key, AES.MODE_ECB)
    return cipher.encrypt(plaintext)


def golden_decrypt(key: bytes, ciphertext: bytes) -> bytes:
    """Decrypt a single block using PyCryptodome."""
    if len(key) != 16:
        raise ValueError(f"Key must be 16 bytes, got {len(key)}")
    if len(ciphertext) != 16:
        raise ValueError(f"Ciphertext must be 16 bytes, got {len(ciphertext)}")

    cipher = AES.new(key, AES.MODE_ECB)
    return cipher.decrypt(ciphertext)


def golden_encrypt_mode(
    plaintext: bytes,
    key: bytes,
    mode: Mode,
    padding: Padding = Padding.PKCS7,
) -> bytes:
    """Encrypt with PyCryptodome using the same mode/padding conventions
    as aes_attack.modes.encrypt().

    CTR uses the 8-byte nonce followed by a 64-bit big-endian counter
    starting at zero.
    """
    if isinstance(mode, CTR):
        cipher = AES.new(key, AES.MODE_CTR, nonce=mode.nonce, initial_value=0)
        return cipher.encrypt(plaintext)

    if padding is Padding.PKCS7:
        plaintext = pad(plaintext, 16, style="pkcs7")

    if isinstance(mode, ECB):
        return AES.new(key, AES.MODE_ECB).encrypt(plaintext)
    if isinstance(mode, CBC):
        return AES.new(key, AES.MODE_CBC, iv=mode.iv).encrypt(plaintext)

    raise ValueError(f"Unsupported mode: {mode!r}")


def validate_against_golden(
    key: bytes, block: bytes, candidate: bytes, decrypt: bool = False
) -> tuple[bool, str]:
    """Compare one block of cipher output with PyCryptodome.

    Args:
        key: 16-byte AES-128 key
        block: 16-byte input block
        candidate: Output produced for `block`
        decrypt: Check a decryption instead of an encryption

    Returns:
        Tuple of (is_correct, error_detail)
    """
    expected = golden_decrypt(key, block) if decrypt else golden_encrypt(key, block)
    if candidate == expected:
        return True, ""
    direction = "Plaintext" if decrypt else "Ciphertext"
    return False, f"{direction} mismatch: expected {expected.hex()}, got {candidate.hex()}"


# FIPS-197 Test Vectors for AES-128
FIPS_197_TEST_VECTORS = [
    # Appendix B - cipher example
    {
        "key": bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c"),
        "plaintext": bytes.fromhex("3243f6a8885a308d313198a2e0370734"),
        "ciphertext": bytes.fromhex("3925841d02dc09fbdc118597196a0b32"),
    },
    # Appendix C.1 - AES-128
    {
        "key": bytes.fromhex("000102030405060708090a0b0c0d0e0f"),
        "plaintext": bytes.fromhex("00112233445566778899aabbccddeeff"),
        "ciphertext": bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a"),
    },
    # Additional test vectors from NIST
    {
        "key": bytes.fromhex("00000000000000000000000000000000"),
        "plaintext": bytes.fromhex("00000000000000000000000000000000"),
        "ciphertext": bytes.fromhex("66e94bd4ef8a2c3b884cfa59ca342b2e"),
    },
    {
        "key": bytes.fromhex("00000000000000000000000000000000"),
        "plaintext": bytes.fromhex("f34481ec3cc627bacd5dc3fb08f273e6"),
        "ciphertext": bytes.fromhex("0336763e966d92595a567cc9ce537f5e"),
    },
    {
        "key": bytes.fromhex("00000000000000000000000000000000"),
        "plaintext": bytes.fromhex("9798c4640bad75c7c3227db910174e72"),
        "ciphertext": bytes.fromhex("a9a1631bf4996954ebc093957b234589"),
    },
    {
        "key": bytes.fromhex("ffffffffffffffffffffffffffffffff"),
        "plaintext": bytes.fromhex("00000000000000000000000000000000"),
        "ciphertext": bytes.fromhex("a1f6258c877d5fcd8964484538bfc92c"),
    },
    {
        "key": bytes.fromhex("ffffffffffffffffffffffffffffffff"),
        "plaintext": bytes.fromhex("ffffffffffffffffffffffffffffffff"),
        "ciphertext": bytes.fromhex("bcbf217cb280cf30b2517052193ab979"),
    },
]
