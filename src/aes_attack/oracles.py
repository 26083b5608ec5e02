"""Oracles closing over hidden keys and secrets.

Each builder returns plain callables; attacks only ever see their
input/output behaviour.
"""

from __future__ import annotations

from typing import Callable

from .interfaces import EncryptionOracle, DecryptionOracle, PaddingOracle
from .modes import ECB, CBC, CTR, ModeName, encrypt, decrypt
from .padding import is_valid_pkcs7, strip_pkcs7
from .profile import profile_for, parse_kv
from .randomness import RandomSource


BITFLIP_PREFIX = b"comment1=cooking%20MCs;userdata="
BITFLIP_SUFFIX = b";comment2=%20like%20a%20pound%20of%20bacon"
ADMIN_TOKEN = b";admin=true;"


def build_ecb_suffix_oracle(key: bytes, secret: bytes) -> EncryptionOracle:
    """AES-128-ECB(input || secret)."""
    def oracle(crafted_input: bytes) -> bytes:
        return encrypt(crafted_input + secret, key, ECB())

    return oracle


def build_prefixed_ecb_oracle(key: bytes, random_prefix: bytes, secret: bytes) -> EncryptionOracle:
    """AES-128-ECB(random_prefix || input || secret) with a fixed prefix."""
    def oracle(crafted_input: bytes) -> bytes:
        return encrypt(random_prefix + crafted_input + secret, key, ECB())

    return oracle


def build_random_mode_oracle(rng: RandomSource) -> tuple[EncryptionOracle, ModeName]:
    """Oracle that picks ECB or CBC once and pads input with 5-10 random
    bytes on each side per query.

    Returns:
        Tuple of (oracle, chosen mode)
    """
    key = rng.key()
    use_ecb = rng.randint(0, 1) == 0
    mode = ECB() if use_ecb else CBC(rng.iv())

    def oracle(crafted_input: bytes) -> bytes:
        before = rng.get_bytes(rng.randint(5, 10), "prefixes")
        after = rng.get_bytes(rng.randint(5, 10), "prefixes")
        return encrypt(before + crafted_input + after, key, mode)

    return oracle, mode.name


def build_profile_oracles(
    key: bytes,
) -> tuple[Callable[[str], bytes], Callable[[bytes], dict[str, str]]]:
    """ECB-encrypted profile cookies.

    Returns:
        Tuple of (encrypt_profile(email), decrypt_profile(ciphertext))
    """
    def encrypt_profile(email: str) -> bytes:
        return encrypt(profile_for(email).encode("latin-1"), key, ECB())

    def decrypt_profile(ciphertext: bytes) -> dict[str, str]:
        plaintext = strip_pkcs7(decrypt(ciphertext, key, ECB()))
        return parse_kv(plaintext.decode("latin-1"))

    return encrypt_profile, decrypt_profile


def escape_userdata(data: bytes) -> bytes:
    """Backslash-escape `;` and `=`."""
    escaped = bytearray()
    for byte in data:
        if byte in b";=":
            escaped.append(ord("\\"))
        escaped.append(byte)
    return bytes(escaped)


def build_cbc_bitflip_oracles(
    key: bytes, iv: bytes,
) -> tuple[EncryptionOracle, DecryptionOracle, Callable[[bytes], bool]]:
    """CBC cookie oracles for the bit-flipping scenario.

    Returns:
        Tuple of (encrypt(userdata), decrypt(ciphertext), is_admin(ciphertext))
    """
    mode = CBC(iv)

    def encrypt_userdata(userdata: bytes) -> bytes:
        return encrypt(BITFLIP_PREFIX + escape_userdata(userdata) + BITFLIP_SUFFIX, key, mode)

    def decrypt_cookie(ciphertext: bytes) -> bytes:
        return decrypt(ciphertext, key, mode)

    def is_admin(ciphertext: bytes) -> bool:
        return ADMIN_TOKEN in decrypt_cookie(ciphertext)

    return encrypt_userdata, decrypt_cookie, is_admin


def build_padding_oracle(key: bytes, iv: bytes) -> PaddingOracle:
    """Reports only whether a CBC ciphertext decrypts to valid padding."""
    mode = CBC(iv)

    def oracle(ciphertext: bytes) -> bool:
        if not ciphertext or len(ciphertext) % 16 != 0:
            return False
        return is_valid_pkcs7(decrypt(ciphertext, key, mode))

    return oracle


def encrypt_fixed_nonce_ctr(key: bytes, plaintexts: list[bytes], nonce: bytes = bytes(8)) -> list[bytes]:
    """Encrypt every plaintext under the same key and nonce."""
    mode = CTR(nonce)
    return [encrypt(p, key, mode) for p in plaintexts]
