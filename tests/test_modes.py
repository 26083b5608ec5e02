"""Tests for the ECB/CBC/CTR mode engine."""

import random

import pytest

from aes_attack.golden import golden_encrypt_mode
from aes_attack.modes import (
    ECB,
    CBC,
    CTR,
    ModeName,
    Padding,
    counter_block,
    encrypt,
    decrypt,
    parse_mode,
)
from aes_attack.padding import strip_pkcs7


def random_bytes(n: int, rng: random.Random) -> bytes:
    """Generate n random bytes."""
    return bytes(rng.randint(0, 255) for _ in range(n))


def make_mode(name: str, rng: random.Random):
    if name == "ecb":
        return ECB()
    if name == "cbc":
        return CBC(random_bytes(16, rng))
    return CTR(random_bytes(8, rng))


class TestModeTags:
    """Mode parameters and parsing."""

    def test_names(self) -> None:
        assert ECB().name is ModeName.ECB
        assert CBC(bytes(16)).name is ModeName.CBC
        assert CTR(bytes(8)).name is ModeName.CTR

    def test_bad_iv_length(self) -> None:
        with pytest.raises(ValueError, match="IV must be 16 bytes"):
            CBC(bytes(15))

    def test_bad_nonce_length(self) -> None:
        with pytest.raises(ValueError, match="Nonce must be 8 bytes"):
            CTR(bytes(16))

    def test_parse_mode(self) -> None:
        assert parse_mode("ECB") == ECB()
        assert parse_mode("cbc", iv=bytes(16)) == CBC(bytes(16))
        assert parse_mode("ctr", nonce=bytes(8)) == CTR(bytes(8))

    def test_parse_mode_missing_parameter(self) -> None:
        with pytest.raises(ValueError, match="requires an IV"):
            parse_mode("cbc")
        with pytest.raises(ValueError, match="requires a nonce"):
            parse_mode("ctr")

    def test_parse_mode_unknown(self) -> None:
        with pytest.raises(ValueError):
            parse_mode("xts")

    def test_counter_block_big_endian(self) -> None:
        assert counter_block(b"N" * 8, 1) == b"N" * 8 + bytes(7) + b"\x01"
        assert counter_block(b"N" * 8, 256) == b"N" * 8 + bytes(6) + b"\x01\x00"


class TestRoundTrip:
    """decrypt(encrypt(p)) gives p back (after stripping padding)."""

    @pytest.mark.parametrize("mode_name", ["ecb", "cbc", "ctr"])
    @pytest.mark.parametrize("length", [0, 1, 15, 16, 17, 47])
    def test_round_trip(self, mode_name: str, length: int) -> None:
        rng = random.Random(length)
        key = random_bytes(16, rng)
        mode = make_mode(mode_name, rng)
        plaintext = random_bytes(length, rng)

        recovered = decrypt(encrypt(plaintext, key, mode), key, mode)
        if mode_name != "ctr":
            recovered = strip_pkcs7(recovered)
        assert recovered == plaintext

    def test_ctr_preserves_length(self) -> None:
        ct = encrypt(b"x" * 21, bytes(16), CTR(bytes(8)))
        assert len(ct) == 21

    def test_decrypt_keeps_padding(self) -> None:
        key = bytes(16)
        pt = decrypt(encrypt(b"hello", key, ECB()), key, ECB())
        assert pt == b"hello" + b"\x0b" * 11


class TestAgainstLibrary:
    """Ciphertexts match PyCryptodome."""

    @pytest.mark.parametrize("mode_name", ["ecb", "cbc", "ctr"])
    @pytest.mark.parametrize("seed", range(4))
    def test_matches_pycryptodome(self, mode_name: str, seed: int) -> None:
        rng = random.Random(seed)
        key = random_bytes(16, rng)
        mode = make_mode(mode_name, rng)
        plaintext = random_bytes(rng.randint(0, 70), rng)

        assert encrypt(plaintext, key, mode) == golden_encrypt_mode(plaintext, key, mode)

    def test_no_padding_matches(self) -> None:
        rng = random.Random(99)
        key = random_bytes(16, rng)
        mode = CBC(random_bytes(16, rng))
        plaintext = random_bytes(48, rng)
        assert encrypt(plaintext, key, mode, Padding.NONE) == golden_encrypt_mode(
            plaintext, key, mode, Padding.NONE
        )


class TestModeProperties:
    """Behaviour the attacks rely on."""

    def test_ecb_repeats_blocks(self) -> None:
        ct = encrypt(b"A" * 32, bytes(16), ECB(), Padding.NONE)
        assert ct[:16] == ct[16:32]

    def test_cbc_hides_repeats(self) -> None:
        ct = encrypt(b"A" * 32, bytes(16), CBC(bytes(16)), Padding.NONE)
        assert ct[:16] != ct[16:32]

    def test_cbc_iv_changes_ciphertext(self) -> None:
        a = encrypt(b"same", bytes(16), CBC(bytes(16)))
        b = encrypt(b"same", bytes(16), CBC(b"\x01" + bytes(15)))
        assert a != b


class TestModeErrors:
    """Structural errors raise ValueError."""

    def test_unaligned_without_padding(self) -> None:
        with pytest.raises(ValueError, match="multiple of 16"):
            encrypt(b"abc", bytes(16), ECB(), Padding.NONE)

    @pytest.mark.parametrize("mode", [ECB(), CBC(bytes(16))])
    def test_unaligned_ciphertext(self, mode) -> None:
        with pytest.raises(ValueError, match="multiple of 16"):
            decrypt(bytes(17), bytes(16), mode)

    def test_bad_key(self) -> None:
        with pytest.raises(ValueError, match="Key must be 16 bytes"):
            encrypt(b"abc", bytes(24), ECB())
