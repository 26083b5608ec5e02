"""Tests for PKCS#7 padding."""

import pytest

from aes_attack.padding import (
    PaddingError,
    PaddingValidity,
    pkcs7_pad,
    validate_pkcs7,
    is_valid_pkcs7,
    strip_pkcs7,
)


class TestPad:
    """pkcs7_pad."""

    def test_pad_to_twenty(self) -> None:
        assert pkcs7_pad(b"YELLOW SUBMARINE", 20) == b"YELLOW SUBMARINE\x04\x04\x04\x04"

    def test_aligned_input_gets_full_block(self) -> None:
        assert pkcs7_pad(b"YELLOW SUBMARINE", 16) == b"YELLOW SUBMARINE" + b"\x10" * 16

    def test_empty_input(self) -> None:
        assert pkcs7_pad(b"") == b"\x10" * 16

    @pytest.mark.parametrize("length", range(0, 40))
    def test_result_is_aligned(self, length: int) -> None:
        padded = pkcs7_pad(bytes(length))
        assert len(padded) % 16 == 0
        assert len(padded) > length

    @pytest.mark.parametrize("block_size", [0, 256, -1])
    def test_invalid_block_size(self, block_size: int) -> None:
        with pytest.raises(ValueError):
            pkcs7_pad(b"abc", block_size)


class TestValidate:
    """Three-way classification."""

    def test_valid(self) -> None:
        assert validate_pkcs7(b"ICE ICE BABY\x04\x04\x04\x04") is PaddingValidity.VALID

    def test_inconsistent_value(self) -> None:
        assert validate_pkcs7(b"ICE ICE BABY\x05\x05\x05\x05") is PaddingValidity.INCONSISTENT

    def test_inconsistent_sequence(self) -> None:
        assert validate_pkcs7(b"ICE ICE BABY\x01\x02\x03\x04") is PaddingValidity.INCONSISTENT

    def test_zero_last_byte(self) -> None:
        assert validate_pkcs7(b"ICE ICE BABY\x00\x00\x00\x00") is PaddingValidity.INVALID_LAST_BYTE

    def test_last_byte_above_block_size(self) -> None:
        assert validate_pkcs7(b"A" * 15 + b"\x11") is PaddingValidity.INVALID_LAST_BYTE

    def test_last_byte_longer_than_data(self) -> None:
        assert validate_pkcs7(b"\x05\x05") is PaddingValidity.INVALID_LAST_BYTE

    def test_empty(self) -> None:
        assert validate_pkcs7(b"") is PaddingValidity.INVALID_LAST_BYTE

    def test_full_padding_block(self) -> None:
        assert is_valid_pkcs7(b"\x10" * 16)

    def test_boolean_collapses_both_invalid_classes(self) -> None:
        assert not is_valid_pkcs7(b"ICE ICE BABY\x05\x05\x05\x05")
        assert not is_valid_pkcs7(b"ICE ICE BABY\x00")


class TestStrip:
    """strip_pkcs7."""

    def test_strip_valid(self) -> None:
        assert strip_pkcs7(b"ICE ICE BABY\x04\x04\x04\x04") == b"ICE ICE BABY"

    def test_strip_round_trip(self) -> None:
        for length in range(33):
            data = bytes(range(length))
            assert strip_pkcs7(pkcs7_pad(data)) == data

    def test_strip_inconsistent_raises(self) -> None:
        with pytest.raises(PaddingError) as excinfo:
            strip_pkcs7(b"ICE ICE BABY\x01\x02\x03\x04")
        assert excinfo.value.validity is PaddingValidity.INCONSISTENT

    def test_padding_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            strip_pkcs7(b"ICE ICE BABY\x00")
