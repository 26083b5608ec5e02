"""Oracle attacks against misused block cipher modes."""

from .ecb import (
    detect_block_cipher_mode,
    detect_block_size,
    confirm_oracle_mode,
    byte_at_a_time_ecb_decrypt,
    byte_at_a_time_ecb_decrypt_with_prefix,
    ecb_cut_and_paste,
)
from .cbc import cbc_bitflip, cbc_padding_oracle_attack, strip_recovered_padding
from .ctr import recover_fixed_nonce_keystream, break_fixed_nonce_ctr

__all__ = [
    "detect_block_cipher_mode",
    "detect_block_size",
    "confirm_oracle_mode",
    "byte_at_a_time_ecb_decrypt",
    "byte_at_a_time_ecb_decrypt_with_prefix",
    "ecb_cut_and_paste",
    "cbc_bitflip",
    "cbc_padding_oracle_attack",
    "strip_recovered_padding",
    "recover_fixed_nonce_keystream",
    "break_fixed_nonce_ctr",
]
