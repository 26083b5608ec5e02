"""
AES-128 from first principles, its modes of operation, and classic
oracle attacks against misused ECB, CBC and CTR.
"""

__version__ = "0.1.0"

# Default AES-128 test values from FIPS-197 Appendix B
DEFAULT_KEY_HEX = "2b7e151628aed2a6abf7158809cf4f3c"
DEFAULT_PT_HEX = "3243f6a8885a308d313198a2e0370734"
DEFAULT_CT_HEX = "3925841d02dc09fbdc118597196a0b32"
