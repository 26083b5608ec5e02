"""
Arithmetic in GF(2^8) modulo the AES polynomial x^8 + x^4 + x^3 + x + 1.
"""

# Irreducible polynomial, including the x^8 term
AES_POLYNOMIAL = 0x11B


def xtime(a: int) -> int:
    """Multiply by x ({02}) in GF(2^8)."""
    a <<= 1
    if a & 0x100:
        a ^= AES_POLYNOMIAL
    return a & 0xFF


def gf_mul(a: int, b: int) -> int:
    """
    Multiply two bytes in GF(2^8).

    Carry-less double-and-reduce: for each of the 8 bits of b, accumulate
    a when the bit is set, then double a (reducing on overflow).

    Args:
        a: First operand (0-255)
        b: Second operand (0-255)

    Returns:
        Product (0-255)
    """
    product = 0
    for _ in range(8):
        if b & 1:
            product ^= a
        a = xtime(a)
        b >>= 1
    return product
