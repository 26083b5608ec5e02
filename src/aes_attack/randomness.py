"""Random source for keys, IVs, nonces and oracle secrets, with accounting."""

from __future__ import annotations

import secrets
from typing import Any, Sequence, TypeVar

T = TypeVar("T")

CATEGORIES = ("keys", "ivs", "nonces", "prefixes", "plaintexts", "other")


class RandomSource:
    """Random source with tracking of bytes drawn per category.

    Uses secrets when unseeded; a seeded PRNG gives reproducible scenarios.
    """

    def __init__(self, seed: int | None = None):
        """Initialize random source.

        Args:
            seed: Optional seed for deterministic randomness
        """
        self._seed = seed
        self._rng = self._create_rng(seed)
        self._bytes_used: dict[str, int] = {}
        self.reset()

    def _create_rng(self, seed: int | None) -> Any:
        if seed is None:
            return None  # Use secrets
        return _SeededRNG(seed)

    def reset(self) -> None:
        """Reset usage counters (and the seeded stream)."""
        self._bytes_used = {k: 0 for k in CATEGORIES}
        if self._seed is not None:
            self._rng = self._create_rng(self._seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    @property
    def total_bytes(self) -> int:
        """Total random bytes drawn."""
        return sum(self._bytes_used.values())

    @property
    def bytes_breakdown(self) -> dict[str, int]:
        """Get bytes breakdown by category."""
        return self._bytes_used.copy()

    def get_bytes(self, count: int, category: str = "other") -> bytes:
        """Get random bytes and track usage.

        Args:
            count: Number of bytes to generate
            category: Category for tracking

        Returns:
            Random bytes
        """
        if category not in self._bytes_used:
            category = "other"
        self._bytes_used[category] += count

        if self._rng is None:
            return secrets.token_bytes(count)
        return self._rng.get_bytes(count)

    def randint(self, low: int, high: int) -> int:
        """Random integer in [low, high]."""
        if high < low:
            raise ValueError(f"Empty range {low}..{high}")
        span = high - low + 1
        if self._rng is None:
            return low + secrets.randbelow(span)
        return low + self._rng.below(span)

    def choice(self, seq: Sequence[T]) -> T:
        """Pick one element of a non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence")
        return seq[self.randint(0, len(seq) - 1)]

    def key(self) -> bytes:
        """Fresh 16-byte AES key."""
        return self.get_bytes(16, "keys")

    def iv(self) -> bytes:
        """Fresh 16-byte CBC IV."""
        return self.get_bytes(16, "ivs")

    def nonce(self) -> bytes:
        """Fresh 8-byte CTR nonce."""
        return self.get_bytes(8, "nonces")

    def get_summary(self) -> dict[str, Any]:
        """Get summary of randomness usage."""
        return {
            "seed": self._seed,
            "total_bytes": self.total_bytes,
            "bytes_breakdown": self.bytes_breakdown,
        }


class _SeededRNG:
    """Simple seeded PRNG for reproducibility.

    64-bit linear congruential generator; outputs are taken from the high
    bits since the low bits of a power-of-two LCG have short periods.
    NOT cryptographically secure - for testing/reproducibility only.
    """

    def __init__(self, seed: int):
        self._state = seed & 0xFFFFFFFFFFFFFFFF
        self._a = 6364136223846793005
        self._c = 1442695040888963407
        self._m = 2**64

    def _next(self) -> int:
        self._state = (self._a * self._state + self._c) % self._m
        return self._state

    def get_bytes(self, count: int) -> bytes:
        result = bytearray(count)
        for i in range(count):
            result[i] = self._next() >> 56
        return bytes(result)

    def below(self, n: int) -> int:
        """Integer in [0, n) from the top 32 bits."""
        return ((self._next() >> 32) * n) >> 32
