"""Core interfaces and data structures for the attack framework."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from .human import ALPHABET

if TYPE_CHECKING:
    from .randomness import RandomSource
    from .trace import TraceRecorder


# Attacker-chosen plaintext -> ciphertext
EncryptionOracle = Callable[[bytes], bytes]
# Ciphertext -> plaintext (side channel standing in for a leak)
DecryptionOracle = Callable[[bytes], bytes]
# Ciphertext -> "padding OK"
PaddingOracle = Callable[[bytes], bool]
# Candidate plaintext bytes -> score (higher is more plausible)
Scorer = Callable[[bytes], float]


class OracleProtocolError(RuntimeError):
    """The oracle does not behave the way the attack assumes."""


class ModeMismatchError(OracleProtocolError):
    """The oracle encrypts under a different mode than the attack targets."""

    def __init__(self, expected: str, detected: str):
        super().__init__(f"Wrong block cipher mode: expected {expected}, detected {detected}")
        self.expected = expected
        self.detected = detected


@dataclass
class AttackConfig:
    """Tunable parameters shared by the oracle attacks."""

    # Byte used to fill attacker-controlled input
    placeholder_byte: int = ord("A")

    # Second fill byte, used to rule out coincidences with secret bytes
    alternate_byte: int = ord("B")

    # Block sizes tried when probing an oracle
    min_block_size: int = 8
    max_block_size: int = 64

    # Number of identical blocks sent when confirming ECB
    detection_blocks: int = 8

    # Stand-in for forbidden delimiters in CBC bit-flipping input
    flip_placeholder: int = 0xFF

    # Candidate bytes for byte-at-a-time decryption
    alphabet: bytes = ALPHABET

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        for name in ("placeholder_byte", "alternate_byte", "flip_placeholder"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"{name} must be a byte value, got {value}")
        if self.placeholder_byte == self.alternate_byte:
            raise ValueError("placeholder_byte and alternate_byte must differ")
        if not 1 <= self.min_block_size <= self.max_block_size:
            raise ValueError(
                f"Need 1 <= min_block_size <= max_block_size, got "
                f"{self.min_block_size}..{self.max_block_size}"
            )
        if self.detection_blocks < 2:
            raise ValueError(f"detection_blocks must be >= 2, got {self.detection_blocks}")
        if not self.alphabet:
            raise ValueError("alphabet must not be empty")


@dataclass
class AttackResult:
    """Outcome of an end-to-end attack scenario."""

    recovered: bytes
    expected: bytes
    correct: bool
    error_detail: str = ""

    # Oracle calls made by the attack
    queries: int = 0

    notes: list[str] = field(default_factory=list)

    def add_note(self, note: str) -> None:
        """Add an informational note."""
        self.notes.append(note)

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "recovered_hex": self.recovered.hex(),
            "expected_hex": self.expected.hex(),
            "recovered_text": self.recovered.decode("latin-1"),
            "correct": self.correct,
            "error_detail": self.error_detail,
            "queries": self.queries,
            "notes": self.notes,
        }


class BaseScenario(ABC):
    """Abstract base class for attack scenarios.

    A scenario hides a key (and whatever else the oracle closes over),
    runs one attack against the oracle and checks the outcome.
    """

    name: str = "base"
    description: str = "Base scenario (abstract)"

    def __init__(self, config: AttackConfig | None = None):
        self.config = config or AttackConfig()

    @abstractmethod
    def run(self, rng: "RandomSource", tracer: "TraceRecorder | None" = None) -> AttackResult:
        """Run the scenario.

        Args:
            rng: Random source for keys, IVs and secrets
            tracer: Optional trace recorder

        Returns:
            AttackResult with recovered bytes and query count
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
