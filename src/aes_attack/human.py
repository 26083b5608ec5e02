"""Heuristic scoring of how much a byte string resembles human text."""

# Characters expected in English prose and simple markup
ALPHABET = (
    b"\n\r\t"
    b" !\"$%&'(),-./=@"
    b"0123456789"
    b":;?"
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    b"\\"
    b"abcdefghijklmnopqrstuvwxyz"
)

_ALPHABET_SET = frozenset(ALPHABET)


def human_resemblance_score(data: bytes) -> float:
    """Fraction of bytes drawn from ALPHABET (0.0 for empty input)."""
    if not data:
        return 0.0
    human_count = sum(1 for b in data if b in _ALPHABET_SET)
    return human_count / len(data)


def is_human(data: bytes) -> bool:
    """True when every byte is in ALPHABET."""
    return bool(data) and all(b in _ALPHABET_SET for b in data)


# Relative frequency (%) of letters in English text, plus space
ENGLISH_FREQUENCIES = {
    "a": 8.2, "b": 1.5, "c": 2.8, "d": 4.3, "e": 12.7, "f": 2.2, "g": 2.0,
    "h": 6.1, "i": 7.0, "j": 0.15, "k": 0.77, "l": 4.0, "m": 2.4, "n": 6.7,
    "o": 7.5, "p": 1.9, "q": 0.095, "r": 6.0, "s": 6.3, "t": 9.1, "u": 2.8,
    "v": 0.98, "w": 2.4, "x": 0.15, "y": 2.0, "z": 0.074, " ": 13.0,
}

_PUNCTUATION_WEIGHT = 1.0
_PUNCTUATION = frozenset(b".,'!?")

_BYTE_WEIGHTS = [0.0] * 256
for _char, _freq in ENGLISH_FREQUENCIES.items():
    _BYTE_WEIGHTS[ord(_char)] = _freq
    _BYTE_WEIGHTS[ord(_char.upper())] = _freq
for _b in _PUNCTUATION:
    _BYTE_WEIGHTS[_b] = _PUNCTUATION_WEIGHT


def english_frequency_score(data: bytes) -> float:
    """Mean English frequency weight per byte (0.0 for empty input).

    Letters are weighted case-insensitively, so a string and its
    case-swapped twin score the same.
    """
    if not data:
        return 0.0
    return sum(_BYTE_WEIGHTS[b] for b in data) / len(data)
