"""Toy user-profile encoding in `k=v&k=v` form."""

from __future__ import annotations

FORBIDDEN_CHARACTERS = "&="
DEFAULT_UID = 10
DEFAULT_ROLE = "user"


def profile_for(email: str) -> str:
    """Encode a profile for an email address.

    Raises:
        ValueError: If the email contains a metacharacter
    """
    for character in email:
        if character in FORBIDDEN_CHARACTERS:
            raise ValueError(f"Illegal character {character!r} in email")
    return encode_kv({"email": email, "uid": str(DEFAULT_UID), "role": DEFAULT_ROLE})


def encode_kv(fields: dict[str, str]) -> str:
    """Encode fields in insertion order."""
    return "&".join(f"{k}={v}" for k, v in fields.items())


def parse_kv(text: str) -> dict[str, str]:
    """Parse `k=v&k=v`. Pairs without `=` map to an empty value."""
    result: dict[str, str] = {}
    for pair in text.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        result[key] = value
    return result
