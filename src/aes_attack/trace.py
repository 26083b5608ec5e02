"""
Trace recording and pretty printing for cipher runs and attacks.

Contains:
- TraceRecorder: in-memory records, JSON Lines file output, compact verbose stdout
- print_header / print_subheader / print_result: shared formatting helpers
"""

import json
from typing import Any, TextIO

from .utils import state_to_hex


def _preview(data: bytes, limit: int = 48) -> str:
    """Printable preview of recovered bytes."""
    text = data.decode("latin-1")
    shown = "".join(c if c.isprintable() else "." for c in text[:limit])
    if len(data) > limit:
        shown += f"... (+{len(data) - limit} bytes)"
    return shown


class TraceRecorder:
    """
    Records and outputs traces of cipher rounds and attack progress.

    Supports:
    - JSON Lines file output  (when trace_file is set)
    - Compact verbose stdout  (when verbose is set)

    Cipher records carry round/operation/state; attack records carry
    attack/event plus event-specific fields.
    """

    def __init__(self, verbose: bool = False, trace_file: TextIO | None = None):
        self.verbose = verbose
        self.trace_file = trace_file
        self._records: list[dict[str, Any]] = []

    def record(self, **kwargs) -> None:
        """
        Record a trace entry.
        """
        self._records.append(kwargs)

        if self.trace_file:
            self._write_jsonl(kwargs)

        if self.verbose:
            self._print_verbose(kwargs)

    def event(self, attack: str, event: str, **fields) -> None:
        """Record an attack event."""
        self.record(attack=attack, event=event, **fields)

    def _write_jsonl(self, record: dict[str, Any]) -> None:
        serializable = self._make_serializable(record)
        self.trace_file.write(json.dumps(serializable) + "\n")
        self.trace_file.flush()

    def _make_serializable(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            return {k: self._make_serializable(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._make_serializable(item) for item in obj]
        elif isinstance(obj, (bytes, bytearray)):
            return bytes(obj).hex()
        else:
            return obj

    def _print_verbose(self, record: dict[str, Any]) -> None:
        if "state" in record:
            round_num = record.get("round", "?")
            operation = record.get("operation", "unknown")
            print(f"R{round_num:<2} {operation:16s} STATE:{state_to_hex(record['state'])}")
            return

        attack = record.get("attack", "?")
        event = record.get("event", "?")
        details = []
        for k, v in record.items():
            if k in ("attack", "event"):
                continue
            if isinstance(v, (bytes, bytearray)):
                v = _preview(bytes(v))
            details.append(f"{k}={v}")
        print(f"[{attack}] {event:18s} {' '.join(details)}")

    def events(self, event: str | None = None) -> list[dict[str, Any]]:
        """Attack records, optionally filtered by event name."""
        return [
            r for r in self._records
            if "event" in r and (event is None or r["event"] == event)
        ]

    def get_records(self) -> list[dict[str, Any]]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()


# ------------------------------------------------------------------
# Shared formatting functions
# ------------------------------------------------------------------

def print_header(title: str) -> None:
    """Print a section header."""
    print(f"\n{'#'*70}")
    print(f"# {title}")
    print(f"{'#'*70}")


def print_subheader(title: str) -> None:
    """Print a subsection header."""
    print(f"\n{'-'*50}")
    print(f"  {title}")
    print(f"{'-'*50}")


def print_result(recovered: bytes, queries: int, passed: bool = True,
                 detail: str = "") -> None:
    """Print final attack result."""
    print(f"\n{'='*70}")
    print("RESULT")
    print(f"{'='*70}")
    print(f"Recovered: {_preview(recovered, limit=200)}")
    print(f"Recovered (hex): {recovered.hex()}")
    print(f"Oracle queries: {queries}")
    if detail:
        print(f"Detail: {detail}")

    status = "PASS" if passed else "FAIL"
    marker = "[OK]" if passed else "[ERROR]"
    print(f"Verification: {marker} {status}")
    print(f"{'='*70}")
