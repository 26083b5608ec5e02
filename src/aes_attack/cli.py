"""Command-line interface for the AES attack lab."""

from __future__ import annotations

import json
import sys
from typing import TextIO

import click

from . import DEFAULT_KEY_HEX, DEFAULT_PT_HEX, __version__
from .aes_core import aes128_encrypt, aes128_decrypt
from .golden import validate_against_golden, FIPS_197_TEST_VECTORS
from .interfaces import OracleProtocolError
from .modes import Padding, encrypt, decrypt, parse_mode
from .padding import PaddingError, strip_pkcs7
from .randomness import RandomSource
from .scenarios import get_scenario, list_scenarios
from .trace import TraceRecorder, print_header, print_subheader, print_result
from .utils import hex_to_bytes, bytes_to_hex, load_base64_lines


# Scenarios whose hidden plaintexts can be replaced with --corpus
CORPUS_SCENARIOS = ("cbc_padding_oracle", "ctr_fixed_nonce")


def _parse_hex(value: str | None, what: str, length: int | None = None) -> bytes | None:
    """Parse a hex option, exiting with an error message on bad input."""
    if value is None:
        return None
    try:
        data = hex_to_bytes(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {what} hex: {e}", err=True)
        sys.exit(1)
    if length is not None and len(data) != length:
        click.echo(
            f"Error: {what} must be {length * 2} hex chars ({length} bytes), got {len(value)} chars",
            err=True,
        )
        sys.exit(1)
    return data


def _open_trace(path: str | None) -> TextIO | None:
    if not path:
        return None
    try:
        return open(path, "w")
    except OSError as e:
        click.echo(f"Error: Cannot open trace file: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="aes-attack")
def main() -> None:
    """AES-128 Attack Lab.

    A from-scratch AES-128 with ECB/CBC/CTR modes, and the oracle
    attacks that break each mode when it is misused.
    """
    pass


@main.command(name="list")
def list_cmd() -> None:
    """List available attack scenarios."""
    click.echo("Available scenarios:")
    click.echo("")
    for scenario in list_scenarios():
        click.echo(f"  {scenario['name']}")
        click.echo(f"    {scenario['description']}")
        click.echo("")


@main.command()
@click.option("--verbose", "-v", is_flag=True, help="Show every vector")
def vectors(verbose: bool) -> None:
    """Check the cipher core against FIPS-197 and PyCryptodome."""
    failed = 0
    for i, vec in enumerate(FIPS_197_TEST_VECTORS):
        ciphertext = aes128_encrypt(vec["key"], vec["plaintext"])
        plaintext = aes128_decrypt(vec["key"], vec["ciphertext"])
        checks = [
            validate_against_golden(vec["key"], vec["plaintext"], ciphertext),
            validate_against_golden(vec["key"], vec["ciphertext"], plaintext, decrypt=True),
        ]
        errors = [error for ok, error in checks if not ok]
        if ciphertext != vec["ciphertext"]:
            errors.append(f"expected {bytes_to_hex(vec['ciphertext'])}, got {bytes_to_hex(ciphertext)}")
        if not errors:
            if verbose:
                click.echo(f"  Vector {i+1}: PASS  {bytes_to_hex(ciphertext)}")
        else:
            failed += 1
            click.echo(f"  Vector {i+1}: FAIL  {'; '.join(errors)}")

    total = len(FIPS_197_TEST_VECTORS)
    click.echo(f"FIPS-197 vectors: {total - failed}/{total} passed")
    sys.exit(1 if failed else 0)


@main.command()
@click.option("--key", type=str, default=DEFAULT_KEY_HEX, help="Key (32 hex chars, default: FIPS-197)")
@click.option("--pt", "block_hex", type=str, default=DEFAULT_PT_HEX, help="Input block (32 hex chars)")
@click.option("--decrypt", "do_decrypt", is_flag=True, help="Decrypt the block instead")
@click.option("--verbose", "-v", is_flag=True, help="Print the state after every transform")
@click.option("--trace", "trace_path", type=click.Path(), default=None, help="Write JSONL trace to FILE")
def block(key: str, block_hex: str, do_decrypt: bool, verbose: bool, trace_path: str | None) -> None:
    """Encrypt or decrypt a single block with a per-transform trace."""
    key_bytes = _parse_hex(key, "Key", 16)
    data = _parse_hex(block_hex, "Block", 16)

    direction = "Decryption" if do_decrypt else "Encryption"
    print_header(f"AES-128 {direction}")
    click.echo(f"Key:   {key}")
    click.echo(f"Input: {block_hex}")

    trace_file = _open_trace(trace_path)
    tracer = TraceRecorder(verbose=verbose, trace_file=trace_file)
    try:
        if do_decrypt:
            output = aes128_decrypt(key_bytes, data, tracer)
        else:
            output = aes128_encrypt(key_bytes, data, tracer)
    finally:
        if trace_file:
            trace_file.close()

    click.echo(f"\nOutput:    {bytes_to_hex(output)}")
    ok, error = validate_against_golden(key_bytes, data, output, decrypt=do_decrypt)
    if not ok:
        click.echo(f"Verification: [ERROR] FAIL - {error}")
        sys.exit(1)
    click.echo("Verification: [OK] PASS")


def _mode_options(func):
    func = click.option("--nonce", type=str, default=None, help="CTR nonce (16 hex chars)")(func)
    func = click.option("--iv", type=str, default=None, help="CBC IV (32 hex chars)")(func)
    func = click.option(
        "--mode",
        type=click.Choice(["ecb", "cbc", "ctr"], case_sensitive=False),
        required=True,
        help="Mode of operation",
    )(func)
    func = click.option("--key", type=str, required=True, help="Key (32 hex chars)")(func)
    return func


def _build_mode(mode: str, iv: str | None, nonce: str | None):
    try:
        return parse_mode(mode, _parse_hex(iv, "IV", 16), _parse_hex(nonce, "Nonce", 8))
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command(name="encrypt")
@_mode_options
@click.option("--no-pad", is_flag=True, help="Do not apply PKCS#7 padding (ECB/CBC)")
@click.argument("plaintext_hex")
def encrypt_cmd(key: str, mode: str, iv: str | None, nonce: str | None, no_pad: bool,
                plaintext_hex: str) -> None:
    """Encrypt PLAINTEXT_HEX and print the ciphertext as hex."""
    key_bytes = _parse_hex(key, "Key", 16)
    plaintext = _parse_hex(plaintext_hex, "Plaintext")
    padding = Padding.NONE if no_pad else Padding.PKCS7
    try:
        ciphertext = encrypt(plaintext, key_bytes, _build_mode(mode, iv, nonce), padding)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(bytes_to_hex(ciphertext))


@main.command(name="decrypt")
@_mode_options
@click.option("--no-pad", is_flag=True, help="Keep PKCS#7 padding in the output (ECB/CBC)")
@click.argument("ciphertext_hex")
def decrypt_cmd(key: str, mode: str, iv: str | None, nonce: str | None, no_pad: bool,
                ciphertext_hex: str) -> None:
    """Decrypt CIPHERTEXT_HEX and print the plaintext as hex."""
    key_bytes = _parse_hex(key, "Key", 16)
    ciphertext = _parse_hex(ciphertext_hex, "Ciphertext")
    mode_tag = _build_mode(mode, iv, nonce)
    try:
        plaintext = decrypt(ciphertext, key_bytes, mode_tag)
        if not no_pad and mode.lower() != "ctr":
            plaintext = strip_pkcs7(plaintext)
    except PaddingError as e:
        click.echo(f"Error: Bad padding ({e.validity.value})", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(bytes_to_hex(plaintext))


@main.command()
@click.argument("name")
@click.option("--seed", type=int, default=None, help="Random seed for reproducibility")
@click.option("--verbose", "-v", is_flag=True, help="Print attack progress")
@click.option("--trace", "trace_path", type=click.Path(), default=None, help="Write JSONL trace to FILE")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option(
    "--corpus",
    "corpus_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help=f"Base64 plaintexts, one per line ({', '.join(CORPUS_SCENARIOS)})",
)
def attack(name: str, seed: int | None, verbose: bool, trace_path: str | None, as_json: bool,
           corpus_path: str | None) -> None:
    """Run the attack scenario NAME against a freshly keyed oracle."""
    try:
        scenario_cls = get_scenario(name)
    except KeyError as e:
        click.echo(f"Error: {e.args[0]}", err=True)
        sys.exit(1)

    if corpus_path:
        if name not in CORPUS_SCENARIOS:
            click.echo(f"Error: --corpus is not supported by '{name}'", err=True)
            sys.exit(1)
        try:
            plaintexts = load_base64_lines(corpus_path)
        except ValueError as e:
            click.echo(f"Error: Invalid base64 in corpus: {e}", err=True)
            sys.exit(1)
        if not plaintexts:
            click.echo("Error: Corpus is empty", err=True)
            sys.exit(1)
        scenario = scenario_cls(plaintexts=plaintexts)
    else:
        scenario = scenario_cls()
    rng = RandomSource(seed=seed)

    if not as_json:
        print_header(f"Attack: {name}")
        click.echo(scenario.description)
        if seed is not None:
            click.echo(f"RNG seed: {seed}")

    trace_file = _open_trace(trace_path)
    tracer = TraceRecorder(verbose=verbose and not as_json, trace_file=trace_file)
    try:
        result = scenario.run(rng, tracer)
    except OracleProtocolError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        if trace_file:
            trace_file.close()

    if as_json:
        payload = {"scenario": name, **result.to_dict(), "randomness": rng.get_summary()}
        click.echo(json.dumps(payload, indent=2))
    else:
        if result.notes:
            print_subheader("Notes")
            for note in result.notes:
                click.echo(f"  {note}")
        print_result(result.recovered, result.queries, result.correct, result.error_detail)

    sys.exit(0 if result.correct else 1)


if __name__ == "__main__":
    main()
