"""Tests for the command-line interface."""

import json

from click.testing import CliRunner

from aes_attack.cli import main


FIPS_KEY = "2b7e151628aed2a6abf7158809cf4f3c"
FIPS_PT = "3243f6a8885a308d313198a2e0370734"
FIPS_CT = "3925841d02dc09fbdc118597196a0b32"


class TestInfoCommands:
    def test_list(self) -> None:
        result = CliRunner().invoke(main, ["list"])
        assert result.exit_code == 0
        assert "cbc_padding_oracle" in result.output

    def test_vectors(self) -> None:
        result = CliRunner().invoke(main, ["vectors", "-v"])
        assert result.exit_code == 0
        assert "7/7 passed" in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert "0.1.0" in result.output


class TestBlockCommand:
    def test_default_is_appendix_b(self) -> None:
        result = CliRunner().invoke(main, ["block"])
        assert result.exit_code == 0
        assert f"Output:    {FIPS_CT}" in result.output
        assert "[OK] PASS" in result.output

    def test_decrypt(self) -> None:
        result = CliRunner().invoke(main, ["block", "--decrypt", "--pt", FIPS_CT])
        assert result.exit_code == 0
        assert f"Output:    {FIPS_PT}" in result.output

    def test_verbose_trace(self, tmp_path) -> None:
        trace = tmp_path / "trace.jsonl"
        result = CliRunner().invoke(main, ["block", "-v", "--trace", str(trace)])
        assert result.exit_code == 0
        assert "R1  SubBytes" in result.output
        lines = trace.read_text().splitlines()
        assert len(lines) == 41
        assert json.loads(lines[-1])["operation"] == "AddRoundKey"

    def test_mismatch_reported(self, monkeypatch) -> None:
        """Output that disagrees with PyCryptodome fails verification."""
        monkeypatch.setattr("aes_attack.cli.aes128_encrypt", lambda key, block, tracer=None: bytes(16))
        result = CliRunner().invoke(main, ["block"])
        assert result.exit_code == 1
        assert "Ciphertext mismatch" in result.output

        result = CliRunner().invoke(main, ["vectors"])
        assert result.exit_code == 1
        assert "0/7 passed" in result.output

    def test_bad_key(self) -> None:
        result = CliRunner().invoke(main, ["block", "--key", "abcd"])
        assert result.exit_code == 1
        assert "Key must be 32 hex chars" in result.output


class TestModeCommands:
    def test_encrypt_decrypt_cbc(self) -> None:
        runner = CliRunner()
        args = ["--key", FIPS_KEY, "--mode", "cbc", "--iv", "00" * 16]
        enc = runner.invoke(main, ["encrypt", *args, "68656c6c6f"])
        assert enc.exit_code == 0
        ciphertext = enc.output.strip()
        assert len(ciphertext) == 32

        dec = runner.invoke(main, ["decrypt", *args, ciphertext])
        assert dec.exit_code == 0
        assert dec.output.strip() == "68656c6c6f"

    def test_encrypt_ctr(self) -> None:
        result = CliRunner().invoke(
            main, ["encrypt", "--key", FIPS_KEY, "--mode", "ctr", "--nonce", "00" * 8, "abcdef"],
        )
        assert result.exit_code == 0
        assert len(result.output.strip()) == 6

    def test_missing_iv(self) -> None:
        result = CliRunner().invoke(main, ["encrypt", "--key", FIPS_KEY, "--mode", "cbc", "00"])
        assert result.exit_code == 1
        assert "requires an IV" in result.output

    def test_no_pad_unaligned(self) -> None:
        result = CliRunner().invoke(
            main, ["encrypt", "--key", FIPS_KEY, "--mode", "ecb", "--no-pad", "00"],
        )
        assert result.exit_code == 1

    def test_bad_padding(self) -> None:
        result = CliRunner().invoke(
            main, ["decrypt", "--key", FIPS_KEY, "--mode", "ecb", FIPS_CT],
        )
        assert result.exit_code == 1
        assert "Bad padding" in result.output


class TestAttackCommand:
    def test_unknown_scenario(self) -> None:
        result = CliRunner().invoke(main, ["attack", "nope"])
        assert result.exit_code == 1
        assert "Unknown scenario" in result.output

    def test_cut_and_paste(self) -> None:
        result = CliRunner().invoke(main, ["attack", "ecb_cut_and_paste", "--seed", "3"])
        assert result.exit_code == 0
        assert "[OK] PASS" in result.output

    def test_json_output(self) -> None:
        result = CliRunner().invoke(main, ["attack", "cbc_bitflip", "--seed", "7", "--json"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["scenario"] == "cbc_bitflip"
        assert payload["correct"] is True
        assert payload["randomness"]["seed"] == 7

    def test_trace_file(self, tmp_path) -> None:
        trace = tmp_path / "attack.jsonl"
        result = CliRunner().invoke(
            main, ["attack", "detect_mode", "--seed", "2", "--trace", str(trace)],
        )
        assert result.exit_code == 0
        events = [json.loads(line) for line in trace.read_text().splitlines()]
        assert {e["event"] for e in events} == {"mode_detected"}

    def test_corpus_for_ctr(self, tmp_path) -> None:
        import base64
        from aes_attack.scenarios.corpus import SENTENCES

        corpus = tmp_path / "corpus.txt"
        corpus.write_text("\n".join(base64.b64encode(s).decode() for s in SENTENCES[:30]))
        result = CliRunner().invoke(
            main, ["attack", "ctr_fixed_nonce", "--seed", "4", "--corpus", str(corpus)],
        )
        assert result.exit_code == 0
        assert "Ciphertexts observed: 30" in result.output

    def test_corpus_rejected_for_other_scenarios(self, tmp_path) -> None:
        corpus = tmp_path / "corpus.txt"
        corpus.write_text("aGVsbG8=\n")
        result = CliRunner().invoke(
            main, ["attack", "cbc_bitflip", "--corpus", str(corpus)],
        )
        assert result.exit_code == 1
        assert "--corpus is not supported" in result.output
