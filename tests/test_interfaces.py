"""Tests for configuration, results and errors."""

import pytest

from aes_attack.interfaces import (
    AttackConfig,
    AttackResult,
    BaseScenario,
    ModeMismatchError,
    OracleProtocolError,
)


class TestAttackConfig:
    """Tests for AttackConfig dataclass."""

    def test_default_values(self) -> None:
        config = AttackConfig()
        assert config.placeholder_byte == ord("A")
        assert config.alternate_byte == ord("B")
        assert config.min_block_size == 8
        assert config.max_block_size == 64
        assert config.detection_blocks == 8
        assert config.flip_placeholder == 0xff

    @pytest.mark.parametrize("kwargs", [
        {"placeholder_byte": 256},
        {"flip_placeholder": -1},
        {"placeholder_byte": 0x42, "alternate_byte": 0x42},
        {"min_block_size": 0},
        {"min_block_size": 32, "max_block_size": 16},
        {"detection_blocks": 1},
        {"alphabet": b""},
    ])
    def test_invalid_values(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            AttackConfig(**kwargs)


class TestAttackResult:
    """Tests for AttackResult dataclass."""

    def test_to_dict(self) -> None:
        result = AttackResult(recovered=b"hi", expected=b"hi", correct=True, queries=3)
        result.add_note("two bytes")
        d = result.to_dict()
        assert d["recovered_hex"] == "6869"
        assert d["recovered_text"] == "hi"
        assert d["correct"] is True
        assert d["queries"] == 3
        assert d["notes"] == ["two bytes"]

    def test_notes_not_shared(self) -> None:
        a = AttackResult(b"", b"", True)
        b = AttackResult(b"", b"", True)
        a.add_note("x")
        assert b.notes == []


class TestErrors:
    def test_mode_mismatch_message(self) -> None:
        err = ModeMismatchError("ecb", "cbc")
        assert isinstance(err, OracleProtocolError)
        assert isinstance(err, RuntimeError)
        assert "expected ecb, detected cbc" in str(err)

    def test_base_scenario_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            BaseScenario()
