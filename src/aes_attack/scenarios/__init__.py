"""End-to-end attack scenarios."""

from .ecb_scenarios import (
    DetectModeScenario,
    EcbByteAtATimeScenario,
    EcbByteAtATimePrefixScenario,
    EcbCutAndPasteScenario,
)
from .cbc_scenarios import CbcBitflipScenario, CbcPaddingOracleScenario
from .ctr_scenarios import CtrFixedNonceScenario

# Registry of available scenarios
SCENARIOS: dict[str, type] = {
    "detect_mode": DetectModeScenario,
    "ecb_byte_at_a_time": EcbByteAtATimeScenario,
    "ecb_byte_at_a_time_prefix": EcbByteAtATimePrefixScenario,
    "ecb_cut_and_paste": EcbCutAndPasteScenario,
    "cbc_bitflip": CbcBitflipScenario,
    "cbc_padding_oracle": CbcPaddingOracleScenario,
    "ctr_fixed_nonce": CtrFixedNonceScenario,
}


def get_scenario(name: str) -> type:
    """Get scenario class by name.

    Raises:
        KeyError: If scenario not found
    """
    if name not in SCENARIOS:
        available = ", ".join(SCENARIOS.keys())
        raise KeyError(f"Unknown scenario '{name}'. Available: {available}")
    return SCENARIOS[name]


def list_scenarios() -> list[dict[str, str]]:
    """List all available scenarios with descriptions.

    Returns:
        List of dicts with 'name' and 'description' keys
    """
    result = []
    for name, cls in SCENARIOS.items():
        result.append({
            "name": name,
            "description": getattr(cls, "description", "No description"),
        })
    return result


__all__ = [
    "SCENARIOS",
    "get_scenario",
    "list_scenarios",
    "DetectModeScenario",
    "EcbByteAtATimeScenario",
    "EcbByteAtATimePrefixScenario",
    "EcbCutAndPasteScenario",
    "CbcBitflipScenario",
    "CbcPaddingOracleScenario",
    "CtrFixedNonceScenario",
]
