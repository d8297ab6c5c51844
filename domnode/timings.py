# domnode/timings.py
"""
@file timings.py
@brief Time configuration presets and defaults for element synchronization.
"""

from __future__ import annotations
from copy import deepcopy
from typing import Any, Dict


TIMEOUT_FIELDS: Dict[str, Dict[str, Any]] = {
    "synchronize": {"timeout": 2.0, "interval": 0.05},
    "find": {"timeout": 2.0, "interval": 0.05},
}

PRESET_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "fast": {
        "synchronize": {"timeout": 1.0, "interval": 0.02},
        "find": {"timeout": 1.0, "interval": 0.02},
    },
    "slow": {
        "synchronize": {"timeout": 5.0, "interval": 0.1},
        "find": {"timeout": 5.0, "interval": 0.1},
    },
    "ci": {
        "synchronize": {"timeout": 10.0, "interval": 0.2},
        "find": {"timeout": 10.0, "interval": 0.2},
    },
}


def list_presets() -> Dict[str, Dict[str, Any]]:
    return {"default": {}, **PRESET_OVERRIDES}


def build_preset_values(preset: str) -> Dict[str, Any]:
    preset_key = (preset or "default").lower()
    values: Dict[str, Any] = deepcopy(TIMEOUT_FIELDS)

    if preset_key == "default":
        return values

    overrides = PRESET_OVERRIDES.get(preset_key)
    if overrides is None:
        raise ValueError(f"Unknown timing preset: {preset}")

    for key, value in overrides.items():
        base = deepcopy(values[key])
        base.update(value)
        values[key] = base

    return values
