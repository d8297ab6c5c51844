# domnode/config.py
"""
@file config.py
@brief Deadlines and polling intervals for the synchronize and find loops.

A TimeConfig is an immutable-by-convention snapshot built with the precedence

    built-in defaults -> preset -> overrides

Sessions build one from their options; Session.using_wait_time swaps in a
modified copy for the duration of a block.
"""

from __future__ import annotations

import copy
import threading
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional, Union

from .timings import TIMEOUT_FIELDS, build_preset_values, list_presets


@dataclass(frozen=True)
class TimeoutSettings:
    """Deadline (seconds) and polling interval (seconds) of one retry loop."""
    timeout: float
    interval: float

    def __post_init__(self) -> None:
        if self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")
        if self.interval <= 0:
            raise ValueError(f"interval must be > 0, got {self.interval}")

    def with_overrides(
        self,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
    ) -> TimeoutSettings:
        changes: Dict[str, float] = {}
        if timeout is not None:
            changes["timeout"] = float(timeout)
        if interval is not None:
            changes["interval"] = float(interval)
        return replace(self, **changes)


SettingValue = Union[TimeoutSettings, Dict[str, Any]]


def _settings(name: str, value: SettingValue, base: Optional[TimeoutSettings] = None) -> TimeoutSettings:
    if isinstance(value, TimeoutSettings):
        return value
    if not isinstance(value, dict):
        raise ValueError(f"Invalid timeout setting for {name}: {value!r}")
    unknown = set(value) - {"timeout", "interval"}
    if unknown:
        raise ValueError(f"Unknown keys for {name}: {sorted(unknown)}")
    if base is not None:
        return base.with_overrides(timeout=value.get("timeout"), interval=value.get("interval"))
    return TimeoutSettings(timeout=float(value["timeout"]), interval=float(value["interval"]))


class TimeConfig:
    """
    Timing snapshot with one TimeoutSettings per loop:

      synchronize: Element.synchronize deadline and polling
      find:        Scope.find deadline and polling
    """

    _default_instance: Optional[TimeConfig] = None
    _lock = threading.Lock()

    synchronize: TimeoutSettings
    find: TimeoutSettings

    def __init__(self, preset: Optional[str] = None):
        self.preset = (preset or "default").lower()
        values = build_preset_values(self.preset)
        for name in TIMEOUT_FIELDS:
            setattr(self, name, _settings(name, values[name]))

    def to_dict(self) -> Dict[str, Any]:
        return {name: asdict(getattr(self, name)) for name in TIMEOUT_FIELDS}

    def clone(self) -> TimeConfig:
        # Settings are frozen, so a shallow copy is independent.
        return copy.copy(self)

    def with_overrides(self, overrides: Dict[str, SettingValue]) -> TimeConfig:
        """Copy with overrides applied; the receiver is left unchanged."""
        config = self.clone()
        config._apply(overrides)
        return config

    def _apply(self, overrides: Dict[str, SettingValue]) -> None:
        for name, value in overrides.items():
            if name not in TIMEOUT_FIELDS:
                raise ValueError(f"Unknown TimeConfig field: {name}. Use one of {sorted(TIMEOUT_FIELDS)}")
            setattr(self, name, _settings(name, value, base=getattr(self, name)))

    @classmethod
    def build_from(
        cls,
        *,
        preset: str = "default",
        overrides: Optional[Dict[str, SettingValue]] = None,
    ) -> TimeConfig:
        config = cls(preset)
        if overrides:
            config._apply(overrides)
        return config

    @classmethod
    def default(cls) -> TimeConfig:
        """Process-wide default snapshot."""
        if cls._default_instance is None:
            with cls._lock:
                if cls._default_instance is None:
                    cls._default_instance = cls("default")
        return cls._default_instance

    def __repr__(self) -> str:
        loops = ", ".join(
            f"{name}={s.timeout}s/{s.interval}s"
            for name, s in ((n, getattr(self, n)) for n in TIMEOUT_FIELDS)
        )
        return f"<TimeConfig preset={self.preset!r} {loops}>"


def available_presets() -> Dict[str, Dict[str, Any]]:
    """Preset names mapped to the overrides they apply over the defaults."""
    return list_presets()
