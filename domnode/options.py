# domnode/options.py
"""
@file options.py
@brief Session options and their YAML loader.
"""

from __future__ import annotations
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml
from jsonschema import Draft202012Validator

from .config import TimeConfig
from .exceptions import ConfigError

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schemas", "session.schema.json")


@dataclass(frozen=True)
class SessionOptions:
    """
    Session-wide policy consulted by element handles.

    ignore_hidden_elements / visible_text_only decide what Element.text()
    returns by default; automatic_reload lets synchronize reload a reloadable
    handle between attempts.
    """
    preset: str = "default"
    ignore_hidden_elements: bool = True
    visible_text_only: bool = False
    automatic_reload: bool = True
    timings: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def build_time_config(self) -> TimeConfig:
        """Build the timing snapshot for this session."""
        try:
            return TimeConfig.build_from(preset=self.preset, overrides=self.timings)
        except ValueError as e:
            raise ConfigError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "preset": self.preset,
            "ignore_hidden_elements": self.ignore_hidden_elements,
            "visible_text_only": self.visible_text_only,
            "automatic_reload": self.automatic_reload,
            "timings": self.build_time_config().to_dict(),
        }


def _load_schema(path: str = SCHEMA_PATH) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def validate_options(data: Dict[str, Any], schema_path: Optional[str] = None) -> None:
    """Validate raw options data against the session JSON schema."""
    validator = Draft202012Validator(_load_schema(schema_path or SCHEMA_PATH))
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        lines = ["Session options validation failed:"]
        for e in errors:
            lines.append(f"- {list(e.path)}: {e.message}")
        raise ConfigError("\n".join(lines))


def parse_options(data: Optional[Dict[str, Any]]) -> SessionOptions:
    """Build SessionOptions from an already loaded mapping."""
    data = data or {}
    validate_options(data)
    d = data.get("session", {}) or {}
    return SessionOptions(
        preset=str(d.get("preset", "default")),
        ignore_hidden_elements=bool(d.get("ignore_hidden_elements", True)),
        visible_text_only=bool(d.get("visible_text_only", False)),
        automatic_reload=bool(d.get("automatic_reload", True)),
        timings=dict(d.get("timings", {}) or {}),
    )


def load_options(path: str) -> SessionOptions:
    """
    Load session options from a YAML file.

    @throws ConfigError if the file is missing, unparsable or invalid
    """
    path = os.path.abspath(path)
    if not os.path.exists(path):
        raise ConfigError(f"Session options YAML not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Session options YAML must be a mapping at root.")
    return parse_options(data)
