"""Pump configuration management helpers."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

ENV_PREFIX = "TYK_PMP_PUMPS_"
_ENV_FIELDS = ("TYPE", "TIMEOUT")
_ENV_META = "META"


def _str_to_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid integer value: {value}") from exc


@dataclass(frozen=True)
class PumpDefinition:
    """One configured pump: its registry type, timeout and raw meta settings."""

    name: str
    type: str = ""
    timeout: int = 0
    meta: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("pump name must be provided")
        if not self.type:
            object.__setattr__(self, "type", self.name)
        if self.timeout < 0:
            raise ValueError(f"timeout for pump '{self.name}' cannot be negative")
        if not isinstance(self.meta, Mapping):
            raise ValueError(f"meta for pump '{self.name}' must be a mapping")


@dataclass(frozen=True)
class PumpsConfig:
    """Immutable set of pump definitions loaded from env or files."""

    pumps: Mapping[str, PumpDefinition] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PumpsConfig":
        if not isinstance(data, Mapping):
            raise ValueError("pump configuration must be a mapping at the top level")
        raw_pumps = data.get("pumps", {})
        if not isinstance(raw_pumps, Mapping):
            raise ValueError("'pumps' must be a mapping of pump name to settings")
        pumps: Dict[str, PumpDefinition] = {}
        for name, settings in raw_pumps.items():
            if not isinstance(settings, Mapping):
                raise ValueError(f"settings for pump '{name}' must be a mapping")
            pumps[name] = PumpDefinition(
                name=name,
                type=settings.get("type", name),
                timeout=int(settings.get("timeout") or 0),
                meta=dict(settings.get("meta") or {}),
            )
        return cls(pumps=pumps)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "PumpsConfig":
        """Collect ``<prefix><NAME>_TYPE|_TIMEOUT|_META_<KEY>`` variables."""

        raw: Dict[str, Dict[str, Any]] = {}
        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue
            name, setting = cls._split_env_key(key[len(prefix):])
            if name is None:
                continue
            entry = raw.setdefault(name, {"meta": {}})
            if setting == "TYPE":
                entry["type"] = value
            elif setting == "TIMEOUT":
                entry["timeout"] = _str_to_int(value, 0)
            else:
                entry["meta"][setting] = value
        return cls.from_mapping({"pumps": raw})

    @classmethod
    def from_file(cls, path: str) -> "PumpsConfig":
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        raw = file_path.read_text()
        data: Dict[str, Any]
        suffix = file_path.suffix.lower()
        if suffix == ".json":
            data = json.loads(raw)
        elif suffix in {".yaml", ".yml"}:
            data = cls._load_yaml(raw)
        else:
            raise ValueError("Unsupported config format. Use JSON or YAML.")
        return cls.from_mapping(data)

    def validate(self) -> None:
        if not isinstance(self.pumps, Mapping):
            raise ValueError("pumps must be a mapping")
        for name, definition in self.pumps.items():
            if name != definition.name:
                raise ValueError(
                    f"pump key '{name}' does not match definition '{definition.name}'"
                )

    @staticmethod
    def _split_env_key(remainder: str) -> tuple[str | None, str]:
        # NAME_TYPE, NAME_TIMEOUT or NAME_META_KEY; NAME itself may contain "_".
        marker = f"_{_ENV_META}_"
        if marker in remainder:
            name, meta_key = remainder.split(marker, 1)
            if name and meta_key:
                return name.lower(), meta_key.lower()
            return None, ""
        for setting in _ENV_FIELDS:
            suffix = f"_{setting}"
            if remainder.endswith(suffix) and len(remainder) > len(suffix):
                return remainder[: -len(suffix)].lower(), setting
        return None, ""

    @staticmethod
    def _load_yaml(raw: str) -> Dict[str, Any]:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to parse YAML config files") from exc
        return yaml.safe_load(raw) or {}
