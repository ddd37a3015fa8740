"""Configuration management for SecretGate."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml  # type: ignore

from secretgate.errors import ConfigError

CONFIG_FILENAME = ".secretgate.yml"

_DEFAULT_CONFIG: dict[str, Any] = {
    "required_commands": ["git"],
    "search_path": None,
    "exclusions": {
        "paths": [],
    },
    "rules": [],
    "disabled_rules": [],
    "entropy": {
        "enabled": False,
        "threshold": 4.5,
        "min_length": 20,
    },
    "report": {
        "format": "text",
    },
}

_REPORT_FORMATS = ("text", "json")


@dataclass
class EntropyConfig:
    """Settings for high-entropy string detection."""

    enabled: bool = False
    threshold: float = 4.5
    min_length: int = 20


@dataclass
class RuleConfig:
    """A user-defined detection rule from ``.secretgate.yml``."""

    rule_id: str
    pattern: str
    description: str = ""
    target: str = "content"


@dataclass
class SecretGateConfig:
    """Full SecretGate configuration loaded from ``.secretgate.yml``."""

    required_commands: list[str] = field(default_factory=lambda: ["git"])
    search_path: list[str] | None = None
    excluded_paths: list[str] = field(default_factory=list)
    rules: list[RuleConfig] = field(default_factory=list)
    disabled_rules: list[str] = field(default_factory=list)
    entropy: EntropyConfig = field(default_factory=EntropyConfig)
    report_format: str = "text"

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> SecretGateConfig:
        """Load configuration from a YAML file, falling back to defaults.

        Search order:
        1. Explicit ``config_path`` argument
        2. ``.secretgate.yml`` in the current directory or the nearest parent,
           stopping at the repository root (the directory holding ``.git``)
        3. Built-in defaults

        Raises:
            ConfigError: If an explicit path does not exist, or the file is
                not valid YAML or holds values of the wrong shape.
        """
        raw: dict[str, Any] = dict(_DEFAULT_CONFIG)

        search_paths: list[Path] = []
        if config_path:
            explicit = Path(config_path)
            if not explicit.exists():
                raise ConfigError(f"config file not found: {explicit}")
            search_paths.append(explicit)
        discovered = find_config(Path.cwd())
        if discovered is not None:
            search_paths.append(discovered)

        for path in search_paths:
            if path.exists():
                try:
                    with open(path, encoding="utf-8") as f:
                        loaded = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ConfigError(f"{path}: invalid YAML: {e}") from e
                if loaded is not None and not isinstance(loaded, dict):
                    raise ConfigError(f"{path}: top level must be a mapping")
                if loaded:
                    raw = _deep_merge(raw, loaded)
                break

        return cls._from_raw(raw)

    @classmethod
    def _from_raw(cls, raw: dict[str, Any]) -> SecretGateConfig:
        """Build config from a raw dict (merged defaults + user overrides)."""
        cfg = cls()
        cfg.required_commands = _string_list(raw, "required_commands")

        search_path = raw.get("search_path")
        if search_path is not None:
            cfg.search_path = _string_list(raw, "search_path")

        exclusions = _section(raw, "exclusions")
        cfg.excluded_paths = _string_list(exclusions, "paths")
        cfg.disabled_rules = _string_list(raw, "disabled_rules")

        # User rules
        for index, entry in enumerate(raw.get("rules") or []):
            if not isinstance(entry, dict) or "id" not in entry or "pattern" not in entry:
                raise ConfigError(f"rules[{index}] must be a mapping with 'id' and 'pattern'")
            target = entry.get("target", "content")
            if target not in ("content", "path"):
                raise ConfigError(f"rules[{index}]: target must be 'content' or 'path'")
            cfg.rules.append(
                RuleConfig(
                    rule_id=str(entry["id"]),
                    pattern=str(entry["pattern"]),
                    description=str(entry.get("description", entry["id"])),
                    target=target,
                )
            )

        # Entropy
        entropy = _section(raw, "entropy")
        enabled = entropy.get("enabled", False)
        if not isinstance(enabled, bool):
            raise ConfigError(f"entropy.enabled must be true or false, got {enabled!r}")
        try:
            cfg.entropy = EntropyConfig(
                enabled=enabled,
                threshold=float(entropy.get("threshold", 4.5)),
                min_length=int(entropy.get("min_length", 20)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid numeric setting: {e}") from e

        # Reporting
        report = _section(raw, "report")
        cfg.report_format = report.get("format", cfg.report_format)
        if cfg.report_format not in _REPORT_FORMATS:
            raise ConfigError(
                f"report.format must be one of {', '.join(_REPORT_FORMATS)}, "
                f"got {cfg.report_format!r}"
            )

        return cfg

    def is_path_excluded(self, file_path: str) -> bool:
        """Check if a file path is excluded by glob patterns."""
        from fnmatch import fnmatch

        return any(fnmatch(file_path, pattern) for pattern in self.excluded_paths)


def find_config(start: Path) -> Path | None:
    """Find ``.secretgate.yml`` from ``start`` up to the repository root."""
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        # Never read a config from outside the repository
        if (directory / ".git").exists():
            return None
    return None


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be a mapping")
    return value


def _string_list(section: dict[str, Any], key: str) -> list[str]:
    value = section.get(key) or []
    if isinstance(value, str) or not isinstance(value, list):
        raise ConfigError(f"{key} must be a list of strings")
    return [str(v) for v in value]


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep-merge override dict into base dict."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
