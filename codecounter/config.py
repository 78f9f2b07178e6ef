"""Configuration loading for codecounter (.codecounter.yml)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".codecounter.yml"

# Libraries every C/C++ link line carries; they never become graph nodes.
DEFAULT_IGNORED_PACKAGES = (
    "kernel32",
    "user32",
    "gdi32",
    "winspool",
    "comdlg32",
    "advapi32",
    "shell32",
    "ole32",
    "oleaut32",
    "uuid",
    "odbc32",
    "odbccp32",
    "ws2_32",
    "winmm",
    "version",
    "shlwapi",
    "comctl32",
)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class OutputConfig:
    """What the counter prints besides the totals."""

    verbose: bool = False
    tree: bool = False
    graph_level: int = 0

    @property
    def is_reading_classes(self) -> bool:
        return self.verbose or self.tree or self.graph_level > 0


@dataclass
class CounterConfig:
    """Settings defined in .codecounter.yml, possibly overridden from the CLI."""

    root: Path
    ignore: List[str] = field(default_factory=list)
    unprefix: Optional[str] = None
    ignored_packages: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORED_PACKAGES))
    output: OutputConfig = field(default_factory=OutputConfig)

    def ignore_patterns(self) -> List[re.Pattern[str]]:
        """Compile the directory ignore expressions."""
        patterns: List[re.Pattern[str]] = []
        for expression in self.ignore:
            try:
                patterns.append(re.compile(expression))
            except re.error as exc:
                raise ConfigError(f"Invalid ignore pattern {expression!r}: {exc}") from exc
        return patterns


def load_config(config_path: Path) -> CounterConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CounterConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = CounterConfig(root=root)
    config.ignore = _as_str_list(data.get("ignore"))
    config.unprefix = _as_str(data.get("unprefix"))
    if "ignored_packages" in data:
        config.ignored_packages = [name.lower() for name in _as_str_list(data.get("ignored_packages"))]

    graph_level = _as_int(data.get("graph_level"))
    if graph_level is not None and graph_level < 0:
        raise ConfigError("graph_level must not be negative")

    config.output = OutputConfig(
        verbose=_as_bool(data.get("verbose")) or False,
        tree=_as_bool(data.get("tree")) or False,
        graph_level=graph_level or 0,
    )
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float)) and not isinstance(item, bool)]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "CounterConfig",
    "DEFAULT_IGNORED_PACKAGES",
    "OutputConfig",
    "load_config",
]
