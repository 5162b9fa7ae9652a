"""Configuration loading for compaudit (.compaudit.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import ComponentCategory

CONFIG_FILENAME = ".compaudit.yml"

DEFAULT_ROOT_DIR = "src/components"
DEFAULT_INCLUDE = ["**/*.tsx", "**/*.jsx"]
DEFAULT_EXCLUDE = [
    "**/*.test.tsx",
    "**/*.test.jsx",
    "**/*.spec.tsx",
    "**/*.spec.jsx",
    "**/*.stories.tsx",
    "**/*.stories.jsx",
    "**/__fixtures__/**",
]
DEFAULT_OUTPUT_DIR = ".compaudit"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DiscoveryConfig:
    """Where to look for components and how to classify them."""

    root_dir: str = DEFAULT_ROOT_DIR
    include: List[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    categories: Dict[str, str] = field(default_factory=dict)


@dataclass
class AnalyzerConfig:
    """Analyzer enablement."""

    enabled: List[str] = field(default_factory=list)


@dataclass
class SchedulerConfig:
    """Concurrency settings for analyzer tiers."""

    max_workers: int = 4


@dataclass
class OutputConfig:
    """Artifact and narrative output locations."""

    dir: str = DEFAULT_OUTPUT_DIR
    templates_dir: Optional[Path] = None


@dataclass
class AuditConfig:
    """Represents the high-level settings defined in .compaudit.yml."""

    root: Path
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    analyzers: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @property
    def output_dir(self) -> Path:
        return self.root / self.output.dir

    @property
    def components_dir(self) -> Path:
        return self.root / self.discovery.root_dir


def load_config(config_path: Path) -> AuditConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return AuditConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    discovery = DiscoveryConfig()
    discovery_data = _as_dict(data.get("discovery"))
    if discovery_data:
        root_dir = _as_str(discovery_data.get("root_dir"))
        if root_dir:
            discovery.root_dir = root_dir
        if "include" in discovery_data:
            discovery.include = _as_str_list(discovery_data.get("include"))
        if "exclude" in discovery_data:
            discovery.exclude = _as_str_list(discovery_data.get("exclude"))
        categories = _as_dict(discovery_data.get("categories"))
        allowed = {member.value for member in ComponentCategory}
        for segment, category in categories.items():
            if category not in allowed:
                raise ConfigError(
                    f"discovery.categories.{segment} must be one of: {', '.join(sorted(allowed))}"
                )
            discovery.categories[str(segment)] = category

    analyzers = AnalyzerConfig()
    analyzer_data = _as_dict(data.get("analyzers"))
    if analyzer_data:
        analyzers.enabled = _as_str_list(analyzer_data.get("enabled"))

    scheduler = SchedulerConfig()
    scheduler_data = _as_dict(data.get("scheduler"))
    if scheduler_data:
        max_workers = _as_int(scheduler_data.get("max_workers"))
        if max_workers is not None:
            if max_workers < 1:
                raise ConfigError("scheduler.max_workers must be a positive integer")
            scheduler.max_workers = max_workers

    output = OutputConfig()
    output_data = _as_dict(data.get("output"))
    if output_data:
        output_dir = _as_str(output_data.get("dir"))
        if output_dir:
            output.dir = output_dir
        templates_dir = _as_str(output_data.get("templates_dir"))
        if templates_dir:
            output.templates_dir = root / templates_dir

    return AuditConfig(
        root=root,
        discovery=discovery,
        analyzers=analyzers,
        scheduler=scheduler,
        output=output,
    )


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


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


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


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "AnalyzerConfig",
    "AuditConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "DiscoveryConfig",
    "OutputConfig",
    "SchedulerConfig",
    "load_config",
]
