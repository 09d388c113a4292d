"""Configuration loading for docbinder (.docbinder.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".docbinder.yml"
DEFAULT_TITLE = "Documentation"
DEFAULT_EXPORT_TIMEOUT = 120.0


@dataclass
class ExportConfig:
    """Browser settings for PDF export."""

    executable: Optional[str] = None
    timeout: float = DEFAULT_EXPORT_TIMEOUT


@dataclass
class DocBinderConfig:
    """Represents the settings defined in .docbinder.yml."""

    root: Path
    title: str = DEFAULT_TITLE
    dark_mode: bool = False
    exclude_paths: List[str] = field(default_factory=list)
    templates_dir: Optional[Path] = None
    export: ExportConfig = field(default_factory=ExportConfig)


def load_config(config_path: Path, *, explicit: bool = False) -> DocBinderConfig:
    """Load configuration from disk.

    An input path falls back to defaults when no config file sits next to it.
    With ``explicit`` the path names the config file itself, which must exist.
    """
    if explicit:
        config_file = Path(config_path).expanduser().resolve()
        if config_file.is_dir():
            config_file = config_file / CONFIG_FILENAME
        if not config_file.is_file():
            raise ConfigError(f"Config file not found: {config_file}", path=config_file)
    else:
        config_file = resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DocBinderConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root", path=config_file)

    templates_dir_str = _as_str(data.get("templates_dir"))

    export = ExportConfig()
    export_data = _as_dict(data.get("export"))
    if export_data:
        export.executable = _as_str(export_data.get("executable"))
        timeout = _as_float(export_data.get("timeout"))
        if timeout is not None and timeout > 0:
            export.timeout = timeout

    return DocBinderConfig(
        root=root,
        title=_as_str(data.get("title")) or DEFAULT_TITLE,
        dark_mode=bool(_as_bool(data.get("dark_mode"))),
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        templates_dir=root / templates_dir_str if templates_dir_str else None,
        export=export,
    )


def resolve_config_path(config_path: Path) -> Path:
    """Map an input path to the config file that governs it."""
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix in {".yml", ".yaml"}:
        return config_path.resolve()
    return (config_path.parent / CONFIG_FILENAME).resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}", path=path, cause=exc) from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}", path=path, cause=exc) from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
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
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
