"""
YAML configuration loader.

This helper locates, reads, merges, and validates *settings.yaml*,
*organizations.yaml* and *forms.yaml* before returning a
:class:`reportomatic.config.schema.HarvestConfig` instance.

Search precedence for **each** YAML (first match wins)
1. An explicit path argument (``--settings-yaml`` and friends on the CLI).
2. ``<config-dir>/<name>.yaml`` – defaults to ``./config``.
3. The packaged default shipped inside the wheel.
"""

from __future__ import annotations

from importlib.resources import as_file, files
from pathlib import Path
from typing import Optional

import structlog
import yaml
from pydantic import ValidationError

from reportomatic.utils.errors import ConfigError
from .schema import HarvestConfig

log = structlog.get_logger()

_RESOURCES = files("reportomatic.resources")

# --------------------------------------------------------------------------- #
# Helper functions                                                            #
# --------------------------------------------------------------------------- #


def _first_existing(*candidates: Optional[Path]) -> Optional[Path]:
    """Return the first path in *candidates* that exists on disk."""
    for p in candidates:
        if p is not None and p.exists():
            return p
    return None


def _load_yaml(path: Path) -> dict:
    """Read a YAML mapping; an empty file yields an empty dict.

    Raises:
        ConfigError: When the file is not valid YAML or not a mapping.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def _resolve_yaml(explicit: Optional[Path], config_dir: Path, name: str) -> dict:
    """Load *name* according to the documented precedence."""
    if explicit is not None and not explicit.exists():
        raise ConfigError(f"Configuration file not found: {explicit}")
    resolved = _first_existing(explicit, config_dir / name)
    if resolved is not None:
        log.debug("config.resolved", name=name, path=str(resolved))
        return _load_yaml(resolved)
    with as_file(_RESOURCES / name) as packaged:
        log.debug("config.resolved", name=name, path="<packaged>")
        return _load_yaml(packaged)


def _unwrap(table: dict, key: str) -> dict:
    # Accept both ``organizations: {1: ...}`` and the bare ``{1: ...}`` style.
    if set(table) == {key}:
        return table[key] or {}
    return table


def _as_path(value: Optional[str | Path]) -> Optional[Path]:
    return Path(value).expanduser().resolve() if value else None


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #
def load_config(
    *,
    settings_path: Optional[str | Path] = None,
    organizations_path: Optional[str | Path] = None,
    forms_path: Optional[str | Path] = None,
    config_dir: Optional[str | Path] = None,
) -> HarvestConfig:
    """Return a fully validated :class:`HarvestConfig`.

    Args:
        settings_path: Explicit *settings.yaml*.
        organizations_path: Explicit *organizations.yaml*.
        forms_path: Explicit *forms.yaml*.
        config_dir: Directory searched before the packaged defaults.
            ``None`` means ``./config``.

    Raises:
        ConfigError: When a file is unreadable or the merged document fails
            Pydantic validation.
    """
    cfg_dir = _as_path(config_dir) or Path.cwd() / "config"

    merged = dict(_resolve_yaml(_as_path(settings_path), cfg_dir, "settings.yaml"))
    merged["organizations"] = _unwrap(
        _resolve_yaml(_as_path(organizations_path), cfg_dir, "organizations.yaml"),
        "organizations",
    )
    merged["forms"] = _unwrap(
        _resolve_yaml(_as_path(forms_path), cfg_dir, "forms.yaml"),
        "forms",
    )

    try:
        return HarvestConfig(**merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration – {exc}") from exc
