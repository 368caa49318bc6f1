"""Configuration loading for the board packagers.

Settings live in an optional YAML file that is deep-merged over built-in
defaults. Command line flags are applied as dotted-key overrides and the
result is normalised by :func:`prepare_config`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional, Tuple

import yaml

LOG = logging.getLogger("aac_board_packager.config")

DEFAULT_CONFIG_PATH = Path("aac_board_packager.yaml")

_DEFAULT_CONFIG: Dict[str, Any] = {
    "output": {"folder": "exports"},
    "logging": {"level": "INFO"},
    "gridset": {
        "thumbnail": {
            "enabled": True,
            "source": None,
            "timeout_sec": 2.0,
            "size": 256,
        }
    },
    "obz": {"compression_level": 6, "symbol_url_base": "/api/symbols/svg/"},
    "touchchat": {"container": "json"},
}

TOUCHCHAT_CONTAINERS = ("json", "zip")


def default_config() -> Dict[str, Any]:
    return json.loads(json.dumps(_DEFAULT_CONFIG))  # deep copy via JSON


def load_config_file(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load a YAML configuration file if it exists, otherwise return defaults."""

    cfg_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        if path:
            LOG.warning("config not found at %s; using defaults", cfg_path)
        return default_config()
    with cfg_path.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, Mapping):
        LOG.warning("config at %s is not a mapping; using defaults", cfg_path)
        return default_config()
    return merge_dicts(_DEFAULT_CONFIG, loaded)


def merge_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge *override* into *base* returning a new dictionary."""

    out: Dict[str, Any] = json.loads(json.dumps(base))  # deep copy
    stack: list[Tuple[MutableMapping[str, Any], Mapping[str, Any]]] = [(out, override)]
    while stack:
        dest, src = stack.pop()
        for key, value in src.items():
            if isinstance(value, Mapping) and isinstance(dest.get(key), MutableMapping):
                stack.append((dest[key], value))  # type: ignore[arg-type]
            else:
                dest[key] = value  # type: ignore[index]
    return out


def apply_cli_overrides(cfg: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a new config with dot-notation overrides applied."""

    out = json.loads(json.dumps(cfg))
    for dotted_key, value in overrides.items():
        parts = dotted_key.split(".")
        cursor: Any = out
        for part in parts[:-1]:
            cursor = cursor.setdefault(part, {})  # type: ignore[assignment]
        cursor[parts[-1]] = value  # type: ignore[index]
    return out


def _clamp(value: Any, lo: float, hi: float, default: float, *, key: str) -> float:
    """Clamp numeric config values with logging."""

    try:
        v = float(value)
    except (TypeError, ValueError):
        LOG.warning("config[%s]=%r invalid; using default %.3f", key, value, default)
        return float(default)
    if v < lo:
        LOG.warning("config[%s]=%.3f below %.3f; clamped", key, v, lo)
        return float(lo)
    if v > hi:
        LOG.warning("config[%s]=%.3f above %.3f; clamped", key, v, hi)
        return float(hi)
    return v


def prepare_config(raw_cfg: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Validate and normalise configuration:

    * Merge with defaults.
    * Clamp numeric ranges.
    * Resolve the output folder to an absolute path.
    * Fall back to known values for enumerated settings.
    """

    cfg = merge_dicts(_DEFAULT_CONFIG, raw_cfg or {})

    output = cfg.setdefault("output", {})
    output["folder"] = str(Path(output.get("folder") or "exports").expanduser().resolve())

    log_cfg = cfg.setdefault("logging", {})
    level = str(log_cfg.get("level") or "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        LOG.warning("config[logging.level]=%r unknown; using 'INFO'", level)
        level = "INFO"
    log_cfg["level"] = level

    thumb = cfg.setdefault("gridset", {}).setdefault("thumbnail", {})
    thumb["enabled"] = bool(thumb.get("enabled", True))
    thumb["source"] = str(thumb["source"]) if thumb.get("source") else None
    thumb["timeout_sec"] = _clamp(
        thumb.get("timeout_sec", 2.0), 0.1, 30.0, 2.0, key="gridset.thumbnail.timeout_sec"
    )
    thumb["size"] = int(_clamp(thumb.get("size", 256), 16, 1024, 256, key="gridset.thumbnail.size"))

    obz = cfg.setdefault("obz", {})
    obz["compression_level"] = int(
        _clamp(obz.get("compression_level", 6), 0, 9, 6, key="obz.compression_level")
    )
    obz["symbol_url_base"] = str(obz.get("symbol_url_base") or "/api/symbols/svg/")

    touchchat = cfg.setdefault("touchchat", {})
    container = str(touchchat.get("container") or "json").lower()
    if container not in TOUCHCHAT_CONTAINERS:
        LOG.warning("config[touchchat.container]=%r unknown; using 'json'", container)
        container = "json"
    touchchat["container"] = container

    return cfg
