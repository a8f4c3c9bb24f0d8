# services/config.py
"""Config loading for chirpterm.

The file lives in the data directory (``CHIRPTERM_DATA_PATH``, default
``data``) as ``config.json``, ``config.yaml``/``config.yml`` or
``config.toml``; the format is inferred from the extension:
  .json        → JSON
  .yaml / .yml → YAML  (pyyaml)
  .toml        → TOML  (read: stdlib tomllib; write: tomli-w)

A missing file is not an error: every setting has a default.
"""
from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

import services.util as u
import services.logger as log
from services.config_schema import AppConfig

l = log.get_logger()

_YAML_EXTS = {".yaml", ".yml"}
_TOML_EXTS = {".toml"}

_CONFIG_NAMES = ["config.json", "config.yaml", "config.yml", "config.toml"]

# Config keys whose values are credentials; matched as substrings of the
# lower-cased key name.
_SENSITIVE_KEY_PATTERNS = ("token", "secret", "password")

_raw_cache: dict[str, Any] | None = None
_app_cache: AppConfig | None = None


def find_config(directory: Path) -> Path | None:
    """Return the first existing config file found in *directory*."""
    for name in _CONFIG_NAMES:
        p = directory / name
        if p.is_file():
            return p
    return None


def load_file(path: Path) -> dict[str, Any]:
    """Load one config file; format is inferred from the file extension."""
    ext = path.suffix.lower()
    if ext in _YAML_EXTS:
        import yaml  # pyyaml
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    if ext in _TOML_EXTS:
        with open(path, "rb") as f:
            return tomllib.load(f)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def save_file(data: dict[str, Any], path: Path) -> None:
    """Write *data* to *path*; format is inferred from the file extension."""
    path.parent.mkdir(parents=True, exist_ok=True)
    ext = path.suffix.lower()
    if ext in _YAML_EXTS:
        import yaml  # pyyaml
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, allow_unicode=True, sort_keys=False, default_flow_style=False)
        return
    if ext in _TOML_EXTS:
        import tomli_w
        with open(path, "wb") as f:
            tomli_w.dump(data, f)
        return
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def load_raw() -> dict[str, Any]:
    """Load (once) and return the raw config dict of the data directory."""
    global _raw_cache

    if _raw_cache is not None:
        return _raw_cache

    path = find_config(Path(u.get_data_path()))
    if path is None:
        l.debug(f"No config file in {u.get_data_path()}, using defaults")
        _raw_cache = {}
        return _raw_cache

    try:
        _raw_cache = load_file(path)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON decode error: {path}, Error: {e}")
    l.info(f"Loaded config from: {path}")
    return _raw_cache


def app_config() -> AppConfig:
    """Return the validated application settings."""
    global _app_cache
    if _app_cache is None:
        _app_cache = AppConfig.model_validate(load_raw())
    return _app_cache


def reset() -> None:
    """Forget cached config so the next access reloads from disk."""
    global _raw_cache, _app_cache
    _raw_cache = None
    _app_cache = None


def get(key: str, default=None):
    """
    Return a config value by dotted key, e.g. ``get("rest.main.base_url")``.

    :param key: Key path, segments separated by '.'
    :param default: Returned when the file can't be read or the key is absent
    """
    try:
        value = load_raw()
    except Exception as e:
        l.warning(f"Failed to load config file! Error: {e}")
        return default

    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default
    return value


def collect_sensitive(obj, found: set[str] | None = None) -> frozenset[str]:
    """Recursively gather credential values from a raw config dict."""
    if found is None:
        found = set()
    if isinstance(obj, dict):
        for k, v in obj.items():
            if isinstance(v, str) and v and any(p in str(k).lower() for p in _SENSITIVE_KEY_PATTERNS):
                found.add(v)
            else:
                collect_sensitive(v, found)
    elif isinstance(obj, list):
        for item in obj:
            collect_sensitive(item, found)
    return frozenset(found)
