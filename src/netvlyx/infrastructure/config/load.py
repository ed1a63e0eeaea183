from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTION_KEYS: set[str] = {"templates", "api", "drive", "resolve", "logging", "fetch"}

# Flat key -> (section, key inside section)
_FLAT_MAP: dict[str, tuple[str, str]] = {
    "template_dir": ("templates", "template_dir"),
    "default_template": ("templates", "default"),
    "api_rate_limit_rpm": ("api", "rate_limit_rpm"),
    "origin_guard_enabled": ("api", "origin_guard_enabled"),
    "allowed_origins": ("api", "allowed_origins"),
    "drive_hosts": ("drive", "hosts"),
    "hubdrive_host": ("resolve", "hubdrive_host"),
    "mirror_host": ("resolve", "mirror_host"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "external_url": ("fetch", "external_url"),
    "direct_timeout_seconds": ("fetch", "direct_timeout_seconds"),
    "proxy_timeout_seconds": ("fetch", "proxy_timeout_seconds"),
    "external_timeout_seconds": ("fetch", "external_timeout_seconds"),
    "overall_deadline_seconds": ("fetch", "overall_deadline_seconds"),
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """
    Recursively merge `override` into `base` and return `base`.

    Rules:
    - dict + dict => deep merge
    - otherwise => override wins
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, Mapping):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _normalize_layer(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Normalize a layer (defaults/YAML/ENV/CLI) into the canonical *sectioned* shape.

    Canonical top-level keys:
    - app_name, environment, tmdb_api_key
    - templates.template_dir, templates.default
    - api.rate_limit_rpm, api.origin_guard_enabled, api.allowed_origins
    - drive.hosts
    - resolve.hubdrive_host, resolve.mirror_host
    - logging.level, logging.format
    - fetch.* (see FetchConfig)
    """
    out: dict[str, Any] = {}

    for section in _SECTION_KEYS:
        if section in data and isinstance(data[section], Mapping):
            out[section] = dict(data[section])

    for key in ("app_name", "environment", "tmdb_api_key"):
        if key in data:
            out[key] = data[key]

    for flat_key, (section, section_key) in _FLAT_MAP.items():
        if flat_key in data:
            out.setdefault(section, {})
            out[section][section_key] = data[flat_key]

    return out


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    raw = config_path.read_text(encoding="utf-8")
    parsed = yaml.safe_load(raw)
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def _to_model_input(sectioned: Mapping[str, Any]) -> dict[str, Any]:
    # ``fetch`` is a nested model, every other section is read via AliasPath.
    data = dict(sectioned)
    data["fetch"] = dict(data.get("fetch", {}))
    return data


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with strict precedence:
    defaults < YAML file < env vars < cli overrides

    This function MUST NOT create files or directories (no filesystem side-effects).
    """
    cli_overrides = cli_overrides or {}

    # Load .env first so it participates as "env vars" layer.
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    base = _normalize_layer(deepcopy(DEFAULT_CONFIG))

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(config_path)
        _deep_merge(base, _normalize_layer(_read_yaml_config(config_path)))

    _deep_merge(base, _normalize_layer(EnvOverrides().to_update_dict()))
    _deep_merge(base, _normalize_layer(cli_overrides))

    # Validate final merged config (single source of truth).
    return AppConfig.model_validate(_to_model_input(base))
