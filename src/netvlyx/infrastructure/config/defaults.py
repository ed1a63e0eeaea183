"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "netvlyx",
    "environment": "dev",
    "templates": {
        "template_dir": None,  # Bundled templates
        "default": "vega",
    },
    "api": {
        "rate_limit_rpm": 120,
        "origin_guard_enabled": True,
        "allowed_origins": [],
    },
    "drive": {
        "hosts": ["nexdrive.pro", "nexdrive.biz", "nexdrive.ink"],
    },
    "resolve": {
        "hubdrive_host": "hubdrive.wales",
        "mirror_host": "90fpsconfig.in",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "fetch": {
        "external_url": "https://vlyx-scrapping.vercel.app/api/index",
        "direct_timeout_seconds": 15.0,
        "proxy_timeout_seconds": 30.0,
        "external_timeout_seconds": 30.0,
        "max_redirects": 5,
    },
}
