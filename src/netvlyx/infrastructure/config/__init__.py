from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, FetchConfig

__all__ = ["AppConfig", "EnvOverrides", "FetchConfig", "load_config"]
