"""
Configuration loading for strata.
"""

from __future__ import annotations

from .model import (
    Config,
    GRPCConfig,
    TTRPCConfig,
    DebugConfig,
    MetricsConfig,
    CgroupConfig,
    StreamProcessor,
    ProxyPlugin,
)
from .load import load_config
from .merge import merge_config
from .imports import ImportResolver, resolve_imports
from .plugins import Registration, plugin_key, decode_plugin_config
from .validation import validate_v2
from .paths import LEGACY_VERSION, CURRENT_VERSION

__all__ = [
    "Config",
    "GRPCConfig",
    "TTRPCConfig",
    "DebugConfig",
    "MetricsConfig",
    "CgroupConfig",
    "StreamProcessor",
    "ProxyPlugin",
    "load_config",
    "merge_config",
    "ImportResolver",
    "resolve_imports",
    "Registration",
    "plugin_key",
    "decode_plugin_config",
    "validate_v2",
    "LEGACY_VERSION",
    "CURRENT_VERSION",
]
