"""
strata: layered configuration for a plugin-based daemon.

Loads a root document plus the transitive closure of its imports,
merges them into one effective Config and decodes per-plugin sections.
"""

from __future__ import annotations

from .logs import setup_logging_once
from .config import Config, Registration, load_config, merge_config, decode_plugin_config
from .errors import (
    StrataUserError,
    ParseError,
    InvalidPatternError,
    ConfigPathError,
    DecodeError,
    ConfigMergeError,
    ConfigValidationError,
)

setup_logging_once()

__all__ = [
    "Config",
    "Registration",
    "load_config",
    "merge_config",
    "decode_plugin_config",
    "StrataUserError",
    "ParseError",
    "InvalidPatternError",
    "ConfigPathError",
    "DecodeError",
    "ConfigMergeError",
    "ConfigValidationError",
]
