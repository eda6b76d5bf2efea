from __future__ import annotations

from pathlib import Path

# Single source of truth for schema versions and document formats.
LEGACY_VERSION = 1
CURRENT_VERSION = 2

# io.containerd.<kind>.<version>[.<id>]
MIN_PLUGIN_URI_PARTS = 4

TOML_SUFFIXES = (".toml",)
YAML_SUFFIXES = (".yaml", ".yml")

DEBUG_ENV = "STRATA_CONFIG_DEBUG"

GLOB_CHARS = frozenset("*?[")


def is_yaml_document(path: Path) -> bool:
    """YAML is picked by suffix; everything else is read as TOML."""
    return path.suffix.lower() in YAML_SUFFIXES


def has_glob(pattern: str) -> bool:
    """Quick check whether an import entry needs filesystem expansion."""
    return any(ch in GLOB_CHARS for ch in pattern)
