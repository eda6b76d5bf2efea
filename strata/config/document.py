"""
Reading one configuration document from disk.

The syntax is picked by suffix: `.yaml`/`.yml` go through ruamel.yaml
(safe loader), everything else is read as TOML.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .model import Config
from .paths import is_yaml_document
from .typed import ConfigLoadError
from ..errors import ConfigPathError, ParseError

_LOG = logging.getLogger(__name__)

_yaml = YAML(typ="safe")


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigPathError(str(path), "no such file") from e
    except UnicodeDecodeError as e:
        raise ParseError(path, f"not valid UTF-8: {e}") from e
    except OSError as e:
        raise ConfigPathError(str(path), e.strerror or str(e)) from e


def read_document(path: Path) -> Dict[str, Any]:
    """
    Parse a document into a plain mapping.

    Empty documents are treated as empty mappings.

    Raises:
        ConfigPathError: if the file cannot be read
        ParseError: on malformed syntax or a non-mapping root
    """
    text = _read_text(path)
    if is_yaml_document(path):
        try:
            raw = _yaml.load(text)
        except YAMLError as e:
            raise ParseError(path, str(e)) from e
    else:
        try:
            raw = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ParseError(path, str(e)) from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ParseError(path, f"document root must be a table, got {type(raw).__name__}")
    return raw


def parse_config(path: Path) -> Config:
    """Parse one document into a Config, without following its imports."""
    raw = read_document(path)
    try:
        cfg = Config.from_dict(raw)
    except ConfigLoadError as e:
        raise ParseError(path, str(e)) from e
    except TypeError as e:
        raise ParseError(path, str(e)) from e
    _LOG.debug("Parsed %s (version=%d, %d plugin section(s), %d import(s))",
               path, cfg.version, len(cfg.plugins), len(cfg.imports))
    return cfg


__all__ = ["read_document", "parse_config"]
