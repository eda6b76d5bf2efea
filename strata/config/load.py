from __future__ import annotations

import logging
from pathlib import Path

from .document import parse_config
from .imports import ImportResolver, normalize_path
from .merge import merge_config
from .model import Config

_LOG = logging.getLogger(__name__)


def load_config(path: Path | str) -> Config:
    """
    Load the effective configuration rooted at `path`.

    The root document is the first base; every document of its import
    closure is folded in as a donor, in discovery order, so later imports
    take precedence on conflicting scalars and records.

    Plugin URI checks for versioned documents are not part of loading;
    callers that want them run `validate_v2` on the result.

    Args:
        path: Root document (TOML or YAML)

    Returns:
        Merged Config; `imports` lists the root and every resolved import

    Raises:
        ConfigPathError: a document cannot be read or an entry cannot be resolved
        ParseError: a document is malformed
        InvalidPatternError: an import entry has malformed wildcard syntax
    """
    root_path = normalize_path(str(path))
    _LOG.info("Loading config %s", root_path)
    cfg = parse_config(root_path)

    resolved = ImportResolver().resolve(root_path, cfg.imports)

    for import_path in resolved:
        _LOG.info("Loading imported config %s", import_path)
        child = parse_config(import_path)
        cfg = merge_config(cfg, child)
        _LOG.debug("Merged %s into %s", import_path, root_path)

    cfg.imports = [str(p) for p in [root_path, *resolved]]
    return cfg


__all__ = ["load_config"]
