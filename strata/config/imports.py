"""
Import resolver for configuration documents.

Turns the `imports` entries of a document into an ordered, deduplicated
list of absolute paths and follows the imports of every resolved document:
- entries are relative to the directory of the declaring document
- wildcard entries are expanded and sorted lexicographically
- depth-first, left-to-right traversal
- a shared visited set makes every cycle terminate
"""

from __future__ import annotations

import glob
import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Set

from .document import parse_config
from .paths import has_glob
from ..errors import ConfigPathError, InvalidPatternError

_LOG = logging.getLogger(__name__)

ImportsReader = Callable[[Path], List[str]]


def _read_declared_imports(path: Path) -> List[str]:
    return parse_config(path).imports


def normalize_path(path: str) -> Path:
    """Absolute path with `.`/`..` collapsed. Symlinks are left alone."""
    if not path:
        raise ConfigPathError(path, "empty import path")
    if "\x00" in path:
        raise ConfigPathError(path, "embedded NUL byte")
    try:
        return Path(os.path.normpath(os.path.abspath(path)))
    except (OSError, ValueError) as e:
        raise ConfigPathError(path, str(e)) from e


def check_pattern(pattern: str) -> None:
    """
    Reject wildcard syntax the filesystem matcher would silently take literally.

    Raises:
        InvalidPatternError: on an unclosed or empty `[...]` class
    """
    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] != "[":
            i += 1
            continue
        j = i + 1
        if j < n and pattern[j] in "!^":
            j += 1
        if j < n and pattern[j] == "]":
            raise InvalidPatternError(pattern, f"empty character class at offset {i}")
        close = pattern.find("]", j)
        if close < 0:
            raise InvalidPatternError(pattern, f"unclosed character class at offset {i}")
        i = close + 1


class ImportResolver:
    """
    Resolver for the import closure of one root document.

    One instance serves one resolution; the visited set is private to it.
    """

    def __init__(self, read_imports: Optional[ImportsReader] = None):
        """
        Args:
            read_imports: returns the raw `imports` entries of a document;
                          defaults to parsing the document from disk
        """
        self._read_imports = read_imports or _read_declared_imports
        self._visited: Set[Path] = set()

    def resolve(self, declaring_path: Path | str, patterns: Sequence[str]) -> List[Path]:
        """
        Resolve `patterns` declared by `declaring_path` and, recursively,
        the imports of every document they name.

        The declaring document is treated as already visited, so a document
        importing itself (directly or through a cycle) is never re-read.

        Returns:
            Resolved paths in discovery order, each at most once

        Raises:
            InvalidPatternError: malformed wildcard entry
            ConfigPathError: entry that cannot be turned into a path
            ParseError: a reachable document does not parse
        """
        root = normalize_path(str(declaring_path))
        self._visited.add(root)
        out: List[Path] = []
        self._walk(root, patterns, out)
        return out

    def _walk(self, declaring: Path, patterns: Sequence[str], out: List[Path]) -> None:
        for pattern in patterns:
            for path in self._expand(declaring.parent, pattern):
                if path in self._visited:
                    _LOG.debug("Import %s from %s already visited, skipping", path, declaring)
                    continue
                self._visited.add(path)
                out.append(path)
                _LOG.debug("Import %s resolved from %s", path, declaring)
                if path.is_file():
                    self._walk(path, self._read_imports(path), out)

    def _expand(self, base_dir: Path, pattern: str) -> List[Path]:
        """Turn one entry into zero or more normalized paths."""
        if not pattern:
            raise ConfigPathError(pattern, "empty import path")
        if not has_glob(pattern):
            joined = pattern if os.path.isabs(pattern) else os.path.join(base_dir, pattern)
            return [normalize_path(joined)]

        check_pattern(pattern)
        if "\x00" in pattern:
            raise ConfigPathError(pattern, "embedded NUL byte")
        # only the entry itself is a pattern, not the directory it is relative to
        joined = pattern if os.path.isabs(pattern) else os.path.join(glob.escape(str(base_dir)), pattern)
        try:
            matches = glob.glob(joined, include_hidden=True)
        except OSError as e:
            raise ConfigPathError(joined, e.strerror or str(e)) from e
        return [normalize_path(m) for m in sorted(matches)]


def resolve_imports(declaring_path: Path | str, patterns: Sequence[str]) -> List[Path]:
    """Resolve the import closure of one document with a fresh resolver."""
    return ImportResolver().resolve(declaring_path, patterns)


__all__ = ["ImportResolver", "resolve_imports", "normalize_path", "check_pattern"]
