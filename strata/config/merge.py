"""
Merge algebra for configuration documents.

`merge_config(base, donor)` layers `donor` over `base` and returns a new
Config. Rules per field kind:
- scalars: donor wins unless it holds its type's zero value
- typed sections (grpc, debug, ...): scalar rule field by field
- sequences: base followed by donor, no dedup
- record maps (stream_processors, proxy_plugins): key union, donor record
  replaces the base record wholesale on collision
- string maps (timeouts): key union, donor wins
- plugin sections: union of plugin keys, and for a plugin configured on
  both sides a union of the entries of its table; an entry present on both
  sides is replaced by the donor's whole subtree, deeper keys are never
  merged. Two documents that set different fields of the same entry
  (e.g. `cni.bin_dir` and `cni.conf_dir`) do not combine: the later wins.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import fields, replace
from typing import Any, Dict, TypeVar

from .model import Config, SECTION_FIELDS
from .tree import TableValue
from ..errors import ConfigMergeError

_LOG = logging.getLogger(__name__)

_S = TypeVar("_S")

_SEQUENCE_FIELDS = ("disabled_plugins", "required_plugins", "imports")
_RECORD_MAP_FIELDS = ("stream_processors", "proxy_plugins")
_STRING_MAP_FIELDS = ("timeouts",)


def _is_zero(val: Any) -> bool:
    # 0, "", False
    return not val


def _merge_scalar(base: Any, donor: Any) -> Any:
    return base if _is_zero(donor) else donor


def _merge_section(base: _S, donor: _S) -> _S:
    """Apply the scalar rule to every field of a flat typed section."""
    changes = {
        f.name: _merge_scalar(getattr(base, f.name), getattr(donor, f.name))
        for f in fields(base)  # type: ignore[arg-type]
    }
    return replace(base, **changes)  # type: ignore[type-var]


def _merge_record_map(base: Dict[str, Any], donor: Dict[str, Any]) -> Dict[str, Any]:
    result = {k: copy.deepcopy(v) for k, v in base.items()}
    for key, record in donor.items():
        result[key] = copy.deepcopy(record)
    return result


def _merge_plugin_section(key: str, base: TableValue, donor: TableValue) -> TableValue:
    """
    Union of the top-level entries of one plugin's table.

    An entry present on both sides is taken from the donor as a whole:
    `{cni: {bin_dir}}` + `{cni: {conf_dir}}` gives `{cni: {conf_dir}}`.
    """
    entries = dict(base.items())
    for name, node in donor.items():
        if name in entries:
            _LOG.debug("Plugin section %s: entry %s replaced by donor", key, name)
        entries[name] = node
    return TableValue(tuple(entries.items()))


def _merge_plugin_sections(
    base: Dict[str, TableValue],
    donor: Dict[str, TableValue],
) -> Dict[str, TableValue]:
    # Tree nodes are immutable, so sharing them between configs is safe.
    result = dict(base)
    for key, section in donor.items():
        if not isinstance(section, TableValue):
            raise ConfigMergeError(
                f"plugin section {key!r} must be a table, got {type(section).__name__}"
            )
        if key in result:
            result[key] = _merge_plugin_section(key, result[key], section)
        else:
            result[key] = section
    return result


def merge_config(base: Config, donor: Config) -> Config:
    """
    Layer `donor` over `base`, donor wins on conflicts.

    Neither operand is mutated; the result shares no mutable
    containers with them.

    Raises:
        ConfigMergeError: if a donor plugin section is not a table
    """
    merged: Dict[str, Any] = {}
    for f in fields(Config):
        name = f.name
        b, d = getattr(base, name), getattr(donor, name)
        if name in SECTION_FIELDS:
            merged[name] = _merge_section(b, d)
        elif name in _SEQUENCE_FIELDS:
            merged[name] = list(b) + list(d)
        elif name in _RECORD_MAP_FIELDS:
            merged[name] = _merge_record_map(b, d)
        elif name in _STRING_MAP_FIELDS:
            merged[name] = {**b, **d}
        elif name == "plugins":
            merged[name] = _merge_plugin_sections(b, d)
        else:
            merged[name] = _merge_scalar(b, d)
    return Config(**merged)


__all__ = ["merge_config"]
