"""
Plugin section lookup and decoding.

The key of a plugin section depends on the schema version of the merged
config: versioned (v2) documents use the `type.id` URI, legacy documents
use the bare plugin id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, is_dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError

from .model import Config
from .paths import CURRENT_VERSION
from .tree import TableValue
from .typed import ConfigLoadError, field_hints, load_typed
from ..errors import DecodeError

_LOG = logging.getLogger(__name__)


@dataclass
class Registration:
    """
    What the plugin registry hands over for one plugin.

    `config` is the decode target: a dict, a dataclass instance or a
    pydantic model instance, pre-filled with the plugin's defaults.
    None means the plugin takes no configuration.
    """
    type: str
    id: str
    config: Any = None

    def uri(self) -> str:
        return f"{self.type}.{self.id}"


def plugin_key(config: Config, registration: Registration) -> str:
    """Key of the registration's section in `config.plugins`."""
    if config.get_version() >= CURRENT_VERSION and registration.type:
        return registration.uri()
    return registration.id


def _decode_into_dict(target: Dict[str, Any], section: TableValue) -> None:
    target.update(section.to_raw())


def _decode_into_dataclass(target: Any, section: TableValue, key: str) -> None:
    hints = field_hints(type(target))
    known = {f.name for f in fields(target) if f.init}
    unknown = [k for k in section.keys() if k not in known]
    if unknown:
        raise DecodeError(f"{key}.{unknown[0]}", f"unknown key for {type(target).__name__}")
    # Coerce everything before assigning anything: a failed decode leaves the target as it was.
    values: Dict[str, Any] = {}
    for name, node in section.items():
        try:
            values[name] = load_typed(hints[name], node, path=f"{key}.{name}")
        except ConfigLoadError as e:
            raise DecodeError(e.path, e.message) from e
    for name, value in values.items():
        setattr(target, name, value)


def _decode_into_model(target: BaseModel, section: TableValue, key: str) -> None:
    raw = section.to_raw()
    model_cls = type(target)
    # section keys may use either the field name or its alias
    names: Dict[str, str] = {}
    for name, info in model_cls.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    current = target.model_dump(by_alias=True)
    for k in raw:
        name = names.get(k)
        if name is not None:
            current.pop(name, None)
            current.pop(model_cls.model_fields[name].alias or name, None)
    try:
        validated = model_cls.model_validate({**current, **raw})
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        raise DecodeError(f"{key}.{loc}" if loc else key, first.get("msg", str(e))) from e
    for k in raw:
        name = names.get(k)
        if name is not None:
            setattr(target, name, getattr(validated, name))


def decode_plugin_config(config: Config, registration: Registration) -> bool:
    """
    Decode the plugin section for `registration` into `registration.config`.

    Returns:
        True if a section was found and decoded; False if the config has no
        section for the plugin (the plugin keeps its defaults)

    Raises:
        DecodeError: the section does not fit the target; `path` names the key
    """
    key = plugin_key(config, registration)
    section: Optional[TableValue] = config.plugins.get(key)
    if section is None:
        _LOG.debug("No config section %s for plugin %s", key, registration.uri())
        return False

    target = registration.config
    _LOG.debug("Decoding config section %s into %s", key, type(target).__name__)
    if target is None:
        raise DecodeError(key, "plugin does not accept configuration")
    if isinstance(target, dict):
        _decode_into_dict(target, section)
    elif isinstance(target, BaseModel):
        _decode_into_model(target, section, key)
    elif is_dataclass(target) and not isinstance(target, type):
        _decode_into_dataclass(target, section, key)
    else:
        raise DecodeError(key, f"unsupported decode target {type(target).__name__}")
    return True


__all__ = ["Registration", "plugin_key", "decode_plugin_config"]
