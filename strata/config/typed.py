from __future__ import annotations

import dataclasses
import logging
import typing as t
from enum import Enum
from types import UnionType
from typing import Any, get_args, get_origin

from pydantic import BaseModel, ValidationError

from .tree import TableValue, SequenceValue, NullValue, BoolValue, NumberValue, StringValue

_LOG = logging.getLogger("strata.config.typed")

_TREE_NODES = (TableValue, SequenceValue, NullValue, BoolValue, NumberValue, StringValue)


class ConfigLoadError(ValueError):
    """Typed config coercion error that carries the offending key path."""
    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or str(tp)


def _err(path: str, msg: str) -> ConfigLoadError:
    _LOG.debug("Coercion failed at %s: %s", path, msg)
    return ConfigLoadError(path, msg)


def field_hints(tp: Any) -> dict[str, Any]:
    """Resolved type hint per dataclass field name."""
    hints = t.get_type_hints(tp)
    return {f.name: hints.get(f.name, f.type) for f in dataclasses.fields(tp)}


def _to_literal(val: Any, tp: Any, path: str) -> Any:
    allowed = get_args(tp)
    if val in allowed:
        return val
    raise _err(path, f"expected one of {list(allowed)!r}, got {val!r}")


def _to_enum(val: Any, tp: type[Enum], path: str) -> Enum:
    if isinstance(val, str) and val in tp.__members__:
        return tp[val]
    try:
        return tp(val)
    except ValueError:
        raise _err(path, f"expected enum {_type_name(tp)}, got {val!r}") from None


def _to_optional_or_union(val: Any, tp: Any, path: str) -> Any:
    variants = get_args(tp)
    if val is None:
        if type(None) in variants:
            return None
        raise _err(path, f"expected {_type_name(tp)}, got null")
    messages: list[str] = []
    for sub in variants:
        if sub is type(None):
            continue
        try:
            return load_typed(sub, val, path=path)
        except ConfigLoadError as e:
            messages.append(e.message)
    raise _err(path, " | ".join(messages))


def _to_dict(val: Any, tp: Any, path: str) -> dict:
    if not isinstance(val, dict):
        raise _err(path, f"expected table, got {type(val).__name__}")
    kt, vt = get_args(tp) or (Any, Any)
    return {
        load_typed(kt, k, path=f"{path}.<key>"): load_typed(vt, v, path=f"{path}.{k}")
        for k, v in val.items()
    }


def _to_list_or_tuple(val: Any, tp: Any, path: str) -> Any:
    if not isinstance(val, (list, tuple)):
        raise _err(path, f"expected array, got {type(val).__name__}")
    args = get_args(tp)
    if tp is not tuple and get_origin(tp) is not tuple:
        et = args[0] if args else Any
        return [load_typed(et, v, path=f"{path}[{i}]") for i, v in enumerate(val)]
    if len(args) == 2 and args[1] is Ellipsis:
        return tuple(load_typed(args[0], v, path=f"{path}[{i}]") for i, v in enumerate(val))
    if args and len(args) != len(val):
        raise _err(path, f"expected array of length {len(args)}, got {len(val)}")
    return tuple(load_typed(at, v, path=f"{path}[{i}]") for i, (at, v) in enumerate(zip(args, val)))


def _to_dataclass(val: Any, tp: Any, path: str) -> Any:
    if not isinstance(val, dict):
        raise _err(path, f"expected table for {_type_name(tp)}, got {type(val).__name__}")
    hints = field_hints(tp)
    init_fields = {f.name: f for f in dataclasses.fields(tp) if f.init}
    extras = sorted(set(val) - set(init_fields))
    if extras:
        raise _err(path, f"unknown key(s): {extras}")
    kwargs: dict[str, Any] = {}
    for name, f in init_fields.items():
        if name in val:
            kwargs[name] = load_typed(hints[name], val[name], path=f"{path}.{name}")
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            raise _err(f"{path}.{name}", "required field missing")
    return tp(**kwargs)


def _to_model(val: Any, tp: type[BaseModel], path: str) -> BaseModel:
    try:
        return tp.model_validate(val)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        raise _err(f"{path}.{loc}" if loc else path, first.get("msg", str(e))) from e


def _to_primitive(val: Any, tp: type, path: str) -> Any:
    # bool is an int subclass; keep them apart
    if isinstance(val, bool) and tp is not bool:
        raise _err(path, f"expected {_type_name(tp)}, got bool")
    if tp is float and isinstance(val, int):
        return float(val)
    if not isinstance(val, tp):
        raise _err(path, f"expected {_type_name(tp)}, got {type(val).__name__}")
    return val


def load_typed(tp: Any, val: Any, *, path: str = "$") -> Any:
    """
    Recursive raw→typed coercion driven by the annotation `tp`.

    Accepts plain parser output or tree nodes (converted with `to_raw()`).
    Raises ConfigLoadError naming the key path of the first mismatch.
    """
    if isinstance(val, _TREE_NODES):
        val = val.to_raw()

    origin = get_origin(tp)
    _LOG.debug("load_typed: path=%s, tp=%s, val-type=%s", path, _type_name(tp), type(val).__name__)

    if tp is Any:
        return val
    if isinstance(tp, type) and issubclass(tp, BaseModel):
        return _to_model(val, tp, path)
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return _to_dataclass(val, tp, path)
    if origin is t.Literal:
        return _to_literal(val, tp, path)
    if origin in (t.Union, UnionType):
        return _to_optional_or_union(val, tp, path)
    if origin is dict or tp is dict:
        return _to_dict(val, tp, path)
    if origin in (list, tuple) or tp in (list, tuple):
        return _to_list_or_tuple(val, tp, path)
    if isinstance(tp, type) and issubclass(tp, Enum):
        return _to_enum(val, tp, path)
    if tp in (str, int, float, bool):
        return _to_primitive(val, tp, path)

    raise _err(path, f"unsupported target type {_type_name(tp)}")


__all__ = ["ConfigLoadError", "load_typed", "field_hints"]
