"""
Generic document-tree values.

Plugin sections are kept as an explicit tagged variant instead of raw
parser output, so merge and decode code can dispatch on the node kind:

- NullValue
- BoolValue
- NumberValue (int or float)
- StringValue
- SequenceValue
- TableValue (string keys)

Nodes are immutable; `to_raw()` always builds fresh plain containers.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Tuple, Union


class Kind(str, Enum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    TABLE = "table"


@dataclass(frozen=True)
class NullValue:
    kind = Kind.NULL

    def to_raw(self) -> None:
        return None


@dataclass(frozen=True)
class BoolValue:
    value: bool
    kind = Kind.BOOL

    def to_raw(self) -> bool:
        return self.value


@dataclass(frozen=True)
class NumberValue:
    value: Union[int, float]
    kind = Kind.NUMBER

    def to_raw(self) -> Union[int, float]:
        return self.value


@dataclass(frozen=True)
class StringValue:
    value: str
    kind = Kind.STRING

    def to_raw(self) -> str:
        return self.value


@dataclass(frozen=True)
class SequenceValue:
    items: Tuple["TreeValue", ...] = ()
    kind = Kind.SEQUENCE

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["TreeValue"]:
        return iter(self.items)

    def to_raw(self) -> list:
        return [item.to_raw() for item in self.items]


@dataclass(frozen=True)
class TableValue:
    """String-keyed table. Key order follows the source document but does not affect equality."""
    entries: Tuple[Tuple[str, "TreeValue"], ...] = field(default=(), compare=False)
    kind = Kind.TABLE
    _index: Dict[str, "TreeValue"] = field(init=False, repr=False, compare=True, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", dict(self.entries))

    def __hash__(self) -> int:
        return hash(frozenset(self._index.items()))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __getitem__(self, key: str) -> "TreeValue":
        return self._index[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self._index.get(key, default)

    def keys(self) -> Iterator[str]:
        return (k for k, _ in self.entries)

    def items(self) -> Iterator[Tuple[str, "TreeValue"]]:
        return iter(self.entries)

    def to_raw(self) -> Dict[str, Any]:
        return {k: v.to_raw() for k, v in self.entries}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, path: str = "$") -> "TableValue":
        node = from_raw(data, path=path)
        if not isinstance(node, TableValue):
            raise TypeError(f"{path}: expected table, got {node.kind.value}")
        return node


TreeValue = Union[NullValue, BoolValue, NumberValue, StringValue, SequenceValue, TableValue]

NULL = NullValue()


def from_raw(val: Any, *, path: str = "$") -> TreeValue:
    """
    Build a tree node from a parser result (dict/list/scalars).

    Date and time values are carried as ISO-8601 strings.
    Raises TypeError with the key path for anything else.
    """
    if val is None:
        return NULL
    # bool before int: bool is an int subclass
    if isinstance(val, bool):
        return BoolValue(val)
    if isinstance(val, (int, float)):
        return NumberValue(val)
    if isinstance(val, str):
        return StringValue(val)
    if isinstance(val, (_dt.datetime, _dt.date, _dt.time)):
        return StringValue(val.isoformat())
    if isinstance(val, Mapping):
        entries = []
        for k, v in val.items():
            if not isinstance(k, str):
                raise TypeError(f"{path}: table keys must be strings, got {type(k).__name__}")
            entries.append((k, from_raw(v, path=f"{path}.{k}")))
        return TableValue(tuple(entries))
    if isinstance(val, (list, tuple)):
        return SequenceValue(tuple(from_raw(v, path=f"{path}[{i}]") for i, v in enumerate(val)))
    raise TypeError(f"{path}: unsupported value type {type(val).__name__}")


__all__ = [
    "Kind",
    "NullValue",
    "BoolValue",
    "NumberValue",
    "StringValue",
    "SequenceValue",
    "TableValue",
    "TreeValue",
    "NULL",
    "from_raw",
]
