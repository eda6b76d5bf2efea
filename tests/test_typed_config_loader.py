from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Literal, Optional, Tuple

import pytest

from strata.config.model import Config, StreamProcessor
from strata.config.tree import TableValue
from strata.config.typed import ConfigLoadError, load_typed


class Level(Enum):
    INFO = "info"
    DEBUG = "debug"


@dataclass
class Mirror:
    endpoint: List[str] = field(default_factory=list)


@dataclass
class RegistryCfg:
    config_path: str = ""
    mirrors: Dict[str, Mirror] = field(default_factory=dict)
    level: Level = Level.INFO
    mode: Literal["a", "b"] = "a"
    timeout: Optional[float] = None
    pair: Tuple[int, str] = (0, "")


def test_build_nested_dataclasses():
    raw = {
        "config_path": "/etc/certs.d",
        "mirrors": {"docker.io": {"endpoint": ["https://mirror.local"]}},
        "level": "debug",
        "mode": "b",
        "timeout": 3,
        "pair": [1, "x"],
    }

    cfg = load_typed(RegistryCfg, raw)

    assert cfg.mirrors["docker.io"] == Mirror(endpoint=["https://mirror.local"])
    assert cfg.level is Level.DEBUG
    assert cfg.mode == "b"
    assert cfg.timeout == 3.0 and isinstance(cfg.timeout, float)
    assert cfg.pair == (1, "x")


def test_enum_by_name():
    assert load_typed(Level, "DEBUG") is Level.DEBUG


def test_unknown_key_in_nested_model_raises():
    raw = {"mirrors": {"docker.io": {"endpoint": [], "unknown_field": 123}}}

    with pytest.raises(ConfigLoadError) as ei:
        load_typed(RegistryCfg, raw, path="registry")

    assert ei.value.path == "registry.mirrors.docker.io"
    assert "unknown_field" in str(ei.value)


def test_sequence_item_path():
    with pytest.raises(ConfigLoadError) as ei:
        load_typed(StreamProcessor, {"accepts": ["a", 1]}, path="sp")
    assert ei.value.path == "sp.accepts[1]"


def test_bool_is_not_int():
    with pytest.raises(ConfigLoadError):
        load_typed(int, True)
    with pytest.raises(ConfigLoadError):
        load_typed(bool, 1)


def test_optional_accepts_null():
    assert load_typed(RegistryCfg, {"timeout": None}).timeout is None


def test_tuple_length_mismatch():
    with pytest.raises(ConfigLoadError) as ei:
        load_typed(RegistryCfg, {"pair": [1]})
    assert ei.value.path == "$.pair"


def test_tree_nodes_are_accepted():
    node = TableValue.from_mapping({"endpoint": ["https://m"]})
    assert load_typed(Mirror, node) == Mirror(endpoint=["https://m"])


def test_config_from_dict_ignores_unknown_keys():
    cfg = Config.from_dict({"root": "/r", "not_a_field": {"x": 1}})
    assert cfg == Config(root="/r")


def test_variadic_tuple():
    assert load_typed(Tuple[int, ...], [1, 2, 3]) == (1, 2, 3)


def test_unsupported_target_type():
    with pytest.raises(ConfigLoadError) as ei:
        load_typed(set, [1], path="x")
    assert ei.value.path == "x"
