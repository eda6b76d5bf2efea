from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any, Dict, List, Mapping

from .paths import LEGACY_VERSION
from .tree import TableValue
from .typed import field_hints, load_typed

if TYPE_CHECKING:
    from .plugins import Registration


@dataclass
class GRPCConfig:
    address: str = ""
    tcp_address: str = ""
    tcp_tls_ca: str = ""
    tcp_tls_cert: str = ""
    tcp_tls_key: str = ""
    uid: int = 0
    gid: int = 0
    max_recv_message_size: int = 0
    max_send_message_size: int = 0


@dataclass
class TTRPCConfig:
    address: str = ""
    uid: int = 0
    gid: int = 0


@dataclass
class DebugConfig:
    address: str = ""
    uid: int = 0
    gid: int = 0
    level: str = ""
    format: str = ""                                        # "text" | "json"


@dataclass
class MetricsConfig:
    address: str = ""
    grpc_histogram: bool = False


@dataclass
class CgroupConfig:
    path: str = ""


@dataclass
class StreamProcessor:
    """External binary that converts one media type into another."""
    accepts: List[str] = field(default_factory=list)        # media types consumed
    returns: str = ""                                       # media type produced
    path: str = ""
    args: List[str] = field(default_factory=list)
    env: List[str] = field(default_factory=list)


@dataclass
class ProxyPlugin:
    type: str = ""
    address: str = ""


# Fields that are merged field by field with the scalar rule.
SECTION_FIELDS = ("grpc", "ttrpc", "debug", "metrics", "cgroup")


@dataclass
class Config:
    """
    One daemon configuration document, or the merge of several.

    `plugins` holds one generic tree per plugin section; its keys are bare
    plugin ids for legacy (v1) documents and `type.id` URIs for v2 ones.
    """
    version: int = 0
    root: str = ""
    state: str = ""
    plugin_dir: str = ""
    grpc: GRPCConfig = field(default_factory=GRPCConfig)
    ttrpc: TTRPCConfig = field(default_factory=TTRPCConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    cgroup: CgroupConfig = field(default_factory=CgroupConfig)
    disabled_plugins: List[str] = field(default_factory=list)
    required_plugins: List[str] = field(default_factory=list)
    plugins: Dict[str, TableValue] = field(default_factory=dict)
    oom_score: int = 0
    proxy_plugins: Dict[str, ProxyPlugin] = field(default_factory=dict)
    timeouts: Dict[str, str] = field(default_factory=dict)
    imports: List[str] = field(default_factory=list)
    stream_processors: Dict[str, StreamProcessor] = field(default_factory=dict)

    def get_version(self) -> int:
        """Declared schema version; an unset version means the legacy schema."""
        return self.version or LEGACY_VERSION

    def decode(self, registration: Registration) -> bool:
        """Decode this config's section for `registration` into its target."""
        from .plugins import decode_plugin_config
        return decode_plugin_config(self, registration)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Config:
        """
        Build a Config from a parsed document.

        Unknown top-level keys are ignored. Raises ConfigLoadError
        (from the typed layer) when a known key has the wrong shape.
        """
        hints = field_hints(cls)
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in raw:
                continue
            if f.name == "plugins":
                kwargs["plugins"] = _load_plugin_sections(raw["plugins"])
            else:
                kwargs[f.name] = load_typed(hints[f.name], raw[f.name], path=f.name)
        return cls(**kwargs)


def _load_plugin_sections(raw: Any) -> Dict[str, TableValue]:
    tables = load_typed(Dict[str, Dict[str, Any]], raw, path="plugins")
    return {key: TableValue.from_mapping(body, path=f"plugins.{key}") for key, body in tables.items()}


__all__ = [
    "Config",
    "GRPCConfig",
    "TTRPCConfig",
    "DebugConfig",
    "MetricsConfig",
    "CgroupConfig",
    "StreamProcessor",
    "ProxyPlugin",
    "SECTION_FIELDS",
]
