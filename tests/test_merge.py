"""
Merge algebra: scalars override unless zero, sequences concatenate,
record maps replace whole records, plugin sections merge one level deep.
"""

from strata.config import Config, merge_config
from strata.config.model import GRPCConfig, ProxyPlugin, StreamProcessor, DebugConfig
from strata.config.tree import TableValue


def _plugins(data: dict) -> dict:
    return {key: TableValue.from_mapping(body) for key, body in data.items()}


def _raw_plugins(cfg: Config) -> dict:
    return {key: section.to_raw() for key, section in cfg.plugins.items()}


def test_merge_configs():
    a = Config(
        version=2,
        root="old_root",
        required_plugins=["old_plugin"],
        disabled_plugins=["old_plugin"],
        state="old_state",
        oom_score=1,
        timeouts={"a": "1"},
        stream_processors={"1": StreamProcessor(path="2", returns="4"), "2": StreamProcessor(path="5")},
    )
    b = Config(
        root="new_root",
        required_plugins=["new_plugin1", "new_plugin2"],
        oom_score=2,
        timeouts={"b": "2"},
        stream_processors={"1": StreamProcessor(path="3")},
    )

    out = merge_config(a, b)

    assert out.version == 2
    assert out.root == "new_root"
    assert out.state == "old_state"
    assert out.oom_score == 2
    assert out.required_plugins == ["old_plugin", "new_plugin1", "new_plugin2"]
    assert out.disabled_plugins == ["old_plugin"]
    assert out.timeouts == {"a": "1", "b": "2"}
    # donor record for "1" replaces the base record: returns="4" is gone
    assert out.stream_processors == {"1": StreamProcessor(path="3"), "2": StreamProcessor(path="5")}


def test_empty_donor_scalar_keeps_base():
    assert merge_config(Config(root="old"), Config(root="")).root == "old"
    assert merge_config(Config(root="old"), Config(root="new")).root == "new"


def test_merge_with_zero_config_is_identity():
    a = Config(
        version=2,
        root="/r",
        state="/s",
        oom_score=-500,
        grpc=GRPCConfig(address="/run/d.sock", uid=1),
        timeouts={"io.containerd.timeout.shim.cleanup": "5s"},
        required_plugins=["io.containerd.grpc.v1.cri"],
        proxy_plugins={"snap": ProxyPlugin(type="snapshot", address="/run/snap.sock")},
        plugins=_plugins({"io.containerd.grpc.v1.cri": {"cni": {"bin_dir": "/opt/cni/bin"}}}),
    )

    assert merge_config(a, Config()) == a


def test_merge_is_not_commutative():
    a = Config(root="a", stream_processors={"p": StreamProcessor(path="a")})
    b = Config(root="b", stream_processors={"p": StreamProcessor(path="b")})

    ab = merge_config(a, b)
    ba = merge_config(b, a)

    assert ab != ba
    assert ab.root == "b" and ab.stream_processors["p"].path == "b"
    assert ba.root == "a" and ba.stream_processors["p"].path == "a"


def test_operands_are_not_mutated_or_aliased():
    a = Config(required_plugins=["x"], timeouts={"a": "1"},
               stream_processors={"p": StreamProcessor(path="a", accepts=["m1"])})
    b = Config(required_plugins=["y"], timeouts={"b": "2"})

    out = merge_config(a, b)
    out.required_plugins.append("z")
    out.timeouts["c"] = "3"
    out.stream_processors["p"].accepts.append("m2")

    assert a.required_plugins == ["x"]
    assert b.required_plugins == ["y"]
    assert a.timeouts == {"a": "1"}
    assert a.stream_processors["p"].accepts == ["m1"]


def test_typed_sections_merge_field_by_field():
    a = Config(grpc=GRPCConfig(address="/run/a.sock", uid=10, gid=20),
               debug=DebugConfig(level="info", format="text"))
    b = Config(grpc=GRPCConfig(address="/run/b.sock", max_recv_message_size=1024),
               debug=DebugConfig(level="debug"))

    out = merge_config(a, b)

    assert out.grpc == GRPCConfig(address="/run/b.sock", uid=10, gid=20, max_recv_message_size=1024)
    assert out.debug == DebugConfig(level="debug", format="text")


def test_proxy_plugins_replace_whole_record():
    a = Config(proxy_plugins={
        "snap": ProxyPlugin(type="snapshot", address="/run/a.sock"),
        "cs": ProxyPlugin(type="content", address="/run/cs.sock"),
    })
    b = Config(proxy_plugins={"snap": ProxyPlugin(address="/run/b.sock")})

    out = merge_config(a, b)

    assert out.proxy_plugins == {
        "snap": ProxyPlugin(type="", address="/run/b.sock"),
        "cs": ProxyPlugin(type="content", address="/run/cs.sock"),
    }


def test_plugin_sections_with_different_keys_union():
    a = Config(plugins=_plugins({"io.containerd.runtime.v1.linux": {"shim_debug": True}}))
    b = Config(plugins=_plugins({"io.containerd.grpc.v1.cri": {"cni": {"bin_dir": "/a"}}}))

    out = merge_config(a, b)

    assert _raw_plugins(out) == {
        "io.containerd.runtime.v1.linux": {"shim_debug": True},
        "io.containerd.grpc.v1.cri": {"cni": {"bin_dir": "/a"}},
    }


def test_plugin_section_disjoint_entries_union():
    a = Config(plugins=_plugins({"io.containerd.grpc.v1.cri": {"cni": {"bin_dir": "/a"}}}))
    b = Config(plugins=_plugins({"io.containerd.grpc.v1.cri": {"registry": {"config_path": "/b"}}}))

    out = merge_config(a, b)

    assert out.plugins["io.containerd.grpc.v1.cri"].to_raw() == {
        "cni": {"bin_dir": "/a"},
        "registry": {"config_path": "/b"},
    }


def test_plugin_section_same_entry_is_overwritten_not_merged():
    a = Config(plugins=_plugins({"io.containerd.grpc.v1.cri": {"cni": {"bin_dir": "/a"}}}))
    b = Config(plugins=_plugins({"io.containerd.grpc.v1.cri": {"cni": {"conf_dir": "/tmp"}}}))

    assert merge_config(a, b).plugins["io.containerd.grpc.v1.cri"].to_raw() == {
        "cni": {"conf_dir": "/tmp"},
    }
    assert merge_config(b, a).plugins["io.containerd.grpc.v1.cri"].to_raw() == {
        "cni": {"bin_dir": "/a"},
    }
