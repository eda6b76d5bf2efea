from pathlib import Path

import pytest

from tests.infrastructure.file_utils import write_doc


@pytest.fixture
def cfgdir(tmp_path: Path) -> Path:
    """Directory with a CRI-style pair of documents, the first importing the second."""
    write_doc(tmp_path / "data1.toml", """
        version = 2
        root = "/var/lib/containerd"
        imports = ["data2.toml"]
    """)
    write_doc(tmp_path / "data2.toml", """
        disabled_plugins = ["io.containerd.v1.xyz"]
    """)
    return tmp_path


@pytest.fixture(autouse=True)
def _no_debug_env(monkeypatch):
    monkeypatch.delenv("STRATA_CONFIG_DEBUG", raising=False)
