"""
Schema checks for versioned (v2) documents.

Versioned documents address plugins by fully-qualified URI
(`io.containerd.<kind>.<version>[.<id>]`), so every plugin reference must
have at least MIN_PLUGIN_URI_PARTS dot-separated parts.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .model import Config
from .paths import CURRENT_VERSION, MIN_PLUGIN_URI_PARTS
from ..errors import ConfigValidationError

_LOG = logging.getLogger(__name__)


def _check_uris(kind: str, uris: Iterable[str]) -> None:
    for uri in uris:
        if len(uri.split(".")) < MIN_PLUGIN_URI_PARTS:
            raise ConfigValidationError(
                f"invalid {kind} URI {uri!r}, expected io.containerd.x.vx"
            )


def validate_v2(config: Config) -> None:
    """
    Validate plugin references of a versioned config.

    Legacy documents are accepted as is.

    Raises:
        ConfigValidationError: on the first short plugin URI
    """
    version = config.get_version()
    if version < CURRENT_VERSION:
        _LOG.debug("Config version %d uses the legacy plugin key schema", version)
        return
    _check_uris("disabled plugin", config.disabled_plugins)
    _check_uris("required plugin", config.required_plugins)
    _check_uris("plugin key", config.plugins.keys())


__all__ = ["validate_v2"]
