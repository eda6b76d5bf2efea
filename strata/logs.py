from __future__ import annotations

import logging
import os

from .config.paths import DEBUG_ENV

_LOG = logging.getLogger("strata")


def setup_logging_once() -> None:
    """
    Attach a console handler to the package logger when debug tracing
    is requested through the environment. Otherwise the library stays silent
    and leaves handler setup to the embedding daemon.
    """
    if getattr(setup_logging_once, "_inited", False):
        return
    setup_logging_once._inited = True  # type: ignore[attr-defined]
    if not os.environ.get(DEBUG_ENV):
        return
    _LOG.setLevel(logging.DEBUG)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        fmt = logging.Formatter("[%(levelname)s] %(message)s")
        h.setFormatter(fmt)
        _LOG.addHandler(h)


__all__ = ["setup_logging_once"]
