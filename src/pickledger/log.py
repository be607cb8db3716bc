"""Logging setup shared by the API server and scripts."""

from __future__ import annotations

import logging
import sys

from pickledger.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.setLevel(level or get_settings().log_level.upper())
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
