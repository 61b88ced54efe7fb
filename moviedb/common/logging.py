# moviedb/common/logging.py
from __future__ import annotations

import logging


def get_logger(name: str = "moviedb", level: int | str | None = None) -> logging.Logger:
    """
    The "moviedb" logger at the configured `log_level`.
    Falls back to a one-time basicConfig when the host application set up no handlers.
    """
    if level is None:
        from moviedb.common.settings import get_settings
        level = get_settings().log_level.upper()
    log = logging.getLogger(name)
    if not (logging.getLogger().handlers or log.handlers):
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    log.setLevel(level)
    return log
