"""Logging helpers for modsync_updater.

The host plugin normally owns logging; this is only used by the
standalone ``modsync-check`` entry point.
"""
import logging
import os

_QUIET_LOGGERS = ("urllib3", "requests")


def setup_logging(level_name: str | None = None) -> None:
    name = (level_name or os.environ.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, name, logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(handler)
    root.setLevel(level)

    # Connection pool chatter stays hidden unless something breaks
    for noisy in _QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)


__all__ = ["setup_logging"]
