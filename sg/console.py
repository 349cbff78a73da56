"""
Console log output for the command line.

Progress goes to stderr with a short label per level so that stdout stays
free for the JSON report.
"""

from __future__ import annotations

import logging
import sys

_LABELS = {
    logging.DEBUG: "[-]",
    logging.INFO: "[+]",
    logging.WARNING: "[*]",
    logging.ERROR: "[!]",
    logging.CRITICAL: "[!]",
}


class LabelFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        label = _LABELS.get(record.levelno, "[?]")
        return f"{label} {super().format(record)}"


def setup_logging(verbose: bool = False) -> logging.Handler:
    """Install the stderr handler on the package logger. Repeated calls replace it."""
    logger = logging.getLogger("sg")
    for h in list(logger.handlers):
        if getattr(h, "_sg_console", False):
            logger.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(LabelFormatter("%(message)s"))
    handler._sg_console = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return handler


__all__ = ["LabelFormatter", "setup_logging"]
