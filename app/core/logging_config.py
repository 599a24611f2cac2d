"""Console logging setup for the API process."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(log_level: str = "INFO") -> None:
    """Attach a single console handler to the root logger.

    Safe to call more than once; an existing handler installed here is reused.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers:
        if getattr(handler, "_inventory_console", False):
            handler.setLevel(level)
            return

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler._inventory_console = True  # type: ignore[attr-defined]
    root_logger.addHandler(console_handler)


def token_hint(token: str | None) -> str:
    """Return a log-safe prefix of a session token."""
    if not token:
        return "<none>"
    return f"{token[:8]}..."
