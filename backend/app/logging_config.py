"""Logging setup for the gigboard backend.

All backend loggers hang off the ``gigboard`` logger so a single handler
covers both the routes and the service layer they call.
"""

import logging
import sys

ROOT_LOGGER = "gigboard"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Install the stream handler once. Later calls only adjust the level."""
    global _configured
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level.upper())
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``gigboard`` namespace."""
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def log_job_event(
    logger: logging.Logger,
    action: str,
    job_id: str | None,
    actor: str | None,
    level: int = logging.INFO,
    **fields,
) -> None:
    """Log a one-line job event: ``ACTION | job=... | actor=... | k=v``."""
    parts = [action.upper(), f"job={job_id}", f"actor={actor}"]
    parts.extend(f"{key}={value}" for key, value in fields.items())
    logger.log(level, " | ".join(parts))
