"""
Shared utilities.
"""
import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_configured = False


def configure_logging(level: str = "INFO", fmt: Optional[str] = None) -> None:
    """Configure root logging once for the whole service."""
    global _configured
    if _configured:
        logging.getLogger().setLevel(level.upper())
        return
    logging.basicConfig(level=level.upper(), format=fmt or LOG_FORMAT)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "LOG_FORMAT"]
