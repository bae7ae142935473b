"""
Logging utilities for the relay service.

Every module logs through ``logging.getLogger(__name__)``; this sets the
shared format once at application start.
"""

import logging
import sys

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging and quiet the per-request httpx chatter."""
    logging.basicConfig(level=level.upper(), format=_FORMAT, stream=sys.stdout)
    # httpx logs full request URLs at INFO, which would include the original query.
    logging.getLogger("httpx").setLevel(logging.WARNING)


__all__ = ["configure_logging"]
