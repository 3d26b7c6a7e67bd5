"""
Logging setup - one call at startup, module loggers everywhere else.
"""

import logging

from admissions_portal.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str = None) -> None:
    global _configured
    if _configured:
        return
    level = (level or get_settings().log_level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    # pymongo is chatty at DEBUG (heartbeats, pool events)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    _configured = True
