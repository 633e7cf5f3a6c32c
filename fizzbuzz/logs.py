"""Logging setup."""

from datetime import datetime
import json
import logging
import sys


class JSONFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record):
        entry = {
            "time": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(environment: str) -> int:
    """Configure the root logger on stdout

    Args:
        environment: "production" logs JSON at INFO, anything else text at DEBUG

    Returns:
        the root logger level
    """
    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    if environment == "production":
        handler.setFormatter(JSONFormatter())
        root.setLevel(logging.INFO)
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        root.setLevel(logging.DEBUG)
    root.addHandler(handler)
    return root.level
