"""
Structured JSON logging configuration for the sensor bridge.

Each log record is emitted as a single JSON line with ``timestamp``,
``level``, ``logger`` and ``message``; records carrying exception info
add an ``exc_info`` field with the formatted traceback.

The bridge runs unattended under a service manager, so every per-tick
fetch warning and every poller or pyhap traceback has to land on one
machine-readable line. ``setup_logging`` takes the level name straight
from ``HTTPSENSOR_LOG_LEVEL`` and replaces whatever handlers pyhap or an
earlier import installed on the root logger.

CHANGELOG:
- 2026-10-17: Initial creation (STORY-008)
- 2026-10-17: Tracebacks in JSON output, level names accepted (STORY-009)

TODO:
- None
"""

import json
import logging
from datetime import UTC, datetime


class JSONFormatter(logging.Formatter):
    """Logging formatter that outputs a single JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        """Format *record* as a JSON string.

        Args:
            record: The log record to format.

        Returns:
            A single-line JSON string.
        """
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure the root logger with structured JSON output.

    Replaces any existing root handlers with a single ``StreamHandler``
    using :class:`JSONFormatter`.

    Args:
        level: Level for the root logger, as a number or a level name.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    root.addHandler(handler)
