"""JSON-lines logging core.

``StructuredLogger`` turns ``(level, message, **context)`` into one JSON
object per line and hands it to ``_emit``. This base class writes every line
to a single rotating file; ``MultiFileLogger`` routes lines by component.
"""

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

LOGGER_NAME = "sfsearch"
MAX_LOG_BYTES = 50 * 1024 * 1024


def rotating_handler(path: Path, level: int, backup_count: int = 5) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=backup_count,
        encoding='utf-8'
    )
    # Lines arrive already serialized
    handler.setFormatter(logging.Formatter('%(message)s'))
    handler.setLevel(level)
    return handler


class StructuredLogger:
    """Writes JSON lines to one rotating file."""

    def __init__(self, log_file: str = "logs/system.log", level: int = logging.INFO):
        self.level = level
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(level)
        self.logger.propagate = False
        self.logger.handlers.clear()
        self._attach_handlers(Path(log_file))

    def _attach_handlers(self, log_file: Path):
        self.logger.addHandler(rotating_handler(log_file, self.level))

    @staticmethod
    def format_entry(level: int, message: str, **context) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": logging.getLevelName(level),
            "message": message,
            **context
        }
        return json.dumps(entry, default=str)

    def _emit(self, level: int, line: str, component: Optional[str]):
        self.logger.log(level, line)

    def log(self, level: int, message: str, **context):
        self._emit(level, self.format_entry(level, message, **context), context.get('component'))

    def debug(self, message: str, **context):
        self.log(logging.DEBUG, message, **context)

    def info(self, message: str, **context):
        self.log(logging.INFO, message, **context)

    def warning(self, message: str, **context):
        self.log(logging.WARNING, message, **context)

    def error(self, message: str, **context):
        self.log(logging.ERROR, message, **context)

    def critical(self, message: str, **context):
        self.log(logging.CRITICAL, message, **context)

    def isEnabledFor(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def close(self):
        for handler in self.logger.handlers:
            handler.close()
