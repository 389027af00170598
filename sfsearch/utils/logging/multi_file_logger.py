"""Per-component log files.

- salesforce.log: search building and execution, metadata lookups, tools
- system.log: configuration and any component without its own file
- errors.log: a copy of every ERROR and CRITICAL line

Files live under ``LOG_DIR`` (default ``logs``); ``LOG_LEVEL`` sets the
threshold (default ``INFO``).
"""

import logging
import os
from pathlib import Path
from threading import Lock
from typing import Dict, Optional

from .logger import StructuredLogger, rotating_handler


class MultiFileLogger(StructuredLogger):
    """Routes each line to the file of its ``component``."""

    COMPONENT_FILES = {
        'salesforce': 'salesforce.log',
        'search': 'salesforce.log',
        'metadata': 'salesforce.log',
        'system': 'system.log',
        'config': 'system.log',
    }
    ERROR_FILE = 'errors.log'

    def __init__(self, log_dir: str = "logs", level: int = logging.INFO):
        self.log_dir = Path(log_dir)
        self._lock = Lock()
        self._routes: Dict[str, logging.Handler] = {}
        super().__init__(log_file=str(self.log_dir / self.COMPONENT_FILES['system']), level=level)

    def _attach_handlers(self, log_file: Path):
        # Components sharing a file share its handler
        opened: Dict[str, logging.Handler] = {}
        for component, filename in self.COMPONENT_FILES.items():
            if filename not in opened:
                opened[filename] = rotating_handler(self.log_dir / filename, self.level)
            self._routes[component] = opened[filename]
        self._errors = rotating_handler(self.log_dir / self.ERROR_FILE, logging.ERROR, backup_count=10)

    def _emit(self, level: int, line: str, component: Optional[str]):
        record = logging.LogRecord(self.logger.name, level, "", 0, line, (), None)
        handler = self._routes.get(component or 'system', self._routes['system'])
        with self._lock:
            if level >= handler.level:
                handler.emit(record)
            if level >= logging.ERROR:
                self._errors.emit(record)

    def close(self):
        with self._lock:
            for handler in {*self._routes.values(), self._errors}:
                handler.close()


_multi_logger: Optional[MultiFileLogger] = None
_multi_logger_lock = Lock()


def _level_from_env() -> int:
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def get_multi_file_logger() -> MultiFileLogger:
    """Process-wide logger, created from ``LOG_DIR`` / ``LOG_LEVEL`` on first use."""
    global _multi_logger
    if _multi_logger is None:
        with _multi_logger_lock:
            if _multi_logger is None:
                _multi_logger = MultiFileLogger(
                    log_dir=os.getenv("LOG_DIR", "logs"),
                    level=_level_from_env(),
                )
    return _multi_logger


def reset_multi_file_logger():
    """Close the files and drop the instance; the next call re-reads the environment."""
    global _multi_logger
    with _multi_logger_lock:
        if _multi_logger is not None:
            _multi_logger.close()
        _multi_logger = None
