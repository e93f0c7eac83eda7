"""
System Reporter - Centralized logging for Sequestre components.

Provides SystemReporter for console logging with an optional log file,
verbose filtering and a uniform "[context] message" line format.
"""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class SystemReporter:
    """
    Logger with verbose filtering.

    Logs to stdout always, and to ``{log_dir}/{name}.log`` when a log
    directory is given.

    Verbose Levels:
        0 = Critical only (always visible)
        1 = Important messages (default)
        2 = Detailed information
        3 = Debug/verbose
    """

    def __init__(
        self,
        name: str = "system",
        log_dir: Optional[str] = None,
        level: int = logging.INFO,
        verbose: int = 1,
    ) -> None:
        """
        Initialize SystemReporter.

        Args:
            name: Logger name (used for filename if log_dir provided)
            log_dir: Directory for log files. If None, logs to stdout only.
            level: Python logging level
            verbose: Verbosity filter (0-3)
        """
        self.name = name
        self.verbose = max(0, min(3, verbose))
        self.log_file: Optional[str] = None

        self._init_logger(name, log_dir, level)

    def _init_logger(self, name: str, log_dir: Optional[str], level: int) -> None:
        """
        Initialize logger with console and optional file handlers.

        Args:
            name: Logger name
            log_dir: Log directory path (None = stdout only)
            level: Python logging level
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            self.log_file = os.path.join(log_dir, f"{name}.log")

            file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    @classmethod
    def from_level_name(
        cls,
        name: str,
        level_name: str = "INFO",
        log_dir: Optional[str] = None,
        verbose: int = 1,
    ) -> "SystemReporter":
        """Build a reporter from a textual level such as ``"DEBUG"``."""
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            level = logging.INFO
        return cls(name=name, log_dir=log_dir, level=level, verbose=verbose)

    def set_verbose(self, level: int) -> None:
        """Update verbosity level."""
        self.verbose = max(0, min(3, level))
        self.info(
            f"Verbosity set to {self.verbose}",
            context="SystemReporter",
            verbose_level=0,
        )

    def _should_log(self, verbose_level: int) -> bool:
        """Check if message should be logged."""
        return self.verbose >= verbose_level

    # Core logging methods
    def debug(self, msg: str, context: str = "system", verbose_level: int = 3) -> None:
        """Log debug message."""
        if self._should_log(verbose_level):
            self.logger.debug(f"[{context}] {msg}")

    def info(self, msg: str, context: str = "system", verbose_level: int = 1) -> None:
        """Log info message."""
        if self._should_log(verbose_level):
            self.logger.info(f"[{context}] {msg}")

    def warning(
        self, msg: str, context: str = "system", verbose_level: int = 1
    ) -> None:
        """Log warning message."""
        if self._should_log(verbose_level):
            self.logger.warning(f"[{context}] {msg}")

    def error(self, msg: str, context: str = "system", verbose_level: int = 0) -> None:
        """Log error message."""
        if self._should_log(verbose_level):
            self.logger.error(f"[{context}] {msg}")

    def critical(
        self, msg: str, context: str = "system", verbose_level: int = 0
    ) -> None:
        """Log critical message."""
        if self._should_log(verbose_level):
            self.logger.critical(f"[{context}] {msg}")
