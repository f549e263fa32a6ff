"""
System Reporter - Centralized logging for Salon components.

Wraps stdlib logging with a ``[context] message`` format and a per-call
verbosity filter. Logs to stdout and, when configured, to a file.
"""

import logging
import os
import sys
from typing import Optional


class SystemReporter:
    """
    Logger with verbose filtering.

    Verbose Levels:
        0 = Critical only (always visible)
        1 = Important messages (default)
        2 = Detailed information
        3 = Debug/verbose
    """

    def __init__(
        self,
        name: str = "salon",
        log_file: Optional[str] = None,
        level: int = logging.INFO,
        verbose: int = 1,
    ) -> None:
        """
        Initialize SystemReporter.

        Args:
            name: Logger name
            log_file: Path of a log file. If None, logs to stdout only.
            level: Python logging level
            verbose: Verbosity filter (0-3)
        """
        self.name = name
        self.verbose = max(0, min(3, verbose))
        self.log_file = log_file
        self._init_logger(name, log_file, level)

    def _init_logger(self, name: str, log_file: Optional[str], level: int) -> None:
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        # Always add console handler (stdout)
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_file:
            directory = os.path.dirname(os.path.abspath(log_file))
            os.makedirs(directory, exist_ok=True)

            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    @classmethod
    def from_level_name(
        cls,
        name: str = "salon",
        level_name: str = "INFO",
        log_file: Optional[str] = None,
        verbose: int = 1,
    ) -> "SystemReporter":
        """Build a reporter from a textual level such as 'DEBUG'."""
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            level = logging.INFO
        return cls(name=name, log_file=log_file, level=level, verbose=verbose)

    def _should_log(self, verbose_level: int) -> bool:
        return self.verbose >= verbose_level

    # Core logging methods
    def debug(self, msg: str, context: str = "system", verbose_level: int = 3) -> None:
        if self._should_log(verbose_level):
            self.logger.debug(f"[{context}] {msg}")

    def info(self, msg: str, context: str = "system", verbose_level: int = 1) -> None:
        if self._should_log(verbose_level):
            self.logger.info(f"[{context}] {msg}")

    def warning(
        self, msg: str, context: str = "system", verbose_level: int = 1
    ) -> None:
        if self._should_log(verbose_level):
            self.logger.warning(f"[{context}] {msg}")

    def error(self, msg: str, context: str = "system", verbose_level: int = 0) -> None:
        if self._should_log(verbose_level):
            self.logger.error(f"[{context}] {msg}")

    def critical(
        self, msg: str, context: str = "system", verbose_level: int = 0
    ) -> None:
        if self._should_log(verbose_level):
            self.logger.critical(f"[{context}] {msg}")
