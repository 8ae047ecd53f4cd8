"""Console logging utilities for the CHIP-8 machine and its frontends.

Provides a small levelled console logger with optional colours and
timestamps, a per-name registry of loggers, and a tqdm progress bar used by
headless runs.
"""

import time
import sys
from typing import Dict, Optional

from tqdm import tqdm


LEVEL_ORDER = {
    "DEBUG": 0,
    "INFO": 1,
    "WARNING": 2,
    "ERROR": 3,
    "CRITICAL": 4,
}


class ConsoleLogger:
    """Console logger with level filtering, colours and elapsed-time stamps."""

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.stream = stream
        self.set_level(log_level)
        self.use_colors = (
            use_colors and (stream or sys.stdout).isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {k: "" for k in [*LEVEL_ORDER, "RESET"]}
        )

    def set_level(self, log_level: str):
        level = log_level.upper()
        if level not in LEVEL_ORDER:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVEL_ORDER)}")
        self.log_level = level

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return LEVEL_ORDER.get(level.upper(), 1) >= LEVEL_ORDER[self.log_level]

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream or sys.stdout, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


_loggers: Dict[str, ConsoleLogger] = {}
_default_level = "INFO"


def get_logger(name: str = "chip8vm") -> ConsoleLogger:
    """Return the shared logger for ``name``, creating it on first use."""
    if name not in _loggers:
        _loggers[name] = ConsoleLogger(name, log_level=_default_level)
    return _loggers[name]


def set_log_level(log_level: str):
    """Set the level of every shared logger, including ones created later."""
    global _default_level
    for logger in _loggers.values():
        logger.set_level(log_level)
    _default_level = log_level.upper()


def progress_bar(n: int, desc: Optional[str] = None, disable: bool = False, **kwargs) -> tqdm:
    """tqdm progress bar over ``n`` frames."""
    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)
    return tqdm(total=n, desc=desc or f"Running ({n:,} frames)", unit="frame", disable=disable, **kwargs)
