import logging
import sys
from pathlib import Path
from typing import List, Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when writing to a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        color = self.COLORS.get(original)
        if color:
            record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def get_logger(name: str = "loggable") -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(
    level: str = "INFO",
    fmt: Optional[str] = None,
    custom_formatter: Optional[logging.Formatter] = None,
    custom_handlers: Optional[List[logging.Handler]] = None,
    log_file: Optional[str] = None,
):
    """
    Configure the root logger.

    Replaces any existing root handlers. Custom handlers are used as given;
    otherwise a stderr StreamHandler with ColoredFormatter is installed. When
    log_file is set, its directory is created and a plain FileHandler is added.

    Args:
        level: Root log level name
        fmt: Format string for the default formatters
        custom_formatter: Formatter applied to handlers that have none
        custom_handlers: Handlers to install instead of the default one
        log_file: Optional path of a log file to also write to
    """
    fmt = fmt or DEFAULT_FORMAT
    root_logger = logging.getLogger()

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    if custom_handlers:
        handlers = list(custom_handlers)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(custom_formatter or ColoredFormatter(fmt))
        handlers = [handler]

    for handler in handlers:
        if handler.formatter is None and custom_formatter is not None:
            handler.setFormatter(custom_formatter)
        root_logger.addHandler(handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(custom_formatter or logging.Formatter(fmt))
        root_logger.addHandler(file_handler)

    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))


def configure_logging_from_config(config):
    """Configure logging from the logging.* configuration keys."""
    configure_logging(
        level=config.get("logging.level", "INFO"),
        fmt=config.get("logging.format"),
        log_file=config.get("logging.file"),
    )
    get_logger().info(
        "Logging configured at level %s", config.get("logging.level", "INFO")
    )
