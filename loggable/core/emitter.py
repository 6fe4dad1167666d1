import logging
from typing import Optional

from loggable.core.enums import LogLevel
from loggable.core.logging import get_logger

ASPECT_LOGGER_NAME = "loggable.aspect"


class Emitter:
    """Writes instrumentation lines to the logger method matching a LogLevel."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger(ASPECT_LOGGER_NAME)
        self._channels = {
            LogLevel.DEBUG: self.logger.debug,
            LogLevel.INFO: self.logger.info,
            LogLevel.WARN: self.logger.warning,
            LogLevel.ERROR: self.logger.error,
        }

    def emit(self, level, template: str, *args, exc_info=None):
        """
        Emit one log line synchronously.

        Unknown levels go to INFO. A failing log sink is never allowed to
        raise into the instrumented call.
        """
        try:
            channel = self._channels.get(level, self.logger.info)
        except TypeError:
            channel = self.logger.info
        try:
            channel(template, *args, exc_info=exc_info)
        except Exception:
            pass
