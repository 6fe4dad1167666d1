from enum import Enum


class LogLevel(str, Enum):
    """Levels an instrumented call site can log its entry/exit lines at."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"

    @classmethod
    def parse(cls, value) -> "LogLevel":
        """Parse a level name, accepting the stdlib spelling WARNING for WARN."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().upper()
        if name == "WARNING":
            name = "WARN"
        return cls(name)


class CallSiteCategory(str, Enum):
    """Which rule selected an operation for instrumentation."""

    CONTROLLER = "CONTROLLER"
    SERVICE = "SERVICE"
    EXPLICIT = "EXPLICIT"
    NONE = "NONE"
