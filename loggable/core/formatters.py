"""
Best-effort rendering of call arguments and return values for log lines.

Neither formatter ever raises: a value that cannot be rendered degrades to a
placeholder string instead of failing the instrumented call.
"""

from collections.abc import MutableSequence, Sequence, Set
from decimal import Decimal
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from loggable.core.serialization import serialize_json

UNRENDERABLE_ARGUMENT = "<unable to render>"

_SCALAR_TYPES = (str, int, float, bool, Decimal)


@runtime_checkable
class Renderable(Protocol):
    """Implemented by types that want to control how they appear in logs."""

    def log_summary(self) -> str: ...


def _type_name(value: Any) -> str:
    try:
        return type(value).__name__
    except Exception:
        return "object"


class ArgumentFormatter:
    """Renders an argument list as "[a, b, key=c]"."""

    def format(
        self, args: Optional[Sequence] = None, kwargs: Optional[Mapping] = None
    ) -> str:
        try:
            parts = [self._render(arg) for arg in (args or ())]
            for key, value in (kwargs or {}).items():
                parts.append(f"{key}={self._render(value)}")
        except Exception:
            # The containers themselves misbehaved
            return f"[{UNRENDERABLE_ARGUMENT}]"
        return "[" + ", ".join(parts) + "]"

    @staticmethod
    def _render(value: Any) -> str:
        try:
            if isinstance(value, Renderable):
                return str(value.log_summary())
            return repr(value)
        except Exception:
            return UNRENDERABLE_ARGUMENT


class ResultFormatter:
    """
    Renders a return value using a fixed fallback chain.

    None -> "null"; Renderable -> log_summary(); scalars -> str();
    sets and mutable sequences -> "<type>[size=n]"; other sequences ->
    "<type>[length=n]"; everything else -> JSON, then
    "<type>[toString=...]", then "<type>[Unable to serialize]".
    """

    def format(self, value: Any) -> str:
        if value is None:
            return "null"

        type_name = _type_name(value)
        try:
            if isinstance(value, Renderable):
                return str(value.log_summary())

            if isinstance(value, _SCALAR_TYPES):
                return str(value)

            # Element values are never rendered for collections
            if isinstance(value, (Set, MutableSequence)):
                return f"{type_name}[size={len(value)}]"

            if isinstance(value, Sequence):
                return f"{type_name}[length={len(value)}]"

            try:
                return serialize_json(value)
            except Exception:
                return f"{type_name}[toString={value}]"
        except Exception:
            return f"{type_name}[Unable to serialize]"
