import base64
import dataclasses
import json
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID


class LoggableJSONEncoder(json.JSONEncoder):
    """
    JSON encoder for values that show up in service return types.

    Handles datetimes, UUIDs, Decimals, enums, dataclasses, bytes, sets and
    plain objects (via __dict__). Anything else raises TypeError.
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime, date, time)):
            return obj.isoformat()
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, Enum):
            return obj.value
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return dataclasses.asdict(obj)
        if isinstance(obj, (bytes, bytearray)):
            return base64.b64encode(bytes(obj)).decode("ascii")
        if isinstance(obj, (set, frozenset)):
            return list(obj)
        if hasattr(obj, "__dict__") and not isinstance(obj, type):
            return {k: v for k, v in vars(obj).items() if not k.startswith("_")}
        return super().default(obj)


def serialize_json(data: Any, indent: Optional[int] = None) -> str:
    """
    Serialize data to a JSON string.

    Raises:
        TypeError: If a value cannot be encoded
        ValueError: On circular references
    """
    return json.dumps(data, cls=LoggableJSONEncoder, indent=indent, ensure_ascii=False)
