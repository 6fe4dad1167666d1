from dataclasses import dataclass
from typing import Any, Optional

from loggable.exceptions import RequestValidationException
from loggable.users.models import User


@dataclass
class UserDTO:
    """Incoming user payload for create and update requests."""

    name: str
    email: str
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "UserDTO":
        """
        Bind a decoded JSON body.

        Only checks that the body is an object carrying the required keys.
        """
        if not isinstance(data, dict):
            raise RequestValidationException("Request body must be a JSON object")

        missing = [key for key in ("name", "email") if not data.get(key)]
        if missing:
            raise RequestValidationException(
                f"Missing required field(s): {', '.join(missing)}"
            )

        return cls(
            name=str(data["name"]),
            email=str(data["email"]),
            description=data.get("description"),
        )


@dataclass
class UserResponse:
    id: int
    name: str
    email: str
    description: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            description=user.description,
        )
