"""
Exceptions raised by loggable.

ProblemException subclasses carry the fields of an RFC 7807 problem document
so the web layer can render them without knowing the concrete type.
"""

from typing import Any, Dict, Optional


class LoggableException(Exception):
    """Base exception for all loggable errors."""

    pass


class PolicyConfigurationException(LoggableException):
    """Raised when the instrumentation policy configuration is invalid."""

    pass


class ConfigurationException(LoggableException):
    """Raised when a configuration file cannot be loaded."""

    pass


class ProblemException(LoggableException):
    """
    Error that maps onto an HTTP problem response.

    Args:
        title: Short, human-readable summary of the problem type
        status: HTTP status code
        detail: Explanation specific to this occurrence
        type: URI identifying the problem type
    """

    type: str = "about:blank"
    title: str = "Internal Server Error"
    status: int = 500

    def __init__(
        self,
        detail: str,
        title: Optional[str] = None,
        status: Optional[int] = None,
        type: Optional[str] = None,
    ):
        super().__init__(detail)
        self.detail = detail
        if title is not None:
            self.title = title
        if status is not None:
            self.status = status
        if type is not None:
            self.type = type

    def to_problem(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "status": self.status,
            "detail": self.detail,
        }


class UserNotFoundException(ProblemException):
    """Raised when a user id does not exist."""

    type = "https://example.org/problems/user-not-found"
    title = "User Not Found"
    status = 404

    def __init__(self, user_id: int):
        super().__init__(f"User with id {user_id} not found")
        self.user_id = user_id


class EmailAlreadyExistsException(ProblemException):
    """Raised when an email is already taken by another user."""

    type = "https://example.org/problems/email-already-exists"
    title = "Email Already Exists"
    status = 409

    def __init__(self, email: str):
        super().__init__(f"User with email {email} already exists")
        self.email = email


class RequestValidationException(ProblemException):
    """Raised when a request body cannot be bound to a DTO."""

    title = "Bad Request"
    status = 400
