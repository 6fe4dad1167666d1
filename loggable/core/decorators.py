from typing import Optional

from loggable.core.enums import CallSiteCategory
from loggable.core.instrumentation import apply_instrumentation


def Service(name: Optional[str] = None):
    """
    Mark a class as a service. Every public method is logged as a SERVICE call site.

    Example:
        @Service()
        class UserService:
            def get_user_by_id(self, user_id: int):
                ...
    """

    def decorator(cls):
        cls.__loggable_category__ = CallSiteCategory.SERVICE
        cls.__loggable_component__ = name or cls.__name__
        return apply_instrumentation(cls)

    return decorator


def RestController(path: str = ""):
    """
    Mark a class as a REST controller rooted at path.

    Every public method is logged as a CONTROLLER call site.
    """

    def decorator(cls):
        cls.__loggable_category__ = CallSiteCategory.CONTROLLER
        cls.__loggable_component__ = cls.__name__
        cls.__loggable_base_path__ = path
        return apply_instrumentation(cls)

    return decorator
