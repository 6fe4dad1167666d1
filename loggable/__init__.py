from loggable.core import (
    CallSite,
    CallSiteCategory,
    InstrumentationPolicy,
    Interceptor,
    LogLevel,
    Loggable,
    PolicyHint,
    PolicyResolver,
    Renderable,
    RestController,
    Service,
    configure_interceptor,
    get_interceptor,
    instrument,
    set_interceptor,
)

__all__ = [
    "CallSite",
    "CallSiteCategory",
    "InstrumentationPolicy",
    "Interceptor",
    "LogLevel",
    "Loggable",
    "PolicyHint",
    "PolicyResolver",
    "Renderable",
    "RestController",
    "Service",
    "configure_interceptor",
    "get_interceptor",
    "instrument",
    "set_interceptor",
]
