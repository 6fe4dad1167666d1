from loggable.core.decorators import RestController, Service
from loggable.core.emitter import Emitter
from loggable.core.enums import CallSiteCategory, LogLevel
from loggable.core.formatters import ArgumentFormatter, Renderable, ResultFormatter
from loggable.core.instrumentation import (
    Failure,
    Interceptor,
    InvocationRecord,
    Loggable,
    Success,
    configure_interceptor,
    get_interceptor,
    instrument,
    set_interceptor,
)
from loggable.core.policy import (
    DEFAULT_POLICY,
    CallSite,
    InstrumentationPolicy,
    PolicyHint,
    PolicyResolver,
)

__all__ = [
    "ArgumentFormatter",
    "CallSite",
    "CallSiteCategory",
    "DEFAULT_POLICY",
    "Emitter",
    "Failure",
    "InstrumentationPolicy",
    "Interceptor",
    "InvocationRecord",
    "LogLevel",
    "Loggable",
    "PolicyHint",
    "PolicyResolver",
    "Renderable",
    "RestController",
    "ResultFormatter",
    "Service",
    "Success",
    "configure_interceptor",
    "get_interceptor",
    "instrument",
    "set_interceptor",
]
