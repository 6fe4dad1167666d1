import functools
import inspect
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, TypeVar, Union

from loggable.core.emitter import Emitter
from loggable.core.enums import CallSiteCategory, LogLevel
from loggable.core.formatters import ArgumentFormatter, ResultFormatter
from loggable.core.logging import get_logger
from loggable.core.policy import (
    CallSite,
    InstrumentationPolicy,
    PolicyHint,
    PolicyResolver,
)
from loggable.exceptions import LoggableException

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Success:
    value: Any


@dataclass(frozen=True)
class Failure:
    error: BaseException


Outcome = Union[Success, Failure]


@dataclass
class InvocationRecord:
    """State of a single in-flight invocation. Never shared between calls."""

    call_site: CallSite
    policy: InstrumentationPolicy
    started_at: float
    arguments: Sequence = ()
    keyword_arguments: Dict[str, Any] = field(default_factory=dict)

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started_at) * 1000


def _error_message(error: BaseException) -> str:
    try:
        return str(error)
    except Exception:
        return "<unable to render>"


class Interceptor:
    """
    Wraps an operation with entry, exit and exception log lines.

    The operation runs exactly once. Its return value is passed back
    unchanged and any exception it raises is re-raised as the same object.
    Rendering and logging problems never reach the caller.
    """

    def __init__(
        self,
        resolver: Optional[PolicyResolver] = None,
        argument_formatter: Optional[ArgumentFormatter] = None,
        result_formatter: Optional[ResultFormatter] = None,
        emitter: Optional[Emitter] = None,
        enabled: bool = True,
    ):
        self.resolver = resolver or PolicyResolver()
        self.argument_formatter = argument_formatter or ArgumentFormatter()
        self.result_formatter = result_formatter or ResultFormatter()
        self.emitter = emitter or Emitter()
        self.enabled = enabled

    @classmethod
    def from_config(cls, config) -> "Interceptor":
        return cls(
            resolver=PolicyResolver.from_config(config),
            enabled=config.get_bool("logging.aspect.enabled", True),
        )

    def intercept(
        self,
        call_site: CallSite,
        args: Optional[Sequence],
        operation: Callable[[], T],
        explicit_hint: Optional[PolicyHint] = None,
        kwargs: Optional[Dict[str, Any]] = None,
    ) -> T:
        if not self.enabled:
            return operation()

        record = self._enter(call_site, args, kwargs, explicit_hint)
        try:
            value = operation()
        except BaseException as error:
            self._exit(record, Failure(error))
            raise
        self._exit(record, Success(value))
        return value

    async def intercept_async(
        self,
        call_site: CallSite,
        args: Optional[Sequence],
        operation: Callable[[], Awaitable[T]],
        explicit_hint: Optional[PolicyHint] = None,
        kwargs: Optional[Dict[str, Any]] = None,
    ) -> T:
        if not self.enabled:
            return await operation()

        record = self._enter(call_site, args, kwargs, explicit_hint)
        try:
            value = await operation()
        except BaseException as error:
            self._exit(record, Failure(error))
            raise
        self._exit(record, Success(value))
        return value

    def _enter(
        self,
        call_site: CallSite,
        args: Optional[Sequence],
        kwargs: Optional[Dict[str, Any]],
        explicit_hint: Optional[PolicyHint],
    ) -> InvocationRecord:
        policy = self.resolver.resolve(call_site, explicit_hint)
        name = call_site.qualified_name

        if policy.log_params:
            params = self.argument_formatter.format(args, kwargs)
            self.emitter.emit(
                policy.level, "→ Entering method: %s with parameters: %s", name, params
            )
        else:
            self.emitter.emit(policy.level, "→ Entering method: %s", name)

        return InvocationRecord(
            call_site=call_site,
            policy=policy,
            started_at=time.perf_counter(),
            arguments=tuple(args or ()),
            keyword_arguments=dict(kwargs or {}),
        )

    def _exit(self, record: InvocationRecord, outcome: Outcome):
        # Elapsed time is always measured, but only rendered on success
        # when the policy asks for it
        elapsed_ms = record.elapsed_ms()
        name = record.call_site.qualified_name
        policy = record.policy

        if isinstance(outcome, Failure):
            error = outcome.error
            self.emitter.emit(
                LogLevel.ERROR,
                "✗ Exception in method: %s | Execution time: %.2fms | Exception: %s - %s",
                name,
                elapsed_ms,
                type(error).__name__,
                _error_message(error),
                exc_info=error,
            )
            return

        template = "← Exiting method: %s"
        values: list = [name]
        if policy.log_execution_time:
            template += " | Execution time: %.2fms"
            values.append(elapsed_ms)
        if policy.log_result and outcome.value is not None:
            template += " | Return: %s"
            values.append(self.result_formatter.format(outcome.value))
        self.emitter.emit(policy.level, template, *values)


_interceptor: Optional[Interceptor] = None
_interceptor_lock = threading.Lock()


def configure_interceptor(config) -> Interceptor:
    """
    Build the process-wide interceptor from config and install it.

    Called at startup so that invalid logging.aspect.* settings fail there,
    before any instrumented call runs.
    """
    interceptor = Interceptor.from_config(config)
    set_interceptor(interceptor)
    return interceptor


def _build_default_interceptor() -> Interceptor:
    from loggable.config import get_config

    try:
        return Interceptor.from_config(get_config())
    except LoggableException as e:
        # configure_interceptor reports this at startup
        logger.error("Invalid aspect configuration, using default policy: %s", e)
        return Interceptor()


def get_interceptor() -> Interceptor:
    """Get the process-wide interceptor, building it from configuration on first use."""
    global _interceptor
    if _interceptor is None:
        with _interceptor_lock:
            if _interceptor is None:
                _interceptor = _build_default_interceptor()
    return _interceptor


def set_interceptor(interceptor: Optional[Interceptor]):
    """Replace the process-wide interceptor. None rebuilds it lazily from config."""
    global _interceptor
    with _interceptor_lock:
        _interceptor = interceptor


def _takes_instance(func: Callable) -> bool:
    try:
        params = list(inspect.signature(func).parameters)
    except (TypeError, ValueError):
        return False
    return bool(params) and params[0] in ("self", "cls")


def _is_generator(func: Callable) -> bool:
    return inspect.isgeneratorfunction(func) or inspect.isasyncgenfunction(func)


def _instrument_function(
    func: Callable,
    call_site: CallSite,
    hint: Optional[PolicyHint] = None,
    skip_first: bool = False,
    own_hint: Optional[PolicyHint] = None,
):
    """Wrap a function so every call goes through the current interceptor."""

    if _is_generator(func):
        raise TypeError(
            f"Cannot instrument generator function {call_site.qualified_name}: "
            "it returns before its body runs"
        )

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            shown = args[1:] if skip_first else args
            return await get_interceptor().intercept_async(
                call_site, shown, lambda: func(*args, **kwargs), hint, kwargs
            )

        wrapper = async_wrapper
    else:

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            shown = args[1:] if skip_first else args
            return get_interceptor().intercept(
                call_site, shown, lambda: func(*args, **kwargs), hint, kwargs
            )

        wrapper = sync_wrapper

    wrapper.__loggable_original__ = func
    wrapper.__loggable_call_site__ = call_site
    wrapper.__loggable_hint__ = own_hint
    return wrapper


def apply_instrumentation(cls):
    """
    Instrument every public method defined on cls.

    The category comes from the class's component decorator (EXPLICIT when
    there is none) and the class-level @Loggable hint is merged under each
    method's own hint. Safe to call repeatedly: already instrumented methods
    are unwrapped first so a method is never wrapped twice.
    """
    category = cls.__dict__.get("__loggable_category__", CallSiteCategory.EXPLICIT)
    class_hint = cls.__dict__.get("__loggable_hint__")

    for attr_name, attr in list(vars(cls).items()):
        if attr_name.startswith("_"):
            continue

        if isinstance(attr, staticmethod):
            descriptor, func, skip_first = staticmethod, attr.__func__, False
        elif isinstance(attr, classmethod):
            descriptor, func, skip_first = classmethod, attr.__func__, True
        elif inspect.isfunction(attr):
            descriptor, func, skip_first = None, attr, True
        else:
            continue

        original = getattr(func, "__loggable_original__", func)
        if _is_generator(original):
            # Exit would be logged before iteration starts
            continue
        method_hint = getattr(func, "__loggable_hint__", None)
        if method_hint is not None:
            hint = method_hint.merged_over(class_hint)
        else:
            hint = class_hint

        wrapped = _instrument_function(
            original,
            CallSite(f"{cls.__name__}.{attr_name}", category),
            hint,
            skip_first=skip_first,
            own_hint=method_hint,
        )
        setattr(cls, attr_name, descriptor(wrapped) if descriptor else wrapped)

    return cls


def instrument(
    qualified_name: Optional[str] = None,
    category: CallSiteCategory = CallSiteCategory.NONE,
    hint: Optional[PolicyHint] = None,
):
    """
    Register a single callable for instrumentation under an explicit CallSite.

    Example:
        @instrument("billing.charge", hint=PolicyHint(log_result=False))
        def charge(amount):
            ...
    """

    def decorator(func):
        call_site = CallSite(qualified_name or func.__qualname__, category)
        return _instrument_function(
            func, call_site, hint, skip_first=_takes_instance(func), own_hint=hint
        )

    return decorator


def Loggable(
    level: Optional[Union[LogLevel, str]] = None,
    log_params: Optional[bool] = None,
    log_result: Optional[bool] = None,
    log_execution_time: Optional[bool] = None,
):
    """
    Opt a function, method or whole class into method logging.

    Unset arguments inherit from configuration, then from the default
    policy (INFO, with parameters, result and execution time).

    Example:
        @Service()
        class UserService:
            @Loggable(level="DEBUG", log_result=False)
            def get_all_users(self):
                ...

        @Loggable()
        def rebuild_index():
            ...
    """
    hint = PolicyHint(
        level=LogLevel.parse(level) if level is not None else None,
        log_params=log_params,
        log_result=log_result,
        log_execution_time=log_execution_time,
    )

    def decorator(target):
        if isinstance(target, type):
            target.__loggable_hint__ = hint
            return apply_instrumentation(target)

        if isinstance(target, (staticmethod, classmethod)):
            func = target.__func__
            wrapped = _instrument_function(
                func,
                CallSite(func.__qualname__, CallSiteCategory.EXPLICIT),
                hint,
                skip_first=isinstance(target, classmethod),
                own_hint=hint,
            )
            return type(target)(wrapped)

        return _instrument_function(
            target,
            CallSite(target.__qualname__, CallSiteCategory.EXPLICIT),
            hint,
            skip_first=_takes_instance(target),
            own_hint=hint,
        )

    return decorator
