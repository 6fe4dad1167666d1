"""
Instrumentation policy types and resolution.

A policy is resolved field by field. For each of level, log_params,
log_result and log_execution_time the first layer that sets the field wins:

1. the explicit hint passed with the call (from @Loggable)
2. the configured override for the operation's qualified name
3. the hint configured for the call site's category
4. DEFAULT_POLICY
"""

import functools
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from loggable.config.properties import FALSE_VALUES, TRUE_VALUES
from loggable.core.enums import CallSiteCategory, LogLevel
from loggable.exceptions import PolicyConfigurationException

_HINT_KEYS = {
    "level": "level",
    "log_params": "log_params",
    "logParams": "log_params",
    "log_result": "log_result",
    "logResult": "log_result",
    "log_execution_time": "log_execution_time",
    "logExecutionTime": "log_execution_time",
}


DEFAULT_CACHE_SIZE = 1024


def _parse_flag(value: Any, key: str, where: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
    raise PolicyConfigurationException(
        f"Policy field {key!r} in {where!r} must be a boolean, got {value!r}"
    )


@dataclass(frozen=True)
class InstrumentationPolicy:
    """Fully resolved logging toggles for one invocation."""

    level: LogLevel = LogLevel.INFO
    log_params: bool = True
    log_result: bool = True
    log_execution_time: bool = True


DEFAULT_POLICY = InstrumentationPolicy()


@dataclass(frozen=True)
class PolicyHint:
    """Partial policy. Fields left as None inherit from the next layer."""

    level: Optional[LogLevel] = None
    log_params: Optional[bool] = None
    log_result: Optional[bool] = None
    log_execution_time: Optional[bool] = None

    def merged_over(self, other: Optional["PolicyHint"]) -> "PolicyHint":
        """Return a hint where this hint's set fields win over other's."""
        if other is None:
            return self
        return PolicyHint(
            **{
                f.name: getattr(self, f.name)
                if getattr(self, f.name) is not None
                else getattr(other, f.name)
                for f in fields(self)
            }
        )

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]], where: str = ""):
        """
        Build a hint from a configuration mapping.

        Accepts both snake_case and camelCase keys. Unknown keys and unknown
        level names raise PolicyConfigurationException.
        """
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise PolicyConfigurationException(
                f"Policy hint {where!r} must be a mapping, got {type(data).__name__}"
            )

        values: Dict[str, Any] = {}
        for key, value in data.items():
            field_name = _HINT_KEYS.get(key)
            if field_name is None:
                raise PolicyConfigurationException(
                    f"Unknown policy field {key!r} in {where!r}"
                )
            if value is None:
                continue
            if field_name == "level":
                try:
                    value = LogLevel.parse(value)
                except ValueError as e:
                    raise PolicyConfigurationException(
                        f"Unknown log level {value!r} in {where!r}"
                    ) from e
            else:
                value = _parse_flag(value, key, where)
            values[field_name] = value
        return cls(**values)


@dataclass(frozen=True)
class CallSite:
    """A named operation plus the rule that selected it for instrumentation."""

    qualified_name: str
    category: CallSiteCategory = CallSiteCategory.NONE


class PolicyResolver:
    """
    Resolves the effective InstrumentationPolicy for a call site.

    Inputs are fixed at construction, so results are cached per
    (call_site, explicit_hint) in a bounded LRU cache. Safe for concurrent
    use.
    """

    def __init__(
        self,
        category_hints: Optional[Mapping[CallSiteCategory, PolicyHint]] = None,
        operation_hints: Optional[Mapping[str, PolicyHint]] = None,
        default_policy: InstrumentationPolicy = DEFAULT_POLICY,
        cache_size: Optional[int] = DEFAULT_CACHE_SIZE,
    ):
        self._category_hints = dict(category_hints or {})
        self._operation_hints = dict(operation_hints or {})
        self._default_policy = default_policy
        self._cached_compute = functools.lru_cache(maxsize=cache_size)(self._compute)

    @property
    def default_policy(self) -> InstrumentationPolicy:
        return self._default_policy

    def resolve(
        self, call_site: CallSite, explicit_hint: Optional[PolicyHint] = None
    ) -> InstrumentationPolicy:
        return self._cached_compute(call_site, explicit_hint)

    def cache_info(self):
        return self._cached_compute.cache_info()

    def _compute(
        self, call_site: CallSite, explicit_hint: Optional[PolicyHint]
    ) -> InstrumentationPolicy:
        layers = [
            explicit_hint,
            self._operation_hints.get(call_site.qualified_name),
            self._category_hints.get(call_site.category),
        ]

        merged = PolicyHint()
        for layer in layers:
            merged = merged.merged_over(layer)

        return InstrumentationPolicy(
            **{
                f.name: getattr(merged, f.name)
                if getattr(merged, f.name) is not None
                else getattr(self._default_policy, f.name)
                for f in fields(InstrumentationPolicy)
            }
        )

    @classmethod
    def from_config(cls, config) -> "PolicyResolver":
        """
        Build a resolver from logging.aspect.* configuration.

        Only CONTROLLER and SERVICE have configurable category hints; EXPLICIT
        call sites rely on their declared hint and NONE on the default.
        """
        categories = config.get("logging.aspect.categories") or {}
        operations = config.get("logging.aspect.operations") or {}

        if not isinstance(categories, Mapping):
            raise PolicyConfigurationException(
                "logging.aspect.categories must be a mapping"
            )
        if not isinstance(operations, Mapping):
            raise PolicyConfigurationException(
                "logging.aspect.operations must be a mapping"
            )

        category_hints = {
            CallSiteCategory.CONTROLLER: PolicyHint.from_mapping(
                categories.get("controller"), "categories.controller"
            ),
            CallSiteCategory.SERVICE: PolicyHint.from_mapping(
                categories.get("service"), "categories.service"
            ),
        }
        operation_hints = {
            str(name): PolicyHint.from_mapping(hint, f"operations.{name}")
            for name, hint in operations.items()
        }
        return cls(category_hints=category_hints, operation_hints=operation_hints)
