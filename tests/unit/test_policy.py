"""
Tests for policy hints and PolicyResolver precedence.
"""

import os
import tempfile
from pathlib import Path

import pytest

from loggable.config.properties import ConfigurationProperties
from loggable.core.enums import CallSiteCategory, LogLevel
from loggable.core.policy import (
    DEFAULT_POLICY,
    CallSite,
    InstrumentationPolicy,
    PolicyHint,
    PolicyResolver,
)
from loggable.exceptions import PolicyConfigurationException

CONTROLLER_SITE = CallSite("UserController.get_user_by_id", CallSiteCategory.CONTROLLER)
SERVICE_SITE = CallSite("UserService.create_user", CallSiteCategory.SERVICE)


class TestPolicyHint:
    """Tests for PolicyHint merging and parsing."""

    def test_merged_over_prefers_set_fields(self):
        top = PolicyHint(level=LogLevel.DEBUG)
        bottom = PolicyHint(level=LogLevel.ERROR, log_result=False)

        merged = top.merged_over(bottom)

        assert merged == PolicyHint(level=LogLevel.DEBUG, log_result=False)

    def test_merged_over_none(self):
        hint = PolicyHint(log_params=False)
        assert hint.merged_over(None) is hint

    def test_from_mapping_accepts_camel_case(self):
        hint = PolicyHint.from_mapping(
            {"level": "warn", "logParams": False, "log_execution_time": True}
        )
        assert hint == PolicyHint(
            level=LogLevel.WARN, log_params=False, log_execution_time=True
        )

    def test_from_mapping_accepts_warning_spelling(self):
        assert PolicyHint.from_mapping({"level": "WARNING"}).level == LogLevel.WARN

    def test_from_mapping_empty(self):
        assert PolicyHint.from_mapping(None) == PolicyHint()
        assert PolicyHint.from_mapping({}) == PolicyHint()

    def test_from_mapping_rejects_unknown_level(self):
        with pytest.raises(PolicyConfigurationException, match="TRACE"):
            PolicyHint.from_mapping({"level": "TRACE"}, "operations.X.y")

    def test_from_mapping_rejects_unknown_field(self):
        with pytest.raises(PolicyConfigurationException, match="log_everything"):
            PolicyHint.from_mapping({"log_everything": True})

    def test_from_mapping_rejects_non_mapping(self):
        with pytest.raises(PolicyConfigurationException):
            PolicyHint.from_mapping(["DEBUG"])

    @pytest.mark.parametrize(
        "value,expected",
        [(False, False), ("false", False), ("off", False), ("No", False), ("yes", True)],
    )
    def test_from_mapping_parses_flag_strings(self, value, expected):
        assert PolicyHint.from_mapping({"log_result": value}).log_result is expected

    @pytest.mark.parametrize("value", ["maybe", 2, [True]])
    def test_from_mapping_rejects_non_boolean_flag(self, value):
        with pytest.raises(PolicyConfigurationException, match="log_params"):
            PolicyHint.from_mapping({"log_params": value}, "categories.service")


class TestPolicyResolver:
    """Tests for field-wise policy resolution."""

    def test_default_policy(self):
        resolver = PolicyResolver()

        policy = resolver.resolve(CallSite("anything", CallSiteCategory.NONE))

        assert policy == DEFAULT_POLICY
        assert policy == InstrumentationPolicy(LogLevel.INFO, True, True, True)

    def test_category_hint_applies(self):
        resolver = PolicyResolver(
            category_hints={
                CallSiteCategory.SERVICE: PolicyHint(
                    level=LogLevel.DEBUG, log_result=False
                )
            }
        )

        assert resolver.resolve(SERVICE_SITE) == InstrumentationPolicy(
            level=LogLevel.DEBUG,
            log_params=True,
            log_result=False,
            log_execution_time=True,
        )
        # Other categories are unaffected
        assert resolver.resolve(CONTROLLER_SITE) == DEFAULT_POLICY

    def test_explicit_hint_overrides_category_field_by_field(self):
        resolver = PolicyResolver(
            category_hints={
                CallSiteCategory.SERVICE: PolicyHint(
                    level=LogLevel.DEBUG, log_params=False
                )
            }
        )

        policy = resolver.resolve(SERVICE_SITE, PolicyHint(level=LogLevel.ERROR))

        assert policy.level == LogLevel.ERROR
        assert policy.log_params is False
        assert policy.log_result is True

    def test_operation_override_sits_between_explicit_and_category(self):
        resolver = PolicyResolver(
            category_hints={
                CallSiteCategory.SERVICE: PolicyHint(
                    level=LogLevel.DEBUG, log_result=False
                )
            },
            operation_hints={
                "UserService.create_user": PolicyHint(
                    level=LogLevel.WARN, log_params=False
                )
            },
        )

        without_explicit = resolver.resolve(SERVICE_SITE)
        with_explicit = resolver.resolve(SERVICE_SITE, PolicyHint(level=LogLevel.INFO))

        assert without_explicit == InstrumentationPolicy(
            LogLevel.WARN, False, False, True
        )
        assert with_explicit == InstrumentationPolicy(LogLevel.INFO, False, False, True)

    def test_explicit_category_has_no_category_hint(self):
        resolver = PolicyResolver(
            category_hints={CallSiteCategory.SERVICE: PolicyHint(level=LogLevel.DEBUG)}
        )
        site = CallSite("rebuild_index", CallSiteCategory.EXPLICIT)

        assert resolver.resolve(site) == DEFAULT_POLICY
        assert resolver.resolve(site, PolicyHint(log_params=False)).log_params is False

    def test_resolution_is_deterministic(self):
        resolver = PolicyResolver(
            category_hints={CallSiteCategory.CONTROLLER: PolicyHint(log_result=False)}
        )
        hint = PolicyHint(level=LogLevel.DEBUG)

        first = resolver.resolve(CONTROLLER_SITE, hint)
        second = resolver.resolve(CONTROLLER_SITE, hint)
        fresh = PolicyResolver(
            category_hints={CallSiteCategory.CONTROLLER: PolicyHint(log_result=False)}
        ).resolve(CONTROLLER_SITE, PolicyHint(level=LogLevel.DEBUG))

        assert first == second == fresh
        assert first is second

    def test_custom_default_policy(self):
        default = InstrumentationPolicy(LogLevel.DEBUG, False, False, False)
        resolver = PolicyResolver(default_policy=default)

        assert resolver.default_policy is default
        assert resolver.resolve(SERVICE_SITE) == default

    def test_cache_is_bounded(self):
        resolver = PolicyResolver(cache_size=2)

        for i in range(5):
            resolver.resolve(CallSite(f"Report.section_{i}", CallSiteCategory.NONE))

        assert resolver.cache_info().currsize == 2
        assert resolver.resolve(SERVICE_SITE) == DEFAULT_POLICY


class TestPolicyResolverFromConfig:
    """Tests for building a resolver from logging.aspect.* configuration."""

    def _config(self, text: str) -> ConfigurationProperties:
        self.tmpdir = tempfile.TemporaryDirectory()
        Path(self.tmpdir.name, "application.yml").write_text(text)
        return ConfigurationProperties(config_dir=self.tmpdir.name)

    def teardown_method(self):
        if getattr(self, "tmpdir", None):
            self.tmpdir.cleanup()
            self.tmpdir = None
        os.environ.pop("LOGGABLE_PROFILE", None)

    def test_defaults_resolve_to_default_policy(self):
        resolver = PolicyResolver.from_config(ConfigurationProperties())

        assert resolver.resolve(CONTROLLER_SITE) == DEFAULT_POLICY
        assert resolver.resolve(SERVICE_SITE) == DEFAULT_POLICY

    def test_category_and_operation_hints_from_yaml(self):
        config = self._config(
            """
logging:
  aspect:
    categories:
      controller:
        log_result: false
      service:
        level: DEBUG
    operations:
      UserService.create_user:
        level: WARN
        logParams: false
"""
        )

        resolver = PolicyResolver.from_config(config)

        assert resolver.resolve(CONTROLLER_SITE) == InstrumentationPolicy(
            LogLevel.INFO, True, False, True
        )
        assert resolver.resolve(
            CallSite("UserService.get_all_users", CallSiteCategory.SERVICE)
        ) == InstrumentationPolicy(LogLevel.DEBUG, True, True, True)
        assert resolver.resolve(SERVICE_SITE) == InstrumentationPolicy(
            LogLevel.WARN, False, True, True
        )

    def test_invalid_level_fails_at_startup(self):
        config = self._config(
            """
logging:
  aspect:
    categories:
      service:
        level: LOUD
"""
        )

        with pytest.raises(PolicyConfigurationException, match="LOUD"):
            PolicyResolver.from_config(config)

    def test_quoted_false_disables_field(self):
        config = self._config(
            """
logging:
  aspect:
    categories:
      service:
        log_result: 'false'
"""
        )

        resolver = PolicyResolver.from_config(config)

        assert resolver.resolve(SERVICE_SITE).log_result is False

    def test_operations_must_be_mapping(self):
        config = self._config(
            """
logging:
  aspect:
    operations:
      - UserService.create_user
"""
        )

        with pytest.raises(PolicyConfigurationException):
            PolicyResolver.from_config(config)
