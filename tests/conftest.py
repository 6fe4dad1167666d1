import pytest

from loggable.core.instrumentation import set_interceptor


@pytest.fixture(autouse=True)
def reset_interceptor():
    """Each test starts with the interceptor rebuilt from configuration."""
    set_interceptor(None)
    yield
    set_interceptor(None)
