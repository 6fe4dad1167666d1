from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "loggable"


def get_version() -> str:
    """Version of the installed loggable distribution, or "unknown" outside one."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "unknown"
