"""Installed tokenforge version."""

from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    """Version of the installed distribution; a placeholder when running from a source checkout."""
    try:
        return version("tokenforge")
    except PackageNotFoundError:
        return "0.0.0+unknown"
