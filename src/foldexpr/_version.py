"""Installed foldexpr version."""

from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    try:
        return version("foldexpr")
    except PackageNotFoundError:
        # Running from a source checkout that was never installed
        return "0.0.0"
