"""API extensions and version information of the example application."""

from __future__ import annotations

# Extensions present when the daemon starts.
_EXTENSIONS = (
    "custom_extension_a_0",
    "custom_extension_a_1",
)

# Filled in by the build system.
_VERSION = ""


def extensions() -> list[str]:
    """Return the list of API extensions of the application."""
    return list(_EXTENSIONS)


def version() -> str:
    """Return the application version set at build time."""
    return _VERSION