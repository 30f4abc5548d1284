"""Get co2flux version information.

This is in a dedicated file to avoid circular imports
during initialization
"""
from importlib.metadata import version, PackageNotFoundError


def get_version():
    """Retrieve Version Data"""
    try:
        __version__ = version("co2flux")
    except PackageNotFoundError:
        __version__ = "unknown"

    return __version__
