"""RealFlight link client package."""

from importlib.metadata import version, PackageNotFoundError

__all__ = ["__version__"]

try:
    __version__ = version("rf-bridge")
except PackageNotFoundError:  # pragma: no cover - during local dev without install
    __version__ = "0.0.0"
