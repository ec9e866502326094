"""Guessmeter password strength estimation package."""

from importlib.metadata import PackageNotFoundError, version

from guessmeter.api import Entropy, analyze

__all__ = ["Entropy", "__version__", "analyze"]

try:
    __version__ = version("guessmeter")
except PackageNotFoundError:  # pragma: no cover - happens only from source checkout
    __version__ = "0.0.0-dev"
