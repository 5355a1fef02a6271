"""Entropy-based DDoS detection over simulated packet traffic."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("entropy-sentinel")
except PackageNotFoundError:  # pragma: no cover - fallback for editable installs
    __version__ = "0.0.0"

__all__ = ["__version__"]
