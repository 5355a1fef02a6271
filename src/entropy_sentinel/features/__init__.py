"""Feature extraction."""

from .entropy import shannon_entropy, size_entropy, source_address_entropy

__all__ = ["shannon_entropy", "size_entropy", "source_address_entropy"]
