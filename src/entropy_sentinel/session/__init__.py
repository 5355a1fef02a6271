"""Detection session driver."""

from .driver import SessionDriver

__all__ = ["SessionDriver"]
