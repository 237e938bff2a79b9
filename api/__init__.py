"""API route handlers."""
from . import fees, protocols

__all__ = ["fees", "protocols"]
