"""In-memory error store package."""

from .error_store import ErrorStore

__all__ = ["ErrorStore"]
