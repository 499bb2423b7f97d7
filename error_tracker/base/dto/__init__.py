"""DTO validation package for error tracker criteria."""

from .filters import StatsWindow, ErrorQuery, ClearCriteria

__all__ = ["StatsWindow", "ErrorQuery", "ClearCriteria"]
