"""Error statistics aggregation package."""

from .aggregator import WINDOW_DURATIONS, window_start, compute_stats

__all__ = ["WINDOW_DURATIONS", "window_start", "compute_stats"]
