"""error_tracker.config.defaults
===========================

Central place for small, stable default values used across the error_tracker
package. These defaults can be overridden via environment variables or an
external configuration file, but provide sensible fallbacks for local
development and tests.

This module intentionally avoids importing from other tracker packages to
prevent circular dependencies. Only plain constants should live here.
"""

from __future__ import annotations

# ---- Retention ----
# Maximum number of records kept in memory; oldest are evicted beyond this.
DEFAULT_MAX_HISTORY = 1000
# Seconds after which LOW severity errors are auto-resolved (None disables).
DEFAULT_AUTO_RESOLVE_LOW_SECONDS = None
# Resolution text attached by the auto-resolver.
AUTO_RESOLVE_RESOLUTION_TEXT = "Auto-resolved"

# ---- Notifications ----
# Worker threads used to run subscriber callbacks.
DEFAULT_DISPATCH_WORKERS = 4

# ---- Statistics ----
DEFAULT_STATS_WINDOW = "day"

# ---- Logging ----
DEFAULT_LOG_JSON = True


__all__ = [
    "DEFAULT_MAX_HISTORY",
    "DEFAULT_AUTO_RESOLVE_LOW_SECONDS",
    "AUTO_RESOLVE_RESOLUTION_TEXT",
    "DEFAULT_DISPATCH_WORKERS",
    "DEFAULT_STATS_WINDOW",
    "DEFAULT_LOG_JSON",
]
