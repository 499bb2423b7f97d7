"""Architecture enforcement tests for the tracker's layering.

This module provides lightweight, repository-local invariants to ensure that
the inner ``error_tracker/base`` layer (taxonomy, model, store, dispatch,
export) stays decoupled from the outer layer (the ``ErrorTracker`` facade and
configuration loading). It focuses on import boundaries only and is designed
to fail fast if a forbidden dependency is introduced.

Rules validated here:
1) ``error_tracker/base`` must not import ``error_tracker.tracker`` or
   ``error_tracker.config`` (absolute or relative).
2) No module installs process-wide exception hooks at import time.

These tests are intentionally static-file scans to avoid import-time side
effects, and they emit clear failure messages for quick remediation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent
PACKAGE_ROOT = REPO_ROOT / "error_tracker"


def _iter_python_files(root: Path) -> Iterable[Path]:
    """Yield all Python source files under a root directory.

    Skips bytecode caches and test directories.
    """

    for path in root.rglob("*.py"):
        if "__pycache__" in path.parts or "tests" in path.parts:
            continue
        yield path


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def test_base_layer_does_not_import_outer_layers() -> None:
    """Ensure base modules do not import the facade or config layer.

    Failure mode
    ------------
    The test fails with a clear message listing offending files and the
    matched forbidden import.
    """

    base_root = PACKAGE_ROOT / "base"
    if not base_root.is_dir():
        pytest.skip("error_tracker/base not found; skipping boundary check")

    forbidden_snippets: List[str] = [
        "from error_tracker.tracker",
        "import error_tracker.tracker",
        "from error_tracker.config",
        "import error_tracker.config",
        "from ..tracker",
        "from ..config",
        "from ...tracker",
        "from ...config",
    ]

    offenders: List[str] = []
    for py in _iter_python_files(base_root):
        src = _read_text(py)
        rel = py.relative_to(PACKAGE_ROOT)
        matches = [snippet for snippet in forbidden_snippets if snippet in src]
        if matches:
            offenders.extend(f"{rel}: contains '{m}'" for m in matches)

    if offenders:
        pytest.fail("Base layer must not import outer layers (facade/config).\n" + "\n".join(offenders))


def test_exception_hooks_only_assigned_by_facade() -> None:
    """Only ``tracker.py`` may assign ``sys.excepthook``/``threading.excepthook``."""

    offenders: List[str] = []
    for py in _iter_python_files(PACKAGE_ROOT):
        if py.name == "tracker.py":
            continue
        src = _read_text(py)
        for snippet in ("sys.excepthook =", "threading.excepthook ="):
            if snippet in src:
                offenders.append(f"{py.relative_to(PACKAGE_ROOT)}: contains '{snippet}'")

    if offenders:
        pytest.fail("Process-wide hooks must stay opt-in on ErrorTracker.\n" + "\n".join(offenders))
