"""Thread-safe in-memory registry of structured errors.

Keeps records in an insertion-ordered map keyed by id and maintains secondary
indices (category, severity, resolution state) incrementally on insert,
resolve, and removal. Queries start from the narrowest applicable index and
return results in insertion order.

Suitable for single-process services; records do not survive restarts.
"""

from __future__ import annotations

import itertools
from threading import RLock
from typing import Any, Dict, Iterable, List, Mapping, Optional, TypeVar

from ..dto import ClearCriteria, ErrorQuery
from ..errors import DuplicateErrorIdError, ErrorCategory, ErrorSeverity
from ..models import StructuredError

_K = TypeVar("_K")

# Ordered id set: dict keys preserve insertion order, values unused.
_IdSet = Dict[str, None]


def _build_criteria(model: Any, criteria: Any, filters: Mapping[str, Any]) -> Any:
    """Normalize ``criteria`` (model, mapping or None) plus keyword filters."""
    if criteria is None:
        return model(**filters)
    if isinstance(criteria, model):
        if not filters:
            return criteria
        merged = criteria.model_dump(exclude_none=True)
        merged.update(filters)
        return model(**merged)
    merged = dict(criteria)
    merged.update(filters)
    return model(**merged)


class ErrorStore:
    """In-memory error store with incremental secondary indices.

    Thread safety: all public methods acquire a re-entrant lock, so concurrent
    reporters never lose or duplicate records and a record is visible to
    ``get``/``query`` as soon as ``add`` returns.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._lock = RLock()
        self._errors: Dict[str, StructuredError] = {}
        self._order: Dict[str, int] = {}
        self._sequence = itertools.count()
        self._by_category: Dict[ErrorCategory, _IdSet] = {}
        self._by_severity: Dict[ErrorSeverity, _IdSet] = {}
        self._by_resolved: Dict[bool, _IdSet] = {False: {}, True: {}}

    # -------------------------- Mutation -------------------------- #
    def add(self, error: StructuredError) -> None:
        """Insert ``error`` and index it.

        Raises:
            DuplicateErrorIdError: If a record with the same id is stored.
        """
        with self._lock:
            if error.id in self._errors:
                raise DuplicateErrorIdError(error.id)
            self._errors[error.id] = error
            self._order[error.id] = next(self._sequence)
            self._by_category.setdefault(error.category, {})[error.id] = None
            self._by_severity.setdefault(error.severity, {})[error.id] = None
            self._by_resolved[error.resolved][error.id] = None

    def resolve(self, error_id: str, resolution: str) -> bool:
        """Resolve an unresolved error.

        Returns:
            True if the record existed and was unresolved; False otherwise.
            Never raises.
        """
        with self._lock:
            error = self._errors.get(error_id)
            if error is None or not error.mark_resolved(resolution):
                return False
            self._by_resolved[False].pop(error_id, None)
            self._by_resolved[True][error_id] = None
            return True

    def clear(self, criteria: "ClearCriteria | Mapping[str, Any] | None" = None, **filters: Any) -> int:
        """Remove every record matching all supplied criteria fields.

        Parameters
        ----------
        criteria:
            A :class:`ClearCriteria`, an equivalent mapping, or ``None``.
        **filters:
            Keyword criteria (``resolved``, ``older_than``) merged on top.

        Returns
        -------
        int
            Number of records removed. With no criteria, everything is removed.
        """
        predicate = _build_criteria(ClearCriteria, criteria, filters)
        with self._lock:
            doomed = [eid for eid, err in self._errors.items() if predicate.matches(err)]
            for eid in doomed:
                self._remove(eid)
            return len(doomed)

    def trim(self, max_size: int) -> List[StructuredError]:
        """Evict the oldest records until at most ``max_size`` remain.

        Returns the evicted records (oldest first).
        """
        with self._lock:
            excess = len(self._errors) - max(0, max_size)
            if excess <= 0:
                return []
            doomed = list(itertools.islice(self._errors, excess))
            return [self._remove(eid) for eid in doomed]

    def reset(self) -> int:
        """Drop every record and index; return how many were stored."""
        with self._lock:
            count = len(self._errors)
            self._errors.clear()
            self._order.clear()
            self._by_category.clear()
            self._by_severity.clear()
            self._by_resolved = {False: {}, True: {}}
            return count

    def _remove(self, error_id: str) -> StructuredError:
        error = self._errors.pop(error_id)
        self._order.pop(error_id, None)
        self._discard(self._by_category, error.category, error_id)
        self._discard(self._by_severity, error.severity, error_id)
        self._by_resolved[error.resolved].pop(error_id, None)
        return error

    @staticmethod
    def _discard(index: Dict[_K, _IdSet], key: _K, error_id: str) -> None:
        bucket = index.get(key)
        if bucket is None:
            return
        bucket.pop(error_id, None)
        if not bucket:
            del index[key]

    # -------------------------- Reads -------------------------- #
    def get(self, error_id: str) -> Optional[StructuredError]:
        """Return the record with ``error_id`` or ``None``."""
        with self._lock:
            return self._errors.get(error_id)

    def query(self, criteria: "ErrorQuery | Mapping[str, Any] | None" = None, **filters: Any) -> List[StructuredError]:
        """Return records matching all supplied criteria, in insertion order.

        Parameters
        ----------
        criteria:
            An :class:`ErrorQuery`, an equivalent mapping, or ``None``.
        **filters:
            Keyword criteria (``category``, ``severity``, ``resolved``,
            ``since``, ``limit``) merged on top.

        Returns
        -------
        List[StructuredError]
            Matching records; ``limit`` keeps the first N. Empty when nothing
            matches.
        """
        predicate = _build_criteria(ErrorQuery, criteria, filters)
        with self._lock:
            candidates = self._candidate_ids(predicate)
            results: List[StructuredError] = []
            for eid in candidates:
                error = self._errors[eid]
                if not predicate.matches(error):
                    continue
                results.append(error)
                if predicate.limit is not None and len(results) >= predicate.limit:
                    break
            return results

    def _candidate_ids(self, predicate: ErrorQuery) -> Iterable[str]:
        """Pick the smallest index bucket for ``predicate`` (all ids if none apply)."""
        buckets: List[_IdSet] = []
        if predicate.category is not None:
            buckets.append(self._by_category.get(predicate.category, {}))
        if predicate.severity is not None:
            buckets.append(self._by_severity.get(predicate.severity, {}))
        if predicate.resolved is not None:
            buckets.append(self._by_resolved[predicate.resolved])
        if not buckets:
            return list(self._errors)
        smallest = min(buckets, key=len)
        # resolution moves ids between buckets, so restore insertion order
        return sorted(smallest, key=self._order.__getitem__)

    def values(self) -> List[StructuredError]:
        """Return a snapshot list of all records in insertion order."""
        with self._lock:
            return list(self._errors.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._errors)

    def __contains__(self, error_id: object) -> bool:
        with self._lock:
            return error_id in self._errors


__all__ = ["ErrorStore"]
