"""Error context value object.

Carries the named context fields attached to a tracked error (user, guild,
channel, message, operation, component) plus an open ``metadata`` mapping for
handler-specific key/value pairs. Metadata values are restricted to a small
closed union of primitive kinds; anything else is stringified on the way in.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional, Union

from ..safe_text import safe_str

MetadataValue = Union[str, int, float, bool, None]

# camelCase keys accepted from callers that speak the dashboard/JSON dialect
_FIELD_ALIASES: Dict[str, str] = {
    "userId": "user_id",
    "guildId": "guild_id",
    "channelId": "channel_id",
    "messageId": "message_id",
}


def coerce_metadata_value(value: Any) -> MetadataValue:
    """Return ``value`` when it is a supported primitive, else its text form.

    Never raises: objects whose ``__str__`` fails fall back to ``repr``.
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    return safe_str(value)


def coerce_metadata(values: Optional[Mapping[str, Any]]) -> Dict[str, MetadataValue]:
    """Copy ``values`` into a metadata dict with string keys and primitive values."""
    if not values:
        return {}
    return {safe_str(k): coerce_metadata_value(v) for k, v in values.items()}


@dataclass(frozen=True)
class ErrorContext:
    """Named context fields plus open metadata for a tracked error.

    Attributes:
        user_id: Identifier of the user involved, if any.
        guild_id: Identifier of the guild/tenant involved, if any.
        channel_id: Identifier of the channel involved, if any.
        message_id: Identifier of the message involved, if any.
        operation: Logical operation that failed (e.g. ``"INSERT"``).
        component: Subsystem that produced the failure (e.g. ``"database"``).
        metadata: Handler-specific primitives (``field``, ``timeoutMs``, ...).
    """

    user_id: Optional[str] = None
    guild_id: Optional[str] = None
    channel_id: Optional[str] = None
    message_id: Optional[str] = None
    operation: Optional[str] = None
    component: Optional[str] = None
    metadata: Dict[str, MetadataValue] = field(default_factory=dict)

    @classmethod
    def from_value(cls, value: "ErrorContext | Mapping[str, Any] | None") -> "ErrorContext":
        """Build a context from an existing context, a mapping, or ``None``.

        Mapping keys may be snake_case field names or their camelCase aliases.
        Unknown keys are folded into ``metadata`` rather than rejected.
        """
        if value is None:
            return cls()
        if isinstance(value, ErrorContext):
            return value
        named: Dict[str, Optional[str]] = {}
        metadata: Dict[str, Any] = {}
        for key, raw in dict(value).items():
            if key == "metadata":
                if isinstance(raw, Mapping):
                    metadata.update(raw)
                continue
            name = _FIELD_ALIASES.get(key, key)
            if name in _NAMED_FIELDS:
                named[name] = None if raw is None else safe_str(raw)
            else:
                metadata[key] = raw
        return cls(metadata=coerce_metadata(metadata), **named)

    def merged(
        self,
        overrides: "ErrorContext | Mapping[str, Any] | None" = None,
        *,
        metadata: Optional[Mapping[str, Any]] = None,
        **named: Optional[str],
    ) -> "ErrorContext":
        """Return a new context with ``overrides`` shallow-merged on top.

        Non-``None`` named fields from ``overrides`` (then ``named``) win;
        metadata is merged key-wise in the same order.
        """
        values = {name: getattr(self, name) for name in _NAMED_FIELDS}
        merged_meta: Dict[str, MetadataValue] = dict(self.metadata)
        if overrides is not None:
            other = ErrorContext.from_value(overrides)
            values.update({n: getattr(other, n) for n in _NAMED_FIELDS if getattr(other, n) is not None})
            merged_meta.update(other.metadata)
        for name, val in named.items():
            if name not in _NAMED_FIELDS:
                raise TypeError(f"unknown context field: {name}")
            if val is not None:
                values[name] = safe_str(val)
        merged_meta.update(coerce_metadata(metadata))
        return ErrorContext(metadata=merged_meta, **values)

    def to_dict(self) -> Dict[str, Any]:
        """Return named fields (``None`` pruned) and a copy of ``metadata``."""
        data: Dict[str, Any] = {n: getattr(self, n) for n in _NAMED_FIELDS if getattr(self, n) is not None}
        data["metadata"] = dict(self.metadata)
        return data


_NAMED_FIELDS = tuple(f.name for f in fields(ErrorContext) if f.name != "metadata")


__all__ = ["ErrorContext", "MetadataValue", "coerce_metadata", "coerce_metadata_value"]
