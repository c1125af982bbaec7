"""
Envelope Schema
===============

Bounded Context: Outbound Log Messages

This module defines the log call, the per-process identity tags and the
envelope published for every call, plus the builder that turns the first
two into the third.

Design Principles:
- Immutability: frozen dataclasses, read-only tag mappings
- No aliasing: every envelope owns a fresh copy of the identity tags
- Format errors never propagate: a template that cannot be interpolated
  is published verbatim

Wire format:
    {
        "data": {
            "hostname": "10.0.0.7",
            "application": "billing",
            "region": "us",
            "uuid": "4c1f1b0e-...",
            "msg": "charged 3 cards",
            "timestamp": "2026-10-19T15:30:45+02:00",
            "severity": "info"
        }
    }
"""

import uuid
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .common import Severity, Timestamp


class _NoArgs:
    """Marker passed as the first argument of a call that takes none."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'NO_ARGS'


NO_ARGS = _NoArgs()

@dataclass(frozen=True)
class LogCall:
    """
    One user log call, as issued.

    Attributes:
        template: printf-style template (or literal message)
        severity: Call severity
        arguments: Positional interpolation arguments, possibly empty
    """
    template: str
    severity: Severity
    arguments: Tuple[Any, ...] = ()

    def __post_init__(self):
        if not isinstance(self.arguments, tuple):
            object.__setattr__(self, 'arguments', tuple(self.arguments))


@dataclass(frozen=True)
class IdentityTags:
    """
    Fixed per-process tags attached to every envelope.

    Attributes:
        hostname: Host address the process runs on
        application: Application name
        extra: Additional string tags (read-only)

    Invariants:
        - hostname and application are non-empty
    """
    hostname: str
    application: str
    extra: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.hostname:
            raise ValueError("IdentityTags hostname cannot be empty")
        if not self.application:
            raise ValueError("IdentityTags application cannot be empty")
        object.__setattr__(self, 'extra', MappingProxyType(dict(self.extra)))

    def as_dict(self) -> Dict[str, str]:
        """Return a new dict; extra tags may override hostname/application."""
        tags = {'hostname': self.hostname, 'application': self.application}
        tags.update(self.extra)
        return tags


@dataclass(frozen=True)
class Envelope:
    """
    Structured message published for one log call.

    Attributes:
        tags: Copy of the identity tags
        uuid: Random (v4) unique id
        message: Resolved message text
        timestamp: Construction time
        severity: Call severity (attached after construction)
    """
    tags: Mapping[str, str]
    uuid: str
    message: str
    timestamp: Timestamp
    severity: Optional[Severity] = None

    def __post_init__(self):
        object.__setattr__(self, 'tags', MappingProxyType(dict(self.tags)))

    def with_severity(self, severity: Severity) -> 'Envelope':
        """Return a copy of this envelope carrying ``severity``."""
        return replace(self, severity=severity)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        """Serialize to the JSON-compatible wire structure."""
        data = dict(self.tags)
        data['uuid'] = self.uuid
        data['msg'] = self.message
        data['timestamp'] = self.timestamp.to_dict()
        if self.severity is not None:
            data['severity'] = self.severity.value
        return {'data': data}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'Envelope':
        """Deserialize from the wire structure.

        Raises:
            ValueError: If required keys missing or severity unknown
        """
        try:
            data = dict(payload['data'])
            severity = data.pop('severity', None)
            return cls(
                uuid=data.pop('uuid'),
                message=data.pop('msg'),
                timestamp=Timestamp(value=data.pop('timestamp')),
                severity=Severity(severity) if severity is not None else None,
                tags=data,
            )
        except KeyError as e:
            raise ValueError(f"Missing required envelope field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid envelope data: {e}")


def resolve_message(template: str, arguments: Sequence[Any] = ()) -> str:
    """
    Resolve the text of a log call.

    With no arguments, or NO_ARGS as the first argument, the template is
    used verbatim. Otherwise it is interpolated printf-style; a template
    that does not match its arguments, or an argument that fails to
    format, falls back to the verbatim text.

    Example:
        >>> resolve_message("%d cards", (3,))
        '3 cards'
        >>> resolve_message("100%", ())
        '100%'
    """
    if not arguments or arguments[0] is NO_ARGS:
        return template
    try:
        return template % tuple(arguments)
    except Exception:
        return template


def build_envelope(identity: IdentityTags, message: str) -> Envelope:
    """
    Build a fresh envelope for ``message``.

    Reads the clock and draws a random id; touches no shared state.
    Severity is attached by the caller with Envelope.with_severity().
    """
    return Envelope(
        tags=identity.as_dict(),
        uuid=str(uuid.uuid4()),
        message=message,
        timestamp=Timestamp.now(),
    )
