"""
log2mqtt Schemas
================

Bounded Context: Data Structures

Immutable, typed data structures for log calls and published envelopes.

Public API
----------
Common Types:
    Severity: Wire severity (debug/info/error)
    Timestamp: RFC 3339 timestamp wrapper

Envelope Types:
    LogCall: One user call (template, severity, arguments)
    IdentityTags: Per-process hostname/application/extra tags
    Envelope: Structured message published to the broker
    NO_ARGS: Marker for calls without arguments
    resolve_message: Template interpolation
    build_envelope: Envelope Builder

Example:
    >>> from log2mqtt.schemas import IdentityTags, Severity, build_envelope
    >>> identity = IdentityTags(hostname="10.0.0.7", application="billing")
    >>> envelope = build_envelope(identity, "started").with_severity(Severity.INFO)
"""

from .common import Severity, Timestamp
from .envelope import (
    NO_ARGS,
    LogCall,
    IdentityTags,
    Envelope,
    resolve_message,
    build_envelope,
)

__all__ = [
    # Common types
    'Severity',
    'Timestamp',
    # Envelope types
    'NO_ARGS',
    'LogCall',
    'IdentityTags',
    'Envelope',
    'resolve_message',
    'build_envelope',
]
