"""
Common Schema Types
==================

Bounded Context: Shared Data Structures

Types:
- Severity: Wire severity of a log call
- Timestamp: RFC 3339 timestamp wrapper
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Severity(str, Enum):
    """
    Severity of a log call, valued by its wire string.

    Trace calls are published as "debug".
    """
    TRACE = "debug"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Timestamp:
    """
    Immutable RFC 3339 timestamp wrapper.

    Seconds precision with the local UTC offset, e.g.
    ``2026-10-19T15:30:45+02:00``.

    Attributes:
        value: RFC 3339 formatted timestamp string
    """
    value: str

    @classmethod
    def now(cls) -> 'Timestamp':
        """Create timestamp from current wall-clock time."""
        return cls.from_datetime(datetime.now().astimezone())

    @classmethod
    def from_datetime(cls, dt: datetime) -> 'Timestamp':
        """Create timestamp from an aware datetime object."""
        return cls(value=dt.isoformat(timespec='seconds'))

    def to_datetime(self) -> datetime:
        """Parse to datetime object.

        Raises:
            ValueError: If timestamp format invalid
        """
        try:
            return datetime.fromisoformat(self.value)
        except ValueError as e:
            raise ValueError(f"Invalid RFC 3339 timestamp: {self.value}") from e

    def to_dict(self) -> str:
        """Serialize to JSON (as string)."""
        return self.value
