"""
Logging for log2mqtt
====================

Bounded Context: Observability

Two separate outputs live here:

- StructuredLogger: JSON diagnostics about the library itself
  (initialization, backlog flush, broker interactions)
- ConsoleSink: the local copy of every user log call

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function
    ConsoleSink: Local diagnostic sink for user calls

Example:
    >>> from log2mqtt.logging import create_logger, LogEvent
    >>> logger = create_logger("dispatcher")
    >>> logger.info(
    ...     event=LogEvent.BACKLOG_FLUSHED,
    ...     message="Dumping queued messages to broker",
    ...     metadata={'queued': 2}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger
from .console import ConsoleSink

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
    'ConsoleSink',
]
