"""
Dispatcher
==========

Bounded Context: Log call routing

Entry point for every log call. Decides whether a call is queued or
published and drives the one-time backlog flush.

States:
    NO_INSTANCE  no logger attached; calls are queued and echoed locally
    BUFFERING    logger attached, nothing flushed yet
    FLUSHED      terminal; calls publish directly

Transitions:
    NO_INSTANCE --attach--> BUFFERING --first call--> FLUSHED

Flush procedure (under the lock):
    1. flip to FLUSHED and drain the backlog
    2. publish each drained call through the direct path, oldest first
    3. publish the triggering call

The flush is triggered by the first call after attach, not by a broker
handshake.

Threading:
    One lock guards the whole decide-and-act sequence, so publishing is
    serialized and no append can interleave with a drain.
"""

import threading
from enum import Enum
from typing import Any, Optional, Protocol

from .backlog import OverflowPolicy, PendingQueue
from .logging import ConsoleSink, LogEvent, StructuredLogger, create_logger
from .schemas import (
    NO_ARGS,
    Envelope,
    IdentityTags,
    LogCall,
    Severity,
    build_envelope,
    resolve_message,
)


class DispatchState(str, Enum):
    NO_INSTANCE = "no_instance"
    BUFFERING = "buffering"
    FLUSHED = "flushed"


class EnvelopeSink(Protocol):
    """What the dispatcher needs from a publisher."""

    def publish_envelope(self, envelope: Envelope) -> bool:
        ...


class Dispatcher:
    """
    Queue-or-publish state machine for log calls.

    Attributes:
        console: Local diagnostic sink every call is written to once
        logger: Structured logger for dispatcher diagnostics

    Example:
        >>> dispatcher = Dispatcher()
        >>> dispatcher.info("queued before attach")
        >>> dispatcher.attach(identity, publisher)
        >>> dispatcher.info("flushes the backlog, then publishes")
    """

    def __init__(
        self,
        capacity: Optional[int] = None,
        policy: OverflowPolicy = OverflowPolicy.DROP_OLDEST,
        console: Optional[ConsoleSink] = None,
        logger: Optional[StructuredLogger] = None
    ):
        """
        Args:
            capacity: Backlog capacity (None = unbounded)
            policy: Backlog overflow policy when bounded
            console: Local sink (default: ConsoleSink())
            logger: Diagnostics logger (default: create_logger("dispatcher"))
        """
        self.console = console or ConsoleSink()
        self.logger = logger or create_logger("dispatcher")

        self._lock = threading.Lock()
        self._state = DispatchState.NO_INSTANCE
        self._backlog = PendingQueue(capacity=capacity, policy=policy)
        self._identity: Optional[IdentityTags] = None
        self._publisher: Optional[EnvelopeSink] = None

    @property
    def state(self) -> DispatchState:
        return self._state

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._backlog)

    @property
    def dropped_count(self) -> int:
        with self._lock:
            return self._backlog.dropped

    def attach(self, identity: IdentityTags, publisher: EnvelopeSink) -> None:
        """
        Attach a logger instance.

        The first attach moves NO_INSTANCE to BUFFERING. A later attach
        replaces the instance and leaves the state where it is.
        """
        with self._lock:
            if self._state is DispatchState.NO_INSTANCE:
                self._state = DispatchState.BUFFERING
            else:
                self.logger.warning(
                    event=LogEvent.LOGGER_REPLACED,
                    message="Logger instance replaced",
                    metadata={
                        'state': self._state.value,
                        'application': identity.application
                    }
                )
            self._identity = identity
            self._publisher = publisher

    def dispatch(self, call: LogCall) -> None:
        """Route one call according to the current state."""
        with self._lock:
            if self._state is DispatchState.NO_INSTANCE:
                self._enqueue(call)
                return

            if self._state is DispatchState.BUFFERING:
                self._state = DispatchState.FLUSHED
                pending = self._backlog.drain_all()
                self.logger.info(
                    event=LogEvent.BACKLOG_FLUSHED,
                    message="Dumping queued messages to broker",
                    metadata={'queued': len(pending)}
                )
                for queued in pending:
                    self._publish(queued, echo=False)

            self._publish(call)

    def _enqueue(self, call: LogCall) -> None:
        if len(self._backlog) == 0:
            self.logger.info(
                event=LogEvent.BACKLOG_QUEUING,
                message="Queuing messages until a logger is created"
            )

        self.console.write(call)

        dropped_before = self._backlog.dropped
        stored = self._backlog.append(call)
        if self._backlog.dropped != dropped_before:
            self.logger.warning(
                event=LogEvent.BACKLOG_OVERFLOW,
                message=(
                    "Backlog full, call rejected" if not stored
                    else "Backlog full, oldest call dropped"
                ),
                metadata={
                    'capacity': self._backlog.capacity,
                    'policy': self._backlog.policy.value,
                    'dropped': self._backlog.dropped
                }
            )

    def _publish(self, call: LogCall, echo: bool = True) -> None:
        message = resolve_message(call.template, call.arguments)
        if echo:
            self.console.write(call, message)

        envelope = build_envelope(self._identity, message).with_severity(call.severity)
        self._publisher.publish_envelope(envelope)

    # Severity-tagged entry points

    def trace(self, template: str, *args: Any) -> None:
        self.dispatch(LogCall(template, Severity.TRACE, args))

    def info(self, template: str, *args: Any) -> None:
        self.dispatch(LogCall(template, Severity.INFO, args))

    def error(self, template: str, *args: Any) -> None:
        self.dispatch(LogCall(template, Severity.ERROR, args))

    def println(self, line: str) -> None:
        """Info call whose text is never interpolated."""
        self.dispatch(LogCall(line, Severity.INFO, (NO_ARGS,)))
