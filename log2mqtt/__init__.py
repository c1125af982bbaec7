"""
log2mqtt
========

Bounded Context: Log forwarding to an MQTT broker

This package forwards structured log messages to an MQTT broker. Each call
is wrapped in an envelope (identity tags, unique id, timestamp, severity,
message) and published to the ``log/raw`` topic.

Architecture:
- schemas/: Immutable log call, identity and envelope types
- backlog: Ordered queue for calls made before a logger exists
- dispatcher: Queue-or-publish state machine and one-time flush
- publishers/: paho-mqtt publisher for envelopes
- logging/: Structured library diagnostics and the local console sink
- config: Validated configuration (YAML loadable)

Public API
----------
Initialization:
    new_logger, Log2Mqtt, LoggerConfig

Calls (default dispatcher):
    trace, info, error, println

Building blocks:
    Dispatcher, DispatchState, PendingQueue, OverflowPolicy
    EnvelopePublisher, LOG_TOPIC
    Severity, LogCall, IdentityTags, Envelope, NO_ARGS

Example:
    >>> import log2mqtt
    >>> log2mqtt.info("starting %s", "worker")      # queued, echoed locally
    >>> log = log2mqtt.new_logger(application_name="billing",
    ...                           broker_address="mqtt.internal:1883")
    >>> log2mqtt.info("ready")                      # flushes backlog, then publishes
    >>> log.close()
"""

# Version
__version__ = "1.0.0"

# Schemas
from .schemas import (
    NO_ARGS,
    Severity,
    Timestamp,
    LogCall,
    IdentityTags,
    Envelope,
)

# Backlog and dispatch
from .backlog import PendingQueue, OverflowPolicy
from .dispatcher import Dispatcher, DispatchState

# Publishers
from .publishers import BasePublisher, EnvelopePublisher, LOG_TOPIC

# Configuration and client
from .config import LoggerConfig, DEFAULT_BROKER_ADDRESS
from .client import (
    Log2Mqtt,
    new_logger,
    get_default_dispatcher,
    trace,
    info,
    error,
    println,
)

__all__ = [
    # Version
    '__version__',
    # Schemas
    'NO_ARGS',
    'Severity',
    'Timestamp',
    'LogCall',
    'IdentityTags',
    'Envelope',
    # Backlog and dispatch
    'PendingQueue',
    'OverflowPolicy',
    'Dispatcher',
    'DispatchState',
    # Publishers
    'BasePublisher',
    'EnvelopePublisher',
    'LOG_TOPIC',
    # Configuration and client
    'LoggerConfig',
    'DEFAULT_BROKER_ADDRESS',
    'Log2Mqtt',
    'new_logger',
    'get_default_dispatcher',
    'trace',
    'info',
    'error',
    'println',
]
