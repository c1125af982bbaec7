"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

This module defines typed event names for the library's own diagnostics.

Design:
- Enum-based (prevents typos, enables autocomplete)
- Hierarchical naming (namespace.category.action)
- Searchable in log aggregators (Elasticsearch, CloudWatch Insights)

Event Naming Convention:
    <component>.<category>.<action>

    component: logger, backlog, mqtt, error
    category: initialized, queuing, publish
    action: success, failed

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, message, metadata.queued
    | filter event = "backlog.flushed"
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - logger.*: Logger handle lifecycle
    - backlog.*: Pending queue and flush
    - mqtt.*: MQTT broker interactions
    - error.*: Error conditions
    """

    # ========== Logger Lifecycle ==========
    LOGGER_INITIALIZED = "logger.initialized"
    """Logger handle created and attached to a dispatcher."""

    LOGGER_REPLACED = "logger.replaced"
    """A dispatcher received a second logger instance."""

    LOGGER_DEFAULT_BROKER = "logger.default_broker"
    """No broker address configured, fallback address in use."""

    LOGGER_HOSTNAME_FALLBACK = "logger.hostname_fallback"
    """Hostname discovery failed, loopback address in use."""

    LOGGER_CLOSED = "logger.closed"
    """Logger handle released."""

    # ========== Backlog Events ==========
    BACKLOG_QUEUING = "backlog.queuing"
    """First call queued while no logger instance exists."""

    BACKLOG_FLUSHED = "backlog.flushed"
    """Queued calls drained to the broker."""

    BACKLOG_OVERFLOW = "backlog.overflow"
    """Call dropped because the backlog is at capacity."""

    # ========== MQTT Events ==========
    MQTT_CONNECTED = "mqtt.connected"
    """MQTT broker connection established."""

    MQTT_DISCONNECTED = "mqtt.disconnected"
    """MQTT broker connection lost."""

    MQTT_PUBLISH_SUCCESS = "mqtt.publish.success"
    """Message handed to the MQTT client."""

    MQTT_PUBLISH_DEFERRED = "mqtt.publish.deferred"
    """Message held by the MQTT client until the session is up."""

    MQTT_PUBLISH_FAILED = "mqtt.publish.failed"
    """Message publication refused."""

    # ========== Error Events ==========
    CONFIGURATION_ERROR = "error.configuration"
    """Logger configuration rejected."""

    SERIALIZATION_ERROR = "error.serialization"
    """Failed to serialize envelope to JSON."""

    MQTT_CONNECTION_ERROR = "error.mqtt_connection"
    """Failed to create or connect the MQTT client."""

    MQTT_PUBLISH_ERROR = "error.mqtt_publish"
    """Error during message publication."""

