"""
MQTT Publishers
==============

Bounded Context: Message Production

Design:
- BasePublisher: paho-mqtt lifecycle, publish(topic, payload), close()
- EnvelopePublisher: Serializes log envelopes to the log topic

Public API
----------
    BasePublisher: Abstract publisher (for custom publishers)
    EnvelopePublisher: Log envelope publisher
    LOG_TOPIC: Topic every envelope is published to
"""

from .base import BasePublisher
from .envelope import EnvelopePublisher, LOG_TOPIC

__all__ = [
    'BasePublisher',
    'EnvelopePublisher',
    'LOG_TOPIC',
]
