"""
Envelope Publisher
==================

Bounded Context: Log Message Production

Publishes log envelopes to the fixed log topic.

Message Flow:
    Dispatcher → Envelope → EnvelopePublisher → MQTT Broker

Serialization failures are logged and the envelope is dropped; nothing is
raised back to the dispatcher.

Example:
    >>> from log2mqtt.publishers import EnvelopePublisher
    >>> from log2mqtt.logging import create_logger
    >>>
    >>> publisher = EnvelopePublisher(
    ...     broker_host="localhost",
    ...     logger=create_logger("publisher")
    ... )
    >>> publisher.start()
    >>> publisher.publish_envelope(envelope)
"""

import json
from typing import Optional
from .base import BasePublisher
from ..schemas import Envelope
from ..logging import StructuredLogger, LogEvent

LOG_TOPIC = "log/raw"


class EnvelopePublisher(BasePublisher):
    """
    Publisher for log envelopes.

    Attributes:
        Same as BasePublisher, plus:
        topic: Topic every envelope is published to
    """

    topic = LOG_TOPIC

    def __init__(
        self,
        broker_host: str,
        logger: StructuredLogger,
        broker_port: int = 1883,
        client_id: str = "log2mqtt",
        username: Optional[str] = None,
        password: Optional[str] = None,
        qos: int = 1
    ):
        super().__init__(
            broker_host=broker_host,
            broker_port=broker_port,
            client_id=client_id,
            logger=logger,
            username=username,
            password=password,
            qos=qos
        )

    def format_message(self, envelope: Envelope) -> bytes:
        """
        Serialize an envelope to its UTF-8 JSON payload.

        Raises:
            ValueError: If the envelope cannot be serialized
        """
        try:
            return json.dumps(envelope.to_dict()).encode('utf-8')
        except (TypeError, ValueError) as e:
            raise ValueError(f"Failed to format envelope: {e}") from e

    def publish_envelope(self, envelope: Envelope) -> bool:
        """
        Serialize and publish one envelope.

        Returns:
            True if handed to the client, False if dropped or refused
        """
        try:
            payload = self.format_message(envelope)
        except ValueError as e:
            self.logger.error(
                event=LogEvent.SERIALIZATION_ERROR,
                message="Error publishing: envelope dropped",
                exc_info=e,
                metadata={'uuid': envelope.uuid}
            )
            return False

        return self.publish(self.topic, payload)
