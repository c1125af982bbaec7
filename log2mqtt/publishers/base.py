"""
Base MQTT Publisher
==================

Bounded Context: MQTT Infrastructure

This module provides the base class wrapping the paho-mqtt client.

Design:
- Non-blocking start (connect_async + loop_start), so construction never
  waits on the network
- Fire-and-forget publish: the outcome is logged, never raised
- Messages published with QoS > 0 before the session is up are held by
  the paho client and sent on connect
- Single close(): stops the network loop and disconnects

Architecture:
    BasePublisher
        ↓
    EnvelopePublisher (concrete)

Responsibilities:
- MQTT connection lifecycle
- Payload publication to the broker
- Error handling and logging
- NOT responsible for: Message formatting (delegated to subclasses)
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, Union
import paho.mqtt.client as mqtt

from ..logging import StructuredLogger, LogEvent


class BasePublisher(ABC):
    """
    Abstract base class for MQTT publishers.

    Attributes:
        broker_host: MQTT broker hostname
        broker_port: MQTT broker port
        client_id: MQTT client identifier
        qos: Quality of Service
        logger: Structured logger instance

    Thread Safety:
        Thread-safe via paho-mqtt's loop_start() and threading.Event
    """

    def __init__(
        self,
        broker_host: str,
        broker_port: int,
        client_id: str,
        logger: StructuredLogger,
        username: Optional[str] = None,
        password: Optional[str] = None,
        qos: int = 1
    ):
        """
        Initialize MQTT publisher.

        Args:
            broker_host: MQTT broker hostname
            broker_port: MQTT broker port
            client_id: Unique client identifier
            logger: Structured logger for observability
            username: MQTT authentication username (optional)
            password: MQTT authentication password (optional)
            qos: Quality of Service (0=fire-and-forget, 1=at-least-once)
        """
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.client_id = client_id
        self.logger = logger
        self.qos = qos

        self.client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=client_id
        )
        if username and password:
            self.client.username_pw_set(username, password)

        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect

        # Connection state
        self._connected = threading.Event()
        self._closed = False
        self._message_count = 0
        self._failed_count = 0
        self._stats_lock = threading.Lock()

    @property
    def broker(self) -> str:
        return f"{self.broker_host}:{self.broker_port}"

    def _on_connect(self, client, userdata, flags, reason_code, properties) -> None:
        if reason_code.is_failure:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message=f"Failed to connect to broker ({reason_code})",
                metadata={'broker': self.broker}
            )
            return

        self._connected.set()
        self.logger.info(
            event=LogEvent.MQTT_CONNECTED,
            message="Connected to MQTT broker",
            metadata={'broker': self.broker, 'client_id': self.client_id}
        )

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties) -> None:
        self._connected.clear()
        self.logger.warning(
            event=LogEvent.MQTT_DISCONNECTED,
            message="Disconnected from MQTT broker",
            metadata={'broker': self.broker, 'reason_code': str(reason_code)}
        )

    def start(self) -> None:
        """
        Start the network loop and begin connecting in the background.

        Raises:
            ValueError: If host or port is invalid
            OSError: If the client cannot be started
        """
        self.client.connect_async(self.broker_host, self.broker_port)
        self.client.loop_start()

    def wait_connected(self, timeout: float) -> bool:
        """
        Block until the broker handshake completes or ``timeout`` elapses.

        Returns:
            True if connected, False on timeout
        """
        if self._connected.wait(timeout=timeout):
            return True

        self.logger.warning(
            event=LogEvent.MQTT_CONNECTION_ERROR,
            message="Connection timeout, continuing without broker handshake",
            metadata={'broker': self.broker, 'timeout': timeout}
        )
        return False

    def close(self) -> None:
        """
        Stop the network loop and disconnect. Subsequent calls are no-ops.
        """
        if self._closed:
            self.logger.warning(
                event=LogEvent.MQTT_DISCONNECTED,
                message="Publisher already closed"
            )
            return

        self._closed = True
        try:
            self.client.disconnect()
            self.client.loop_stop()
            self.logger.info(
                event=LogEvent.MQTT_DISCONNECTED,
                message="Disconnected from broker",
                metadata={'message_count': self._message_count}
            )
        except Exception as e:
            self.logger.error(
                event=LogEvent.MQTT_CONNECTION_ERROR,
                message="Error during disconnect",
                exc_info=e
            )

    def is_connected(self) -> bool:
        """Check if currently connected to broker."""
        return self._connected.is_set()

    @property
    def closed(self) -> bool:
        return self._closed

    @abstractmethod
    def format_message(self, *args, **kwargs) -> bytes:
        """
        Format a message into the wire payload.

        Subclasses must implement this to provide message-specific encoding.
        """
        raise NotImplementedError("Subclasses must implement format_message()")

    def publish(self, topic: str, payload: Union[bytes, str]) -> bool:
        """
        Publish a serialized payload to ``topic``.

        Args:
            topic: MQTT topic
            payload: Serialized message

        Returns:
            True if the client accepted the message (sent, or held until
            connect for QoS > 0), False otherwise. Never raises.
        """
        if self._closed:
            self.logger.warning(
                event=LogEvent.MQTT_PUBLISH_FAILED,
                message="Cannot publish: publisher closed",
                metadata={'topic': topic}
            )
            return False

        try:
            result = self.client.publish(topic, payload=payload, qos=self.qos)
        except Exception as e:
            with self._stats_lock:
                self._failed_count += 1
            self.logger.error(
                event=LogEvent.MQTT_PUBLISH_ERROR,
                message="Error publishing message",
                exc_info=e,
                metadata={'topic': topic}
            )
            return False

        if result.rc == mqtt.MQTT_ERR_SUCCESS:
            with self._stats_lock:
                self._message_count += 1
            self.logger.debug(
                event=LogEvent.MQTT_PUBLISH_SUCCESS,
                message="Published message",
                metadata={'topic': topic, 'mid': result.mid, 'qos': self.qos}
            )
            return True

        if result.rc == mqtt.MQTT_ERR_NO_CONN and self.qos > 0:
            with self._stats_lock:
                self._message_count += 1
            self.logger.debug(
                event=LogEvent.MQTT_PUBLISH_DEFERRED,
                message="Broker not connected, message held by client",
                metadata={'topic': topic, 'mid': result.mid}
            )
            return True

        with self._stats_lock:
            self._failed_count += 1
        self.logger.warning(
            event=LogEvent.MQTT_PUBLISH_FAILED,
            message=f"Publish failed ({mqtt.error_string(result.rc)})",
            metadata={'topic': topic, 'rc': result.rc}
        )
        return False

    def get_stats(self) -> Dict[str, Any]:
        """
        Get publisher statistics.

        Example:
            >>> stats = publisher.get_stats()
            >>> print(f"Published {stats['message_count']} messages")
        """
        with self._stats_lock:
            return {
                'message_count': self._message_count,
                'failed_count': self._failed_count,
                'connected': self._connected.is_set(),
                'closed': self._closed,
                'broker': self.broker
            }
