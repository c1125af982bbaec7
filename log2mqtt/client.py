"""
Logger handle and initialization.

new_logger() builds the identity tags and the broker publisher, attaches
them to a dispatcher (the process-wide default unless one is given) and
returns the handle that owns the publisher.

Calls made through the module-level functions before new_logger() runs
are queued by the default dispatcher and published on the first call
afterwards.
"""

import os
import sys
from typing import Any, Callable, Optional

from .config import LoggerConfig
from .dispatcher import Dispatcher
from .host import LOOPBACK_ADDRESS, HostDiscoveryError, discover_hostname
from .logging import LogEvent, StructuredLogger, create_logger
from .publishers import BasePublisher, EnvelopePublisher
from .schemas import IdentityTags

_default_dispatcher = Dispatcher()


def get_default_dispatcher() -> Dispatcher:
    return _default_dispatcher


class Log2Mqtt:
    """
    Logger handle.

    The caller that creates the handle owns it and must close() it once,
    at shutdown. Usable as a context manager.

    Attributes:
        identity: Tags attached to every envelope
        publisher: Broker publisher owned by this handle
        dispatcher: Dispatcher this handle is attached to
    """

    def __init__(
        self,
        identity: IdentityTags,
        publisher: BasePublisher,
        dispatcher: Dispatcher,
        logger: Optional[StructuredLogger] = None
    ):
        self.identity = identity
        self.publisher = publisher
        self.dispatcher = dispatcher
        self.logger = logger or create_logger("log2mqtt")

    def trace(self, template: str, *args: Any) -> None:
        """Log with severity "debug"."""
        self.dispatcher.trace(template, *args)

    def info(self, template: str, *args: Any) -> None:
        """Log with severity "info"."""
        self.dispatcher.info(template, *args)

    def error(self, template: str, *args: Any) -> None:
        """Log with severity "error"."""
        self.dispatcher.error(template, *args)

    def println(self, line: str) -> None:
        """Log ``line`` verbatim with severity "info"."""
        self.dispatcher.println(line)

    def close(self) -> None:
        """Stop the broker publisher. Further calls are no-ops."""
        if self.publisher.closed:
            return
        self.publisher.close()
        self.logger.info(
            event=LogEvent.LOGGER_CLOSED,
            message="Logger closed",
            metadata={'application': self.identity.application}
        )

    @property
    def closed(self) -> bool:
        return self.publisher.closed

    def __enter__(self) -> "Log2Mqtt":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


def _resolve_hostname(logger: StructuredLogger) -> str:
    try:
        return discover_hostname()
    except HostDiscoveryError as e:
        logger.warning(
            event=LogEvent.LOGGER_HOSTNAME_FALLBACK,
            message="Couldn't find a valid hostname, using localhost",
            metadata={'error': str(e), 'hostname': LOOPBACK_ADDRESS}
        )
        return LOOPBACK_ADDRESS


def new_logger(
    config: Optional[LoggerConfig] = None,
    *,
    dispatcher: Optional[Dispatcher] = None,
    publisher_factory: Callable[..., BasePublisher] = EnvelopePublisher,
    **options: Any
) -> Log2Mqtt:
    """
    Create a logger handle. Mandatory before anything reaches the broker.

    Args:
        config: Logger configuration; built from ``options`` when omitted
        dispatcher: Dispatcher to attach to (default: process-wide one)
        publisher_factory: Publisher constructor (EnvelopePublisher
            keyword arguments)
        **options: LoggerConfig fields, used when ``config`` is None

    Returns:
        Log2Mqtt handle

    Terminates the process (SystemExit 1) on invalid configuration or if
    the publisher cannot be created.

    Example:
        >>> log = new_logger(application_name="billing",
        ...                  extra_tags={"region": "us"})
        >>> log.info("charged %d cards", 3)
        >>> log.close()
    """
    logger = create_logger("log2mqtt")
    dispatcher = dispatcher or _default_dispatcher

    if config is None:
        try:
            config = LoggerConfig.from_dict(options)
        except (TypeError, ValueError) as e:
            logger.error(
                event=LogEvent.CONFIGURATION_ERROR,
                message=f"Invalid logger configuration: {e}",
                exc_info=e
            )
            sys.exit(1)

    if config.uses_default_broker:
        host, port = config.broker_host_port()
        logger.warning(
            event=LogEvent.LOGGER_DEFAULT_BROKER,
            message="Broker address not defined, using default",
            metadata={'broker': f"{host}:{port}"}
        )

    hostname = _resolve_hostname(logger)
    host, port = config.broker_host_port()

    try:
        publisher = publisher_factory(
            broker_host=host,
            broker_port=port,
            logger=create_logger("publisher"),
            client_id=config.client_id or f"{config.application_name}-{os.getpid()}",
            username=config.username,
            password=config.password,
            qos=config.qos,
        )
        publisher.start()
    except (OSError, ValueError) as e:
        logger.error(
            event=LogEvent.MQTT_CONNECTION_ERROR,
            message=f"Failed to create MQTT producer @ {host}:{port}",
            exc_info=e
        )
        sys.exit(1)

    if config.connect_timeout > 0:
        publisher.wait_connected(config.connect_timeout)

    identity = IdentityTags(
        hostname=hostname,
        application=config.application_name,
        extra=config.extra_tags,
    )
    dispatcher.attach(identity, publisher)

    logger.info(
        event=LogEvent.LOGGER_INITIALIZED,
        message="Logger created",
        metadata={
            'application': config.application_name,
            'hostname': hostname,
            'broker': f"{host}:{port}",
            'queued': dispatcher.pending_count
        }
    )
    return Log2Mqtt(identity, publisher, dispatcher, logger)


def trace(template: str, *args: Any) -> None:
    """Log with severity "debug" through the default dispatcher."""
    _default_dispatcher.trace(template, *args)


def info(template: str, *args: Any) -> None:
    """Log with severity "info" through the default dispatcher."""
    _default_dispatcher.info(template, *args)


def error(template: str, *args: Any) -> None:
    """Log with severity "error" through the default dispatcher."""
    _default_dispatcher.error(template, *args)


def println(line: str) -> None:
    """Log ``line`` verbatim with severity "info" through the default dispatcher."""
    _default_dispatcher.println(line)
