"""
Shared test doubles for log2mqtt.

Nothing here opens a network connection: FakePublisher stands in for the
broker publisher, FakeMQTTClient for the paho client inside it.
"""

import json
import logging
from types import SimpleNamespace

import paho.mqtt.client as mqtt
import pytest

from log2mqtt import Dispatcher, IdentityTags
from log2mqtt.logging import ConsoleSink, StructuredLogger


class FakePublisher:
    """Records envelopes instead of publishing them."""

    def __init__(self, outcome=True, **kwargs):
        self.kwargs = kwargs
        self.outcome = outcome
        self.envelopes = []
        self.started = False
        self.waited = None
        self.close_count = 0

    def start(self):
        self.started = True

    def wait_connected(self, timeout):
        self.waited = timeout
        return False

    def publish_envelope(self, envelope):
        self.envelopes.append(envelope)
        return self.outcome

    def close(self):
        self.close_count += 1

    @property
    def closed(self):
        return self.close_count > 0

    @property
    def messages(self):
        return [e.message for e in self.envelopes]


class FakeMQTTClient:
    """Minimal paho client replacement."""

    def __init__(self, rc=mqtt.MQTT_ERR_SUCCESS, raises=None):
        self.rc = rc
        self.raises = raises
        self.published = []
        self.calls = []

    def publish(self, topic, payload=None, qos=0):
        if self.raises:
            raise self.raises
        self.published.append((topic, payload, qos))
        return SimpleNamespace(rc=self.rc, mid=len(self.published))

    def connect_async(self, host, port):
        self.calls.append(('connect_async', host, port))

    def loop_start(self):
        self.calls.append(('loop_start',))

    def loop_stop(self):
        self.calls.append(('loop_stop',))

    def disconnect(self):
        self.calls.append(('disconnect',))

    def decoded(self):
        return [json.loads(payload) for _, payload, _ in self.published]


@pytest.fixture
def identity():
    return IdentityTags(hostname="10.0.0.7", application="billing", extra={"region": "us"})


@pytest.fixture
def publisher():
    return FakePublisher()


@pytest.fixture
def quiet_logger():
    return StructuredLogger("test", level=logging.CRITICAL)


@pytest.fixture
def dispatcher(quiet_logger):
    return Dispatcher(console=ConsoleSink(), logger=quiet_logger)


@pytest.fixture
def capture_logger(caplog):
    """
    Route one named logger straight into caplog.

    log2mqtt loggers stop propagating once they own a handler, so the
    capture handler is attached to the logger itself. Propagation is
    switched off while attached so records are not captured twice.
    """
    attached = []

    def _capture(name):
        logger = logging.getLogger(name)
        attached.append((logger, logger.propagate))
        logger.addHandler(caplog.handler)
        logger.propagate = False

        def _records():
            return [r for r in caplog.records if r.name == name]

        return _records

    yield _capture

    for logger, propagate in attached:
        logger.removeHandler(caplog.handler)
        logger.propagate = propagate


@pytest.fixture
def console_records(capture_logger):
    """Records written to the local console sink."""
    return capture_logger("log2mqtt.console")
