"""
Tests for log2mqtt.config and log2mqtt.host.
"""

import socket

import pytest

from log2mqtt import DEFAULT_BROKER_ADDRESS, LoggerConfig
from log2mqtt.config import parse_broker_address
from log2mqtt.host import HostDiscoveryError, discover_hostname


def test_parse_broker_address():
    assert parse_broker_address("mqtt.internal:8883") == ("mqtt.internal", 8883)
    assert parse_broker_address("mqtt.internal") == ("mqtt.internal", 1883)
    assert parse_broker_address("[::1]:1884") == ("::1", 1884)
    assert parse_broker_address("[::1]") == ("::1", 1883)


@pytest.mark.parametrize("address", [":1883", "host:0", "host:70000", "host:port", "[::1", "[::1]x"])
def test_parse_broker_address_rejects(address):
    with pytest.raises(ValueError):
        parse_broker_address(address)


def test_application_name_required():
    with pytest.raises(ValueError, match="No application name"):
        LoggerConfig(application_name="")


def test_invalid_values_rejected():
    with pytest.raises(ValueError):
        LoggerConfig(application_name="a", qos=3)
    with pytest.raises(ValueError):
        LoggerConfig(application_name="a", connect_timeout=-1)
    with pytest.raises(ValueError):
        LoggerConfig(application_name="a", broker_address="host:99999")
    with pytest.raises(ValueError):
        LoggerConfig(application_name="a", extra_tags={"n": 1})


def test_default_broker():
    config = LoggerConfig(application_name="a")

    assert config.uses_default_broker
    assert config.broker_host_port() == parse_broker_address(DEFAULT_BROKER_ADDRESS)


def test_from_yaml(tmp_path):
    path = tmp_path / "log2mqtt.yaml"
    path.write_text(
        "application_name: billing\n"
        "broker_address: mqtt.internal:8883\n"
        "extra_tags:\n"
        "  region: us\n"
        "  shard: 7\n"
        "qos: 0\n"
        "connect_timeout: 2\n"
    )

    config = LoggerConfig.from_yaml(path)

    assert config.application_name == "billing"
    assert config.broker_host_port() == ("mqtt.internal", 8883)
    assert config.extra_tags == {"region": "us", "shard": "7"}
    assert config.qos == 0
    assert config.connect_timeout == 2.0
    assert not config.uses_default_broker


def test_from_yaml_empty_file_has_no_application(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")

    with pytest.raises(ValueError):
        LoggerConfig.from_yaml(path)


def _addrinfo(*addresses):
    return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", (a, 0)) for a in addresses]


def test_discover_hostname_skips_loopback(monkeypatch):
    monkeypatch.setattr(socket, "getaddrinfo", lambda *a, **k: _addrinfo("127.0.1.1", "10.0.0.7"))

    assert discover_hostname() == "10.0.0.7"


def test_discover_hostname_only_loopback(monkeypatch):
    monkeypatch.setattr(socket, "getaddrinfo", lambda *a, **k: _addrinfo("127.0.0.1"))

    with pytest.raises(HostDiscoveryError, match="No IP address found"):
        discover_hostname()


def test_discover_hostname_lookup_failure(monkeypatch):
    def _fail(*args, **kwargs):
        raise socket.gaierror("Name or service not known")

    monkeypatch.setattr(socket, "getaddrinfo", _fail)

    with pytest.raises(HostDiscoveryError):
        discover_hostname()
