"""
Configuration schema for the log2mqtt logger.

Configuration is validated at construction (frozen dataclass) and can be
loaded from YAML.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import yaml

DEFAULT_BROKER_ADDRESS = "172.22.34.183:1883"
DEFAULT_BROKER_PORT = 1883


def parse_broker_address(address: str) -> Tuple[str, int]:
    """
    Split ``host[:port]`` into host and port.

    IPv6 literals must be bracketed when a port is given: ``[::1]:1883``.

    Raises:
        ValueError: If host is empty or port is not in [1, 65535]
    """
    host, port = address.strip(), DEFAULT_BROKER_PORT

    if host.startswith('['):
        bracket_end = host.find(']')
        if bracket_end == -1:
            raise ValueError(f"Invalid broker address: {address}")
        rest = host[bracket_end + 1:]
        host = host[1:bracket_end]
        if rest:
            if not rest.startswith(':'):
                raise ValueError(f"Invalid broker address: {address}")
            port = _parse_port(rest[1:], address)
    elif host.count(':') == 1:
        host, port_text = host.split(':')
        port = _parse_port(port_text, address)

    if not host:
        raise ValueError(f"Broker address has no host: {address}")

    return host, port


def read_yaml(yaml_path: Path) -> Dict[str, Any]:
    """Load a YAML file as a plain mapping; fields are not validated here."""
    with open(yaml_path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must hold a mapping: {yaml_path}")
    return data


def _parse_port(text: str, address: str) -> int:
    try:
        port = int(text)
    except ValueError:
        raise ValueError(f"Invalid broker port in {address}: {text!r}")
    if not 1 <= port <= 65535:
        raise ValueError(f"Broker port must be in [1, 65535], got {port}")
    return port


@dataclass(frozen=True)
class LoggerConfig:
    """
    Logger configuration.

    application_name is required; an omitted broker_address falls back to
    DEFAULT_BROKER_ADDRESS when the logger is created.
    """

    application_name: str
    broker_address: Optional[str] = None
    extra_tags: Dict[str, str] = field(default_factory=dict)

    # MQTT settings
    qos: int = 1
    connect_timeout: float = 0.0  # seconds; 0 = do not wait for the broker
    client_id: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def __post_init__(self):
        """Validate logger configuration."""
        if not self.application_name:
            raise ValueError("No application name defined")

        if self.broker_address:
            parse_broker_address(self.broker_address)

        for key, value in self.extra_tags.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ValueError(
                    f"extra_tags must map strings to strings, got {key!r}: {value!r}"
                )

        if self.qos not in {0, 1, 2}:
            raise ValueError(
                f"MQTT QoS must be 0, 1, or 2, got {self.qos}"
            )

        if self.connect_timeout < 0:
            raise ValueError(
                f"connect_timeout must be >= 0, got {self.connect_timeout}"
            )

    @property
    def uses_default_broker(self) -> bool:
        return not self.broker_address

    def broker_host_port(self) -> Tuple[str, int]:
        """Host and port to connect to, default address included."""
        return parse_broker_address(self.broker_address or DEFAULT_BROKER_ADDRESS)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggerConfig":
        """
        Build configuration from a plain mapping.

        Extra tag values are coerced to strings.
        """
        extra_tags = {
            str(key): str(value)
            for key, value in (data.get("extra_tags") or {}).items()
        }

        return cls(
            application_name=data.get("application_name") or "",
            broker_address=data.get("broker_address"),
            extra_tags=extra_tags,
            qos=data.get("qos", 1),
            connect_timeout=float(data.get("connect_timeout", 0.0)),
            client_id=data.get("client_id"),
            username=data.get("username"),
            password=data.get("password"),
        )

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "LoggerConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            application_name: "billing"
            broker_address: "mqtt.internal:1883"
            extra_tags:
              region: "us"
            qos: 1
            connect_timeout: 2.5
        """
        return cls.from_dict(read_yaml(yaml_path))
