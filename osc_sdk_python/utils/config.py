"""
Network configuration for the OSC layer.

Values are plain inputs to OscRegistry, OscSender and PeriodicSender; they
can be built in code or loaded from a JSON file such as:

    {
        "target_ip": "192.168.0.20",
        "send_port": 17200,
        "receive_port": 20001,
        "send_interval": 0.033,
        "address_prefix": "/VRnotrame"
    }
"""

import json
import pathlib
from dataclasses import asdict, dataclass, fields
from typing import Optional


@dataclass
class NetworkConfig:
    """
    OSC network settings.

    Args:
        target_ip: Destination host for outgoing messages
        send_port: Destination UDP port
        receive_port: Local UDP port to listen on
        send_interval: Seconds between periodic sends (~30 Hz by default)
        address_prefix: Prefix for "address:value" style sends
        max_queue_size: Bound on the inbound queue, None for unbounded
    """

    target_ip: str = "127.0.0.1"
    send_port: int = 17200
    receive_port: int = 20001
    send_interval: float = 0.033
    address_prefix: str = ""
    max_queue_size: Optional[int] = None

    def __post_init__(self):
        for name in ("send_port", "receive_port"):
            port = getattr(self, name)
            if not isinstance(port, int) or not 0 < port < 65536:
                raise ValueError(f"{name} must be an integer in 1..65535, got {port!r}")
        if self.send_interval <= 0:
            raise ValueError(f"send_interval must be positive, got {self.send_interval}")
        if self.max_queue_size is not None and self.max_queue_size < 1:
            raise ValueError(f"max_queue_size must be at least 1, got {self.max_queue_size}")

    @classmethod
    def from_dict(cls, data: dict) -> "NetworkConfig":
        """
        Build a config from a dict, rejecting unknown keys.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown network config keys: {unknown}. Supported: {sorted(known)}")
        return cls(**data)

    @classmethod
    def load(cls, path) -> "NetworkConfig":
        """Load a config from a JSON file."""
        with open(pathlib.Path(path), "r") as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path):
        with open(pathlib.Path(path), "w") as f:
            json.dump(self.to_dict(), f, indent=2)
