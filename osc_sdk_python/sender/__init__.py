"""
Sender - OSC-over-UDP transmission.

Example usage:
    from osc_sdk_python.sender import OscSender, send_address_value

    sender = OscSender("127.0.0.1", 17200)
    sender.send("/cue/set", 5)
    send_address_value(sender, "/cue/set:6")
    sender.close()
"""

from .address_value import parse_address_value, parse_value, send_address_value
from .osc_sender import OscSender
from .periodic_sender import PeriodicSender, announce_device, local_ipv4

__all__ = [
    "OscSender",
    "PeriodicSender",
    "announce_device",
    "local_ipv4",
    "parse_address_value",
    "parse_value",
    "send_address_value",
]
