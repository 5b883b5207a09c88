"""
OSC SDK Python - Open Sound Control messaging for interactive installations.

This package receives OSC messages over UDP on a background thread, queues
them, and dispatches them once per frame to handlers registered by address
and value type. It also sends single OSC messages, optionally at a fixed
rate.

Main classes:
    - OscRegistry: Receives and dispatches messages to typed handlers
    - OscReceiver: Background UDP receive loop with a FIFO queue
    - OscSender: Sends single messages, retargetable at runtime
    - PeriodicSender: Sends a provider's value at a fixed interval
    - NetworkConfig: Ports, target host and send interval

Example usage:
    from osc_sdk_python import OscRegistry, OscSender, ValueKind

    registry = OscRegistry(port=9000)
    registry.register_int_listener("/cue/set", lambda cue: print("cue", cue))
    registry.register_trigger_listener("/cue/next", lambda: print("next"))
    registry.start()

    sender = OscSender("127.0.0.1", 9000)
    sender.send("/cue/set", 3)

    # Main loop
    while running:
        registry.update()

    # Cleanup
    sender.close()
    registry.stop()
"""

from .codec import (
    DecodeResult,
    InboundMessage,
    OscReader,
    OscValue,
    OscWriter,
    ValueKind,
    decode_packet,
    encode_message,
)
from .dispatch import ListenerHandle, MappingEntry, OscListenerGroup, OscRegistry, RegistryState
from .errors import BindError, DecodeError, EncodeError, OscError, SendError
from .receiver import OscReceiver
from .sender import (
    OscSender,
    PeriodicSender,
    announce_device,
    parse_address_value,
    send_address_value,
)
from .utils import NetworkConfig

__version__ = "0.1.0"
__all__ = [
    "OscRegistry",
    "OscListenerGroup",
    "MappingEntry",
    "ListenerHandle",
    "RegistryState",
    "OscReceiver",
    "OscSender",
    "PeriodicSender",
    "announce_device",
    "parse_address_value",
    "send_address_value",
    "OscReader",
    "OscWriter",
    "OscValue",
    "ValueKind",
    "InboundMessage",
    "DecodeResult",
    "decode_packet",
    "encode_message",
    "NetworkConfig",
    "OscError",
    "DecodeError",
    "EncodeError",
    "BindError",
    "SendError",
]
