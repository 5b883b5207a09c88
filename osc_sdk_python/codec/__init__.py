"""
Codec - OSC packet decoding and encoding.

Example usage:
    from osc_sdk_python.codec import encode_message, decode_packet

    data = encode_message("/test", 42)
    result = decode_packet(data)
    if result.ok:
        print(result.message.address, result.message.value.value)

Supported argument tags: f (float32), i (int32), s (string), T/F (trigger).
"""

from .osc_reader import OscReader, decode_packet
from .osc_types import (
    DEFAULT_VALUE,
    DecodeResult,
    InboundMessage,
    OscValue,
    ValueKind,
)
from .osc_writer import OscWriter, coerce_value, encode_message, pad_string

__all__ = [
    "OscReader",
    "OscWriter",
    "OscValue",
    "ValueKind",
    "InboundMessage",
    "DecodeResult",
    "DEFAULT_VALUE",
    "decode_packet",
    "encode_message",
    "coerce_value",
    "pad_string",
]
