"""
OscWriter - Minimal OSC message serializer.

Builds a single OSC message with zero or one argument:

    address string, null-padded to a multiple of 4 bytes
    ",<tag>" type tag string, null-padded to a multiple of 4 bytes
    big-endian payload (4 bytes for f/i, padded string for s, none for T/F)

Without a value only the address is emitted.
"""

import struct

from ..errors import EncodeError
from .osc_types import INT32_MAX, INT32_MIN, OscValue, ValueKind


def pad_string(s: str) -> bytes:
    """
    Encode a string as OSC: UTF-8, null-terminated, padded to 4 bytes.

    Raises:
        EncodeError: If the string contains a NUL character or cannot be
            encoded as UTF-8 (e.g. a lone surrogate)
    """
    try:
        raw = s.encode('utf-8')
    except UnicodeEncodeError as e:
        raise EncodeError(f"OSC string is not valid UTF-8: {e}") from e
    if b'\x00' in raw:
        raise EncodeError("OSC strings cannot contain NUL characters")
    return raw + b'\x00' * (4 - len(raw) % 4)


def coerce_value(value) -> OscValue:
    """
    Map a Python value onto an OscValue.

    bool becomes a TRIGGER ('T'/'F'), int an INT, float a FLOAT and str a
    STRING. OscValue instances pass through unchanged.
    """
    if isinstance(value, OscValue):
        return value
    if isinstance(value, bool):
        return OscValue.trigger(value)
    if isinstance(value, int):
        return OscValue(ValueKind.INT, value)
    if isinstance(value, float):
        return OscValue(ValueKind.FLOAT, value)
    if isinstance(value, str):
        return OscValue(ValueKind.STRING, value)
    raise EncodeError(f"Unsupported OSC value type: {type(value).__name__}")


class OscWriter:
    """
    Serializer for a single OSC message.

    Example usage:
        data = OscWriter("/cue/set").write(5)
        sock.sendto(data, ("127.0.0.1", 9000))
    """

    def __init__(self, address: str):
        if not isinstance(address, str) or not address:
            raise EncodeError("OSC address must be a non-empty string")
        self.address = address

    def _write_tagged(self, value: OscValue) -> bytes:
        kind = value.kind
        if kind == ValueKind.FLOAT:
            try:
                return pad_string(",f") + struct.pack(">f", float(value.value))
            except OverflowError:
                raise EncodeError(f"Value out of float32 range: {value.value}")
            except (TypeError, ValueError) as e:
                raise EncodeError(f"Not a float payload: {value.value!r}") from e
        if kind == ValueKind.INT:
            v = value.value
            if isinstance(v, float) and v.is_integer():
                v = int(v)
            if isinstance(v, bool) or not isinstance(v, int):
                raise EncodeError(f"Not an integral int payload: {value.value!r}")
            if not INT32_MIN <= v <= INT32_MAX:
                raise EncodeError(f"Value out of int32 range: {v}")
            return pad_string(",i") + struct.pack(">i", v)
        if kind == ValueKind.STRING:
            return pad_string(",s") + pad_string(str(value.value))
        # TRIGGER: tag only, no payload bytes
        return pad_string(",T" if value.value else ",F")

    def write(self, value=None) -> bytes:
        """
        Build the datagram.

        Args:
            value: None, bool, int, float, str or OscValue

        Returns:
            The encoded message bytes

        Raises:
            EncodeError: If the value cannot be represented
        """
        head = pad_string(self.address)
        if value is None:
            return head
        return head + self._write_tagged(coerce_value(value))


def encode_message(address: str, value=None) -> bytes:
    """Encode an address plus zero or one value into an OSC datagram."""
    return OscWriter(address).write(value)
