"""
OscReader - Minimal OSC (Open Sound Control) message parser.

This module parses single binary OSC messages received over UDP. It reads
one address, an optional type tag string and the first argument only.
Bundles and array arguments are not supported.

Parsing is deliberately lenient about the argument: a missing type tag,
an unknown tag character or a truncated payload all produce the default
FLOAT 0.0 value, and the resulting message is flagged as degraded. Only a
broken address is a hard failure.
"""

import struct

from ..errors import DecodeError
from .osc_types import (
    DEFAULT_VALUE,
    DecodeResult,
    InboundMessage,
    OscValue,
    ValueKind,
)


class OscReader:
    """
    Tiny OSC reader for parsing a single OSC message packet.

    Example usage:
        data = sock.recvfrom(65535)[0]
        reader = OscReader(data)
        message = reader.read_message()
        # message.address = "/test"
        # message.value = OscValue(ValueKind.INT, 42)
    """

    def __init__(self, data: bytes):
        """
        Initialize the OSC reader with raw packet data.

        Args:
            data: Raw bytes from UDP packet containing OSC message
        """
        self.data = bytes(data)
        self.i = 0
        self.n = len(self.data)

    def _read_padded_string(self):
        """Read a null-terminated, 4-byte padded string."""
        start = self.i
        try:
            end = self.data.index(b'\x00', start)
        except ValueError:
            raise DecodeError("OSC string not null-terminated")
        s = self.data[start:end].decode('utf-8', errors='replace')
        # Skip the terminator, then pad to the next multiple of 4. Senders
        # may omit trailing padding on the last string, so clamp to the end.
        self.i = min((end + 4) & ~0x03, self.n)
        return s

    def _read_int32(self):
        """Read a big-endian 32-bit integer."""
        if self.i + 4 > self.n:
            raise DecodeError("OSC int32 truncated")
        val = struct.unpack(">i", self.data[self.i:self.i+4])[0]
        self.i += 4
        return val

    def _read_float32(self):
        """Read a big-endian 32-bit float."""
        if self.i + 4 > self.n:
            raise DecodeError("OSC float32 truncated")
        val = struct.unpack(">f", self.data[self.i:self.i+4])[0]
        self.i += 4
        return val

    def _read_value(self, tag):
        if tag == 'f':
            return OscValue(ValueKind.FLOAT, self._read_float32())
        if tag == 'i':
            return OscValue(ValueKind.INT, self._read_int32())
        if tag == 's':
            return OscValue(ValueKind.STRING, self._read_padded_string())
        if tag == 'T':
            return OscValue.trigger(True)
        if tag == 'F':
            return OscValue.trigger(False)
        return None

    def read_message(self) -> InboundMessage:
        """
        Parse the OSC message and return its address and first argument.

        Returns:
            InboundMessage with the address, the decoded value and a
            degraded flag set when the default value was substituted.

        Raises:
            DecodeError: If the address is missing or not null-terminated
        """
        address = self._read_padded_string()
        if not address:
            raise DecodeError("Empty OSC address")

        if self.i >= self.n or self.data[self.i:self.i+1] != b',':
            return InboundMessage(address, DEFAULT_VALUE, degraded=True)

        try:
            typetags = self._read_padded_string()
        except DecodeError:
            return InboundMessage(address, DEFAULT_VALUE, degraded=True)
        if len(typetags) < 2:
            return InboundMessage(address, DEFAULT_VALUE, degraded=True)

        try:
            value = self._read_value(typetags[1])
        except DecodeError:
            value = None
        if value is None:
            return InboundMessage(address, DEFAULT_VALUE, degraded=True)
        return InboundMessage(address, value)


def decode_packet(data) -> DecodeResult:
    """
    Decode one datagram without raising.

    Args:
        data: Raw datagram bytes

    Returns:
        DecodeResult holding either the message or the DecodeError
    """
    try:
        return DecodeResult(OscReader(data).read_message(), None)
    except DecodeError as e:
        return DecodeResult(None, e)
    except (TypeError, ValueError) as e:
        return DecodeResult(None, DecodeError(f"Unreadable OSC packet: {e}"))
