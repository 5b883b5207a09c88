"""
Value and message types shared by the codec, receiver and dispatcher.
"""

import enum
from typing import NamedTuple, Optional, Union

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class ValueKind(enum.Enum):
    """The four payload kinds a message can carry."""

    FLOAT = "float"
    INT = "int"
    STRING = "string"
    TRIGGER = "trigger"


class OscValue(NamedTuple):
    """
    A single typed OSC argument.

    TRIGGER values keep the boolean-as-float payload of the wire tag
    (1.0 for 'T', 0.0 for 'F') so hosts that only care about the flag can
    still read it.
    """

    kind: ValueKind
    value: Union[float, int, str]

    @classmethod
    def trigger(cls, state: bool = True) -> "OscValue":
        return cls(ValueKind.TRIGGER, 1.0 if state else 0.0)


DEFAULT_VALUE = OscValue(ValueKind.FLOAT, 0.0)


class InboundMessage(NamedTuple):
    """
    One decoded OSC message.

    Args:
        address: OSC address, e.g. "/cue/next"
        value: The decoded argument
        degraded: True when the parser fell back to FLOAT 0.0 because the
            type tag was missing, unknown or its payload truncated
    """

    address: str
    value: OscValue
    degraded: bool = False

    @property
    def kind(self) -> ValueKind:
        return self.value.kind


class DecodeResult(NamedTuple):
    """Outcome of decode_packet: exactly one of message/error is set."""

    message: Optional[InboundMessage]
    error: Optional[Exception]

    @property
    def ok(self) -> bool:
        return self.message is not None

