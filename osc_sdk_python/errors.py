"""
Exception types raised by osc_sdk_python.

Decode and handler failures are per-message and never stop the receive
loop or the dispatcher. Only BindError is meant to be fatal, and only at
startup.
"""


class OscError(Exception):
    """Base class for all OSC SDK errors."""


class DecodeError(OscError, ValueError):
    """A datagram could not be parsed as an OSC message."""


class EncodeError(OscError, ValueError):
    """An address or value cannot be represented on the wire."""


class BindError(OscError, OSError):
    """The receive socket could not be bound to its port."""


class SendError(OscError, OSError):
    """A datagram could not be transmitted."""
