"""
Dispatch - Route received OSC messages to typed handlers.

Example usage:
    from osc_sdk_python.dispatch import OscRegistry, MappingEntry
    from osc_sdk_python.codec import ValueKind

    registry = OscRegistry(port=9000)
    registry.register_int_listener("/cue/set", lambda cue: print("cue", cue))
    registry.start()

    while running:
        registry.update()

    registry.stop()
"""

from .listener_group import OscListenerGroup
from .registry import (
    ListenerHandle,
    MappingEntry,
    OscRegistry,
    RegistryState,
    convert_value,
)

__all__ = [
    "OscRegistry",
    "OscListenerGroup",
    "MappingEntry",
    "ListenerHandle",
    "RegistryState",
    "convert_value",
]
