"""
OscListenerGroup - Register a batch of listeners and release them together.

Useful for objects that come and go at runtime (spawned props, scene
clones): they describe their mappings once, register on activation and
unregister everything on teardown without tracking each handler.
"""

import logging

from .registry import MappingEntry

logger = logging.getLogger(__name__)


class OscListenerGroup:
    """
    Owns the dynamic registrations for a list of mappings.

    Example usage:
        group = OscListenerGroup(registry, [
            MappingEntry("/door/open", ValueKind.TRIGGER, door.open),
            MappingEntry("/door/angle", ValueKind.FLOAT, door.set_angle),
        ])
        with group:
            ...  # listeners active
    """

    def __init__(self, registry, mappings=()):
        self.registry = registry
        self.mappings = [MappingEntry(*m) for m in mappings]
        self.handles = []

    @property
    def is_registered(self) -> bool:
        return bool(self.handles)

    def register_all(self):
        """Register every mapping. Calling twice does not double-register."""
        if self.handles:
            return
        for m in self.mappings:
            self.handles.append(self.registry.register_listener(m.address, m.kind, m.callback))
        logger.info(f"[OscListenerGroup] Registered {len(self.handles)} mappings")

    def unregister_all(self):
        """Remove every registration this group made."""
        for handle in self.handles:
            self.registry.unregister(handle)
        self.handles.clear()

    def __enter__(self):
        self.register_all()
        return self

    def __exit__(self, *exc):
        self.unregister_all()
