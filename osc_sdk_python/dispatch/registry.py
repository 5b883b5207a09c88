"""
OscRegistry - Address-keyed dispatch of received OSC messages.

The registry owns an OscReceiver and routes every queued message to two
groups of handlers, in this order:

1. Static mapping entries, configured up front and scanned in declaration
   order. Every matching entry fires, not just the first.
2. Dynamic listeners, registered and unregistered at runtime and invoked
   in registration order.

Routing is by exact address match. Each handler declares the value kind it
expects and only receives values that fit it:

    FLOAT handlers    <- FLOAT values, INT values (widened to float)
    INT handlers      <- INT values
    STRING handlers   <- STRING values
    TRIGGER handlers  <- any message at the address, called with no argument

'T'/'F' messages decode to TRIGGER values, so they reach TRIGGER handlers
only. A handler that raises is logged and skipped; the rest of the tick
carries on.
"""

import enum
import itertools
import logging
import threading
from typing import Callable, Iterable, NamedTuple, Optional

from ..codec import InboundMessage, ValueKind
from ..receiver import OscReceiver

logger = logging.getLogger(__name__)


class RegistryState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    STOPPED = "stopped"


class MappingEntry(NamedTuple):
    """
    Static (address, kind, callback) binding.

    Args:
        address: OSC address to match exactly
        kind: ValueKind the callback expects
        callback: Called with the converted value, or with no argument for
            TRIGGER entries
    """

    address: str
    kind: ValueKind
    callback: Callable


class ListenerHandle:
    """Opaque token identifying one dynamic registration."""

    __slots__ = ("address", "kind", "_id")

    def __init__(self, address: str, kind: ValueKind, registration_id: int):
        self.address = address
        self.kind = kind
        self._id = registration_id

    def __repr__(self):
        return f"ListenerHandle({self.address!r}, {self.kind.name}, #{self._id})"


class _Listener(NamedTuple):
    handle: ListenerHandle
    handler: Callable


_NOT_DELIVERABLE = object()


def convert_value(value, kind: ValueKind):
    """
    Convert a message value for a handler of the given kind.

    Returns:
        The converted payload, None for TRIGGER handlers, or
        _NOT_DELIVERABLE when the handler must not see this value.
    """
    if kind == ValueKind.TRIGGER:
        return None
    if kind == ValueKind.FLOAT:
        if value.kind in (ValueKind.FLOAT, ValueKind.INT):
            return float(value.value)
        return _NOT_DELIVERABLE
    if kind == value.kind:
        return value.value
    return _NOT_DELIVERABLE


class OscRegistry:
    """
    Receives OSC messages and dispatches them to typed handlers.

    One registry is normally created by the application's composition root
    and passed to whatever needs to listen; nothing here is global.

    Example usage:
        registry = OscRegistry(port=9000, mappings=[
            MappingEntry("/cue/set", ValueKind.INT, cue_master.set_cue),
        ])
        handle = registry.register_trigger_listener("/cue/next", cue_master.next_cue)
        registry.start()

        while running:
            registry.update()   # once per frame

        registry.unregister(handle)
        registry.stop()
    """

    def __init__(
        self,
        port: int = 9000,
        mappings: Iterable[MappingEntry] = (),
        host: str = "0.0.0.0",
        max_queue_size: Optional[int] = None,
        receiver: Optional[OscReceiver] = None,
    ):
        """
        Initialize the registry.

        Args:
            port: UDP port to receive on
            mappings: Static mapping entries, in dispatch order
            host: Interface to bind
            max_queue_size: Optional bound on the inbound queue
            receiver: Use this receiver instead of building one
        """
        self.receiver = receiver or OscReceiver(
            port=port, host=host, max_queue_size=max_queue_size
        )
        self.mappings = [MappingEntry(*m) for m in mappings]
        self.handler_failures = 0
        self._state = RegistryState.UNINITIALIZED
        self._listeners = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    @property
    def state(self) -> RegistryState:
        return self._state

    @property
    def port(self) -> int:
        return self.receiver.port

    def start(self):
        """
        Bind the receive port and begin queueing messages.

        Raises:
            BindError: If the port cannot be bound
            RuntimeError: If the registry was already stopped
        """
        if self._state == RegistryState.STOPPED:
            raise RuntimeError("OscRegistry cannot be restarted after stop(); create a new one")
        if self._state == RegistryState.RUNNING:
            logger.warning("[OscRegistry] Already running")
            return
        self.receiver.start()
        self._state = RegistryState.RUNNING

    def stop(self):
        """Stop receiving. Queued messages that were not dispatched are discarded."""
        if self._state == RegistryState.STOPPED:
            return
        if self._state == RegistryState.RUNNING:
            self.receiver.stop()
        self._state = RegistryState.STOPPED
        self.receiver.reset()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc):
        self.stop()

    # ---- static mappings ----

    def add_mapping(self, address: str, kind: ValueKind, callback: Callable) -> MappingEntry:
        """Append a static mapping entry after the existing ones."""
        entry = MappingEntry(address, kind, callback)
        with self._lock:
            self.mappings.append(entry)
        return entry

    # ---- dynamic listeners ----

    def register_listener(self, address: str, kind: ValueKind, handler: Callable) -> ListenerHandle:
        """
        Register a handler for an address.

        Registering the same handler twice makes it fire twice.

        Returns:
            Handle that unregister() accepts
        """
        handle = ListenerHandle(address, kind, next(self._ids))
        with self._lock:
            self._listeners.setdefault(address, []).append(_Listener(handle, handler))
        logger.debug(f"[OscRegistry] {kind.name} listener registered: {address}")
        return handle

    def unregister_listener(self, address: str, kind: ValueKind, handler: Callable) -> bool:
        """
        Remove the first registration equal to (address, kind, handler).

        Returns:
            True if a registration was removed, False if none matched
        """
        with self._lock:
            listeners = self._listeners.get(address)
            if not listeners:
                return False
            for i, listener in enumerate(listeners):
                if listener.handle.kind == kind and listener.handler == handler:
                    del listeners[i]
                    if not listeners:
                        del self._listeners[address]
                    return True
        return False

    def unregister(self, handle: ListenerHandle) -> bool:
        """
        Remove the registration identified by handle.

        Returns:
            True if it was still registered
        """
        with self._lock:
            listeners = self._listeners.get(handle.address)
            if not listeners:
                return False
            for i, listener in enumerate(listeners):
                if listener.handle is handle:
                    del listeners[i]
                    if not listeners:
                        del self._listeners[handle.address]
                    return True
        return False

    def register_float_listener(self, address, handler):
        return self.register_listener(address, ValueKind.FLOAT, handler)

    def unregister_float_listener(self, address, handler):
        return self.unregister_listener(address, ValueKind.FLOAT, handler)

    def register_int_listener(self, address, handler):
        return self.register_listener(address, ValueKind.INT, handler)

    def unregister_int_listener(self, address, handler):
        return self.unregister_listener(address, ValueKind.INT, handler)

    def register_string_listener(self, address, handler):
        return self.register_listener(address, ValueKind.STRING, handler)

    def unregister_string_listener(self, address, handler):
        return self.unregister_listener(address, ValueKind.STRING, handler)

    def register_trigger_listener(self, address, handler):
        return self.register_listener(address, ValueKind.TRIGGER, handler)

    def unregister_trigger_listener(self, address, handler):
        return self.unregister_listener(address, ValueKind.TRIGGER, handler)

    def listener_count(self, address: Optional[str] = None) -> int:
        """Number of dynamic registrations, for one address or overall."""
        with self._lock:
            if address is not None:
                return len(self._listeners.get(address, ()))
            return sum(len(v) for v in self._listeners.values())

    # ---- dispatch ----

    def update(self) -> int:
        """
        Drain the inbound queue and dispatch every message, oldest first.

        Call once per host tick from the consuming thread. Never blocks.
        An unstarted registry still dispatches whatever was fed to its
        receiver directly; a stopped one dispatches nothing.

        Returns:
            Number of messages dispatched
        """
        if self._state == RegistryState.STOPPED:
            return 0
        count = 0
        while True:
            message = self.receiver.poll()
            if message is None:
                return count
            self.dispatch(message)
            count += 1

    def dispatch(self, message: InboundMessage):
        """Invoke every static entry, then every dynamic listener, matching message."""
        with self._lock:
            mappings = [m for m in self.mappings if m.address == message.address]
            listeners = list(self._listeners.get(message.address, ()))

        for entry in mappings:
            self._invoke(entry.callback, entry.kind, message)
        for listener in listeners:
            self._invoke(listener.handler, listener.handle.kind, message)

    def _invoke(self, handler, kind, message):
        payload = convert_value(message.value, kind)
        if payload is _NOT_DELIVERABLE:
            return
        try:
            if kind == ValueKind.TRIGGER:
                handler()
            else:
                handler(payload)
        except Exception:
            self.handler_failures += 1
            logger.warning(
                f"[OscRegistry] {kind.name} handler for {message.address} failed",
                exc_info=True,
            )
