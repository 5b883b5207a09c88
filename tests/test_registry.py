"""
Dispatch registry tests.

Packets are injected with receiver.feed() so no socket is needed; the
lifecycle tests bind a real loopback port.
"""

import threading

import pytest

from osc_sdk_python.codec import ValueKind, encode_message
from osc_sdk_python.dispatch import (
    MappingEntry,
    OscListenerGroup,
    OscRegistry,
    RegistryState,
)
from osc_sdk_python.errors import BindError
from osc_sdk_python.sender import OscSender

from .conftest import wait_for

TRIGGER_PACKET = b"/cue/next\x00\x00\x00,T\x00\x00"


def deliver(registry, address, value=None):
    registry.receiver.feed(encode_message(address, value))
    return registry.update()


class TestDynamicListeners:

    def test_int_scenario_invokes_handler_once(self, registry):
        calls = []
        registry.register_int_listener("/test", calls.append)
        registry.receiver.feed(b"/test\x00\x00\x00,i\x00\x00\x00\x00\x00\x2a")
        assert registry.update() == 1
        assert calls == [42]

    def test_registration_order(self, registry):
        calls = []
        for name in ("L1", "L2", "L3"):
            registry.register_float_listener("/x", lambda v, n=name: calls.append(n))
        deliver(registry, "/x", 1.0)
        assert calls == ["L1", "L2", "L3"]

    def test_unregister_by_handler(self, registry):
        calls = []
        l1 = lambda v: calls.append("L1")
        l2 = lambda v: calls.append("L2")
        l3 = lambda v: calls.append("L3")
        for handler in (l1, l2, l3):
            registry.register_float_listener("/x", handler)
        assert registry.unregister_float_listener("/x", l2)
        deliver(registry, "/x", 1.0)
        assert calls == ["L1", "L3"]

    def test_unregister_by_handle(self, registry):
        calls = []
        registry.register_trigger_listener("/x", lambda: calls.append("L1"))
        handle = registry.register_trigger_listener("/x", lambda: calls.append("L2"))
        registry.register_trigger_listener("/x", lambda: calls.append("L3"))
        assert registry.unregister(handle)
        assert not registry.unregister(handle)
        deliver(registry, "/x")
        assert calls == ["L1", "L3"]

    def test_duplicate_registration_fires_twice(self, registry):
        calls = []
        registry.register_int_listener("/x", calls.append)
        registry.register_int_listener("/x", calls.append)
        deliver(registry, "/x", 7)
        assert calls == [7, 7]
        assert registry.unregister_int_listener("/x", calls.append)
        deliver(registry, "/x", 8)
        assert calls == [7, 7, 8]

    def test_unregister_missing_is_noop(self, registry):
        assert not registry.unregister_listener("/none", ValueKind.INT, print)
        registry.register_int_listener("/x", print)
        assert not registry.unregister_listener("/x", ValueKind.FLOAT, print)
        assert registry.listener_count("/x") == 1

    def test_address_match_is_exact(self, registry):
        calls = []
        registry.register_int_listener("/Cue", calls.append)
        registry.register_int_listener("/cue/", calls.append)
        deliver(registry, "/cue", 1)
        assert calls == []

    def test_listener_count(self, registry):
        h = registry.register_int_listener("/a", print)
        registry.register_float_listener("/b", print)
        assert registry.listener_count() == 2
        registry.unregister(h)
        assert registry.listener_count("/a") == 0
        assert registry.listener_count() == 1


class TestDeliveryPolicy:

    def test_trigger_tag_skips_float_handlers(self, registry):
        floats, triggers = [], []
        registry.register_float_listener("/cue/next", floats.append)
        registry.register_trigger_listener("/cue/next", lambda: triggers.append(True))
        registry.receiver.feed(TRIGGER_PACKET)
        registry.update()
        assert triggers == [True]
        assert floats == []

    def test_trigger_tag_skips_float_mapping(self):
        floats, triggers = [], []
        registry = OscRegistry(port=0, mappings=[
            MappingEntry("/cue/next", ValueKind.FLOAT, floats.append),
            MappingEntry("/cue/next", ValueKind.TRIGGER, lambda: triggers.append(True)),
        ])
        registry.receiver.feed(TRIGGER_PACKET)
        registry.update()
        assert triggers == [True]
        assert floats == []

    def test_trigger_handlers_fire_for_any_kind(self, registry):
        triggers = []
        registry.register_trigger_listener("/go", lambda: triggers.append(1))
        deliver(registry, "/go")
        deliver(registry, "/go", 2)
        deliver(registry, "/go", 0.5)
        deliver(registry, "/go", "now")
        assert triggers == [1, 1, 1, 1]

    def test_int_widens_to_float_handler(self, registry):
        floats = []
        registry.register_float_listener("/v", floats.append)
        deliver(registry, "/v", 3)
        assert floats == [3.0]
        assert isinstance(floats[0], float)

    def test_float_not_delivered_to_int_handler(self, registry):
        ints = []
        registry.register_int_listener("/v", ints.append)
        deliver(registry, "/v", 3.5)
        assert ints == []

    def test_string_only_reaches_string_handlers(self, registry):
        got = {"float": [], "int": [], "string": []}
        registry.register_float_listener("/s", got["float"].append)
        registry.register_int_listener("/s", got["int"].append)
        registry.register_string_listener("/s", got["string"].append)
        deliver(registry, "/s", "12")
        assert got == {"float": [], "int": [], "string": ["12"]}

    def test_address_only_message_is_float_zero(self, registry):
        floats = []
        registry.register_float_listener("/ping", floats.append)
        deliver(registry, "/ping")
        assert floats == [0.0]


class TestStaticMappings:

    def test_all_matching_entries_fire_in_order(self):
        calls = []
        registry = OscRegistry(port=0, mappings=[
            MappingEntry("/x", ValueKind.INT, lambda v: calls.append(("a", v))),
            MappingEntry("/y", ValueKind.INT, lambda v: calls.append(("other", v))),
            ("/x", ValueKind.INT, lambda v: calls.append(("b", v))),
            MappingEntry("/x", ValueKind.STRING, lambda v: calls.append(("string", v))),
        ])
        deliver(registry, "/x", 5)
        assert calls == [("a", 5), ("b", 5)]

    def test_static_entries_before_dynamic_listeners(self):
        calls = []
        registry = OscRegistry(port=0, mappings=[
            MappingEntry("/x", ValueKind.FLOAT, lambda v: calls.append("static")),
        ])
        registry.register_float_listener("/x", lambda v: calls.append("dynamic"))
        registry.add_mapping("/x", ValueKind.TRIGGER, lambda: calls.append("static2"))
        deliver(registry, "/x", 1.0)
        assert calls == ["static", "static2", "dynamic"]


class TestFailureIsolation:

    def test_raising_handler_does_not_stop_others(self, registry, caplog):
        calls = []

        def bad(value):
            raise RuntimeError("boom")

        registry.register_int_listener("/x", calls.append)
        registry.register_int_listener("/x", bad)
        registry.register_int_listener("/x", lambda v: calls.append(v * 10))
        registry.receiver.feed(encode_message("/x", 1))
        registry.receiver.feed(encode_message("/x", 2))
        assert registry.update() == 2
        assert calls == [1, 10, 2, 20]
        assert registry.handler_failures == 2
        assert "boom" in caplog.text

    def test_handler_may_unregister_itself(self, registry):
        calls = []

        def once(value):
            calls.append(value)
            registry.unregister_int_listener("/x", once)

        registry.register_int_listener("/x", once)
        registry.receiver.feed(encode_message("/x", 1))
        registry.receiver.feed(encode_message("/x", 2))
        registry.update()
        assert calls == [1]


class TestDrain:

    def test_update_on_empty_queue(self, registry):
        assert registry.update() == 0

    def test_drain_under_load_preserves_order(self, registry):
        n = 3000
        received = []
        registry.register_int_listener("/load", received.append)

        def produce():
            for i in range(n):
                registry.receiver.feed(encode_message("/load", i))

        producer = threading.Thread(target=produce)
        producer.start()
        while producer.is_alive():
            registry.update()
        producer.join()
        registry.update()
        assert received == list(range(n))


class TestLifecycle:

    def test_state_machine(self):
        registry = OscRegistry(port=0, host="127.0.0.1")
        assert registry.state == RegistryState.UNINITIALIZED
        registry.start()
        assert registry.state == RegistryState.RUNNING
        registry.stop()
        assert registry.state == RegistryState.STOPPED
        registry.stop()
        with pytest.raises(RuntimeError):
            registry.start()

    def test_bind_failure_leaves_uninitialized(self):
        first = OscRegistry(port=0, host="127.0.0.1")
        first.start()
        try:
            second = OscRegistry(port=first.port, host="127.0.0.1")
            with pytest.raises(BindError):
                second.start()
            assert second.state == RegistryState.UNINITIALIZED
        finally:
            first.stop()

    def test_stop_discards_queued_messages(self):
        calls = []
        registry = OscRegistry(port=0, host="127.0.0.1")
        registry.register_int_listener("/x", calls.append)
        registry.start()
        registry.receiver.feed(encode_message("/x", 1))
        registry.stop()
        assert registry.receiver.pending() == 0
        assert registry.update() == 0
        assert calls == []

    def test_stopped_registry_ignores_late_packets(self):
        calls = []
        registry = OscRegistry(port=0, host="127.0.0.1")
        registry.register_int_listener("/x", calls.append)
        registry.stop()
        registry.receiver.feed(encode_message("/x", 2))
        assert registry.update() == 0
        assert calls == []

    def test_end_to_end_with_sender(self):
        calls = []
        with OscRegistry(port=0, host="127.0.0.1") as registry:
            registry.register_string_listener("/title", calls.append)
            with OscSender("127.0.0.1", registry.port) as sender:
                assert sender.send("/title", "intro")
            assert wait_for(lambda: registry.update() or calls)
        assert calls == ["intro"]
        assert registry.state == RegistryState.STOPPED


class TestListenerGroup:

    def test_register_and_release(self, registry):
        calls = []
        group = OscListenerGroup(registry, [
            MappingEntry("/door/open", ValueKind.TRIGGER, lambda: calls.append("open")),
            ("/door/angle", ValueKind.FLOAT, calls.append),
        ])
        with group:
            assert registry.listener_count() == 2
            group.register_all()
            assert registry.listener_count() == 2
            deliver(registry, "/door/open")
            deliver(registry, "/door/angle", 0.5)
        assert not group.is_registered
        assert registry.listener_count() == 0
        deliver(registry, "/door/open")
        assert calls == ["open", 0.5]
