"""
Shared pytest fixtures for the OSC SDK test suite.
"""

import socket
import time

import pytest

from osc_sdk_python.dispatch import OscRegistry
from osc_sdk_python.receiver import OscReceiver


def wait_for(predicate, timeout=2.0, interval=0.005):
    """Poll predicate until it returns truthy or timeout elapses."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def udp_sink():
    """A bound loopback UDP socket to receive what senders emit."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


@pytest.fixture
def receiver():
    """A started receiver on a free loopback port."""
    rx = OscReceiver(port=0, host="127.0.0.1")
    rx.start()
    yield rx
    rx.stop()


@pytest.fixture
def registry():
    """A registry that is never bound; tests inject packets with feed()."""
    return OscRegistry(port=0, host="127.0.0.1")
