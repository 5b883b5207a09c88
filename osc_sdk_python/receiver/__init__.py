"""
Receiver - UDP receive loop for OSC messages.

Example usage:
    from osc_sdk_python.receiver import OscReceiver

    receiver = OscReceiver(port=9000)
    receiver.start()

    while running:
        message = receiver.poll()
        if message:
            print(f"{message.address}: {message.value.value}")

    receiver.stop()
"""

from .osc_receiver import OscReceiver

__all__ = ["OscReceiver"]
