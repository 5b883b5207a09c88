#!/usr/bin/env python3
"""
Example: Receive and print OSC messages.

This script demonstrates how to use OscRegistry to receive OSC messages,
dispatch them to typed listeners once per tick, and print what arrives.

Usage:
    python receive_osc.py --port 9000
    python receive_osc.py --port 9000 --address /cue/set --tick_rate 90
"""

import argparse
import logging
import os
import sys

from loop_rate_limiters import RateLimiter

# Allow running without installing the package (add project root to path)
_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _root not in sys.path:
    sys.path.insert(0, _root)

from osc_sdk_python import OscRegistry, OscReceiver, ValueKind


class PrintingReceiver(OscReceiver):
    """Receiver that also prints a line for every packet it cannot decode."""

    def feed(self, data):
        ok = super().feed(data)
        if not ok:
            print(f"[Main] Undecodable packet: {data[:32].hex()}")
        return ok


def main():
    parser = argparse.ArgumentParser(description="Receive and print OSC messages")

    parser.add_argument(
        "--port",
        type=int,
        default=9000,
        help="UDP port to listen for OSC data (default: 9000)",
    )

    parser.add_argument(
        "--address",
        action="append",
        default=[],
        help="Address to listen on with every handler kind (repeatable)",
    )

    parser.add_argument(
        "--tick_rate",
        type=float,
        default=60.0,
        help="Dispatch ticks per second (default: 60)",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    print(f"[Main] Initializing OscRegistry on port {args.port}...")
    registry = OscRegistry(receiver=PrintingReceiver(port=args.port))

    for address in args.address:
        registry.register_listener(address, ValueKind.FLOAT, lambda v, a=address: print(f"  {a} float={v}"))
        registry.register_listener(address, ValueKind.INT, lambda v, a=address: print(f"  {a} int={v}"))
        registry.register_listener(address, ValueKind.STRING, lambda v, a=address: print(f"  {a} string={v!r}"))
        registry.register_listener(address, ValueKind.TRIGGER, lambda a=address: print(f"  {a} trigger"))

    registry.start()
    rate_limiter = RateLimiter(frequency=args.tick_rate, warn=False)

    print(f"[Main] Waiting for OSC data on port {registry.port}...")
    print("[Main] Press Ctrl+C to stop")

    try:
        while True:
            receiver = registry.receiver
            for message in receiver.drain():
                tag = " (default)" if message.degraded else ""
                print(f"[OSC] {message.address} {message.kind.name} {message.value.value!r}{tag}")
                registry.dispatch(message)
            rate_limiter.sleep()

    except KeyboardInterrupt:
        print("\n[Main] Stopping...")
    finally:
        registry.stop()
        print("[Main] Done")


if __name__ == "__main__":
    main()
