#!/usr/bin/env python3
"""
Example: Send OSC messages from the command line.

Each positional argument is an "address:value" string; the value type is
detected automatically (int, then float, then string). A bare address is
sent without a value.

Usage:
    python send_osc.py /cue/set:5 /volume:0.8 /title:intro /cue/next
    python send_osc.py --host 192.168.0.20 --port 17200 --prefix /VRnotrame /cue/set:1
    python send_osc.py --repeat /heartbeat:1 --interval 0.5
"""

import argparse
import os
import sys
import time

# Allow running without installing the package (add project root to path)
_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _root not in sys.path:
    sys.path.insert(0, _root)

from osc_sdk_python import (
    NetworkConfig,
    OscSender,
    PeriodicSender,
    parse_address_value,
    send_address_value,
)


def main():
    parser = argparse.ArgumentParser(description="Send OSC messages")
    parser.add_argument("messages", nargs="+", help='"address:value" strings')
    parser.add_argument("--config", default=None, help="NetworkConfig JSON file")
    parser.add_argument("--host", default=None, help="Destination host (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Destination port (overrides config)")
    parser.add_argument("--prefix", default=None, help="Address prefix (overrides config)")
    parser.add_argument(
        "--repeat",
        action="store_true",
        default=False,
        help="Keep sending the first message at the configured interval",
    )
    parser.add_argument("--interval", type=float, default=None, help="Seconds between repeats")

    args = parser.parse_args()

    config = NetworkConfig.load(args.config) if args.config else NetworkConfig()
    host = args.host or config.target_ip
    port = args.port or config.send_port
    prefix = config.address_prefix if args.prefix is None else args.prefix

    sender = OscSender(host, port)
    if not sender.is_active():
        print(f"[Main] Cannot open {host}:{port}")
        return 1

    try:
        if args.repeat:
            address, value = parse_address_value(args.messages[0], prefix)
            stream = PeriodicSender(
                sender, address, lambda: value, interval=args.interval or config.send_interval
            )
            stream.start()
            print(f"[Main] Repeating {address} {value!r} to {host}:{port}, Ctrl+C to stop")
            try:
                while True:
                    time.sleep(1.0)
                    print(f"[Main] Sent {stream.sent_count} messages")
            except KeyboardInterrupt:
                pass
            finally:
                stream.stop()
        else:
            for text in args.messages:
                ok = send_address_value(sender, text, prefix)
                print(f"[Main] {'Sent' if ok else 'Failed'}: {text}")
    finally:
        sender.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
