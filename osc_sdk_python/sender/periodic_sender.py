"""
Periodic OSC sending and device announcement.

PeriodicSender streams a value (tracking data, meters, heartbeats) at a
fixed interval from a background thread. announce_device() broadcasts
this machine's address once so a controller can find it.
"""

import logging
import socket
import threading

from loop_rate_limiters import RateLimiter

from .osc_sender import OscSender

logger = logging.getLogger(__name__)

ANNOUNCE_ADDRESS = "/setAddress"
BROADCAST_HOST = "255.255.255.255"


class PeriodicSender:
    """
    Sends provider() to an address every `interval` seconds.

    Example usage:
        sender = OscSender(config.target_ip, config.send_port)
        stream = PeriodicSender(sender, "/VRnotrame/transform",
                                tracker.get_transform_string,
                                interval=config.send_interval)
        stream.start()
        ...
        stream.stop()
    """

    def __init__(self, sender, address: str, provider, interval: float = 0.033):
        """
        Args:
            sender: OscSender (or anything with send(address, value))
            address: OSC address to send to
            provider: Zero-argument callable returning the value to send;
                returning None skips that tick
            interval: Seconds between sends
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.sender = sender
        self.address = address
        self.provider = provider
        self.interval = interval
        self.sent_count = 0
        self.thread = None
        self._stop_event = threading.Event()

    @property
    def is_running(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    def tick(self) -> bool:
        """
        Run one send step.

        Returns:
            True if a message was sent
        """
        try:
            value = self.provider()
        except Exception:
            logger.warning(f"[PeriodicSender] Provider for {self.address} failed", exc_info=True)
            return False
        if value is None:
            return False
        if self.sender.send(self.address, value):
            self.sent_count += 1
            return True
        return False

    def start(self):
        """Start sending from a background thread."""
        if self.is_running:
            logger.warning("[PeriodicSender] Already running")
            return
        self._stop_event.clear()
        self.thread = threading.Thread(
            target=self._loop, name=f"PeriodicSender:{self.address}", daemon=True
        )
        self.thread.start()
        logger.info(f"[PeriodicSender] Sending {self.address} every {self.interval:.3f}s")

    def stop(self, join_timeout: float = 1.0):
        """Stop the background thread."""
        self._stop_event.set()
        thread, self.thread = self.thread, None
        if thread is not None:
            thread.join(join_timeout)
            if thread.is_alive():
                logger.warning("[PeriodicSender] Thread did not exit in time")

    def _loop(self):
        rate_limiter = RateLimiter(
            frequency=1.0 / self.interval, name=f"osc {self.address}", warn=False
        )
        while not self._stop_event.is_set():
            self.tick()
            rate_limiter.sleep()


def local_ipv4() -> str:
    """
    Best-effort IPv4 address of this machine.

    Returns:
        Dotted-quad string, or "unknown" if none can be found
    """
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError:
        return "unknown"
    for info in infos:
        ip = info[4][0]
        if not ip.startswith("127."):
            return ip
    return infos[0][4][0] if infos else "unknown"


def announce_device(port: int, prefix: str, host: str = BROADCAST_HOST, ip=None) -> bool:
    """
    Broadcast "/setAddress/<prefix>" carrying this device's IPv4 address.

    Args:
        port: Destination port (usually the config send_port)
        prefix: Device name segment, e.g. "VRnotrame"
        host: Destination, broadcast by default
        ip: Address to announce (default: local_ipv4())

    Returns:
        True if the datagram was sent
    """
    address = f"{ANNOUNCE_ADDRESS}/{prefix.strip('/')}"
    with OscSender(host, port, broadcast=True) as sender:
        return sender.send(address, ip or local_ipv4())
