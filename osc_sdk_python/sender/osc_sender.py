"""
OscSender - Synchronous OSC-over-UDP client with runtime retargeting.

Each send() encodes one message and transmits one datagram. Failures are
logged and reported through the return value; nothing is retried, callers
re-send if they care.
"""

import logging
import socket
import threading

from ..codec import encode_message
from ..errors import EncodeError, SendError

logger = logging.getLogger(__name__)


def _open_socket(host: str, port: int, broadcast: bool):
    """
    Resolve the destination and open a UDP socket for it.

    Raises:
        SendError: If the host cannot be resolved or the socket not created
    """
    try:
        ip = socket.gethostbyname(host)
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as e:
        raise SendError(e.errno, f"Cannot open OSC destination {host}:{port}: {e}") from e
    if broadcast:
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        except OSError as e:
            sock.close()
            raise SendError(e.errno, f"Cannot enable broadcast: {e}") from e
    return sock, (ip, int(port))


class OscSender:
    """
    Sends single OSC messages to one destination.

    Example usage:
        sender = OscSender("127.0.0.1", 17200)
        sender.send("/cue/next")          # address only
        sender.send("/cue/set", 5)        # ,i
        sender.send("/volume", 0.8)       # ,f
        sender.send("/title", "intro")    # ,s
        sender.retarget("192.168.0.20")   # later sends go there
        sender.close()
    """

    def __init__(self, host: str = "127.0.0.1", port: int = 17200, broadcast: bool = False):
        """
        Initialize the sender.

        A destination that cannot be opened is logged and leaves the sender
        inactive: send() then returns False until a retarget succeeds.

        Args:
            host: Destination host name or IPv4 address
            port: Destination UDP port
            broadcast: Enable SO_BROADCAST (for 255.255.255.255 targets)
        """
        self.host = host
        self.port = int(port)
        self.broadcast = broadcast
        self.sock = None
        self.destination = None
        self.lock = threading.Lock()
        try:
            self.sock, self.destination = _open_socket(host, self.port, broadcast)
        except SendError as e:
            logger.warning(f"[OscSender] {e}; sends will be skipped")

    def is_active(self) -> bool:
        """Return True if the sender has a usable destination."""
        return self.sock is not None

    def send(self, address: str, value=None) -> bool:
        """
        Encode and transmit one message.

        Args:
            address: OSC address
            value: Optional bool, int, float, str or OscValue

        Returns:
            True if the datagram was handed to the OS
        """
        try:
            data = encode_message(address, value)
        except EncodeError as e:
            logger.error(f"[OscSender] Cannot encode {address!r}: {e}")
            return False

        with self.lock:
            if self.sock is None:
                logger.warning(f"[OscSender] No destination; dropped {address}")
                return False
            try:
                self.sock.sendto(data, self.destination)
            except OSError as e:
                logger.error(f"[OscSender] Send to {self.host}:{self.port} failed: {e}")
                return False
        logger.debug(f"[OscSender] {address} {value!r} -> {self.host}:{self.port}")
        return True

    def retarget(self, host: str, port=None) -> bool:
        """
        Switch the destination.

        The new socket is opened before the swap; sends that hold the lock
        finish against the old destination, later ones use the new one. On
        failure the current destination is kept.

        Args:
            host: New destination host
            port: New destination port (default: keep the current one)

        Returns:
            True if the new destination is in use
        """
        port = self.port if port is None else int(port)
        try:
            sock, destination = _open_socket(host, port, self.broadcast)
        except SendError as e:
            logger.warning(f"[OscSender] Retarget failed: {e}")
            return False
        with self.lock:
            old = self.sock
            self.sock, self.destination = sock, destination
            self.host, self.port = host, port
        if old is not None:
            old.close()
        logger.info(f"[OscSender] Target set to {host}:{port}")
        return True

    def close(self):
        """Close the socket. Later sends are skipped."""
        with self.lock:
            sock, self.sock = self.sock, None
        if sock is not None:
            sock.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
