"""
OscReceiver - Background UDP receive loop for OSC messages.

This module provides the OscReceiver class, which binds a UDP port, decodes
each datagram on a dedicated thread and queues the resulting messages for a
consumer that polls once per tick.
"""

import logging
import socket
import threading
import time
from collections import deque

from ..codec import decode_packet
from ..errors import BindError

logger = logging.getLogger(__name__)

RECV_BUFFER_SIZE = 65535
SOCKET_TIMEOUT_SEC = 0.5


class OscReceiver:
    """
    Receives OSC datagrams in a background thread and queues them in order.

    The data flow:
    1. UDP datagrams arrive on the bound port
    2. Each datagram is decoded into an InboundMessage
    3. Decoded messages are appended to a FIFO queue
    4. The consumer drains the queue without blocking

    Example usage:
        receiver = OscReceiver(port=9000)
        receiver.start()

        while running:
            for message in receiver.drain():
                print(message.address, message.value)

        receiver.stop()
    """

    def __init__(self, port: int = 9000, host: str = "0.0.0.0", max_queue_size=None):
        """
        Initialize the OscReceiver.

        Args:
            port: UDP port to listen on (default: 9000, 0 picks a free port)
            host: Interface to bind (default: all interfaces)
            max_queue_size: Optional bound; when full the oldest message is
                discarded. None keeps the queue unbounded.
        """
        self.port = port
        self.host = host
        self.max_queue_size = max_queue_size
        self.thread = None
        self.sock = None
        self.running = False
        self.lock = threading.Lock()
        self.messages = deque()
        self.dropped_packets = 0
        self.overflow_count = 0
        self.recv_count = 0
        self.last_rate_time = time.time()
        self.recv_rate_hz = 0.0

    @property
    def is_running(self) -> bool:
        return self.running

    def reset(self):
        """Reset all internal state and buffers."""
        with self.lock:
            self.messages.clear()
            self.dropped_packets = 0
            self.overflow_count = 0
            self.recv_count = 0
            self.recv_rate_hz = 0.0
            self.last_rate_time = time.time()

    def start(self):
        """
        Bind the socket and start the receive thread.

        Raises:
            BindError: If the port cannot be bound (in use, no permission)
        """
        if self.running:
            logger.warning("[OscReceiver] Already running")
            return

        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, 8 * 1024 * 1024)
        except OSError:
            pass
        try:
            sock.bind((self.host, self.port))
        except OSError as e:
            sock.close()
            logger.error(f"[OscReceiver] Failed to bind UDP port {self.port}: {e}")
            raise BindError(e.errno, f"Cannot bind UDP {self.host}:{self.port}: {e}") from e
        sock.settimeout(SOCKET_TIMEOUT_SEC)
        self.port = sock.getsockname()[1]

        self.reset()
        self.sock = sock
        self.running = True
        self.thread = threading.Thread(
            target=self._udp_server_loop, name=f"OscReceiver:{self.port}", daemon=True
        )
        self.thread.start()
        logger.info(f"[OscReceiver] Listening on UDP port {self.port}")

    def stop(self, join_timeout: float = 1.0):
        """
        Stop the receive thread and release the socket.

        Closing the socket unblocks recvfrom; the thread is then joined with
        a bounded timeout.

        Args:
            join_timeout: Seconds to wait for the thread to exit
        """
        self.running = False
        sock, self.sock = self.sock, None
        if sock is not None:
            try:
                sock.close()
            except OSError as e:
                logger.debug(f"[OscReceiver] Error closing socket: {e}")
        thread, self.thread = self.thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(join_timeout)
            if thread.is_alive():
                # Daemon thread; it cannot keep the process alive.
                logger.warning(
                    f"[OscReceiver] Receive thread did not exit within {join_timeout}s"
                )
        logger.info("[OscReceiver] Stopped")

    def poll(self):
        """
        Pop the oldest queued message.

        Returns:
            InboundMessage if one is queued, None otherwise.
        """
        with self.lock:
            if not self.messages:
                return None
            return self.messages.popleft()

    def drain(self):
        """
        Pop every queued message, oldest first.

        Returns:
            List of InboundMessage (possibly empty)
        """
        with self.lock:
            pending = list(self.messages)
            self.messages.clear()
        return pending

    def pending(self) -> int:
        """Number of messages waiting to be consumed."""
        with self.lock:
            return len(self.messages)

    def get_receive_rate(self):
        """
        Get the current packet receive rate.

        Returns:
            Receive rate in Hz (packets per second)
        """
        return self.recv_rate_hz

    def feed(self, data: bytes) -> bool:
        """
        Decode one datagram and queue it.

        Called by the receive thread for every datagram; hosts and tests can
        call it directly to inject raw packets.

        Returns:
            True if the datagram was decoded and queued
        """
        result = decode_packet(data)
        now = time.time()
        with self.lock:
            self.recv_count += 1
            dt = now - self.last_rate_time
            if dt >= 1.0:
                self.recv_rate_hz = self.recv_count / dt
                self.recv_count = 0
                self.last_rate_time = now

            if not result.ok:
                self.dropped_packets += 1
                logger.debug(f"[OscReceiver] Dropped packet: {result.error}")
                return False

            if self.max_queue_size is not None and len(self.messages) >= self.max_queue_size:
                self.messages.popleft()
                self.overflow_count += 1
            self.messages.append(result.message)

        if result.message.degraded:
            logger.debug(
                f"[OscReceiver] {result.message.address}: missing or unsupported "
                f"type tag, using default value"
            )
        return True

    def _udp_server_loop(self):
        """Background thread that receives datagrams until stopped."""
        sock = self.sock
        try:
            while self.running:
                try:
                    data, _addr = sock.recvfrom(RECV_BUFFER_SIZE)
                except socket.timeout:
                    continue
                except OSError:
                    # Socket closed by stop()
                    break
                if data:
                    self.feed(data)
        finally:
            # A newer start() may own self.running by now.
            if self.running and self.sock is sock:
                logger.warning("[OscReceiver] Receive loop exited unexpectedly")
                self.running = False
                self.sock = None
                try:
                    sock.close()
                except OSError:
                    pass
