"""Pre-connected socket pool for the RealFlight link server."""

from __future__ import annotations

import logging
import socket
import threading
from collections import deque
from typing import Callable, Deque, Optional, Tuple

from rf_bridge.core.errors import ConnectError

log = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 18083

Connector = Callable[[Tuple[str, int], float], socket.socket]


def open_connection(address: Tuple[str, int], timeout: float) -> socket.socket:
    """Connect to *address* with send/receive operations bounded by *timeout*."""

    try:
        sock = socket.create_connection(address, timeout=timeout)
    except OSError as exc:
        host, port = address
        raise ConnectError(f"connection to {host}:{port} failed: {exc}") from exc
    sock.settimeout(timeout)
    return sock


class SocketPool:
    """Keep a bounded number of unused connections ready for one request each.

    The server accepts a single request per connection, so sockets handed out
    by :meth:`acquire` are never returned; the pool only hides connection
    setup latency from the caller. A background thread refills the idle queue
    whenever it drops below ``max_size``.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        *,
        max_size: int = 3,
        timeout: float = 1.0,
        refill_interval: float = 0.05,
        connector: Connector = open_connection,
    ) -> None:
        if max_size < 0:
            raise ValueError("max_size cannot be negative")
        if refill_interval <= 0:
            raise ValueError("refill_interval must be positive")
        self.address = (host, port)
        self.max_size = max_size
        self.timeout = timeout
        self.refill_interval = refill_interval
        self._connector = connector
        self._idle: Deque[socket.socket] = deque()
        self._cond = threading.Condition()
        self._shutdown = False
        self._thread: Optional[threading.Thread] = None

    def __enter__(self) -> "SocketPool":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def idle_count(self) -> int:
        with self._cond:
            return len(self._idle)

    def start(self) -> None:
        with self._cond:
            if self._shutdown:
                raise RuntimeError("pool has been closed")
            if self._thread and self._thread.is_alive():
                return
            self._thread = threading.Thread(
                target=self._maintain, name="rf-socket-pool", daemon=True
            )
            self._thread.start()

    def wait_ready(self, count: int = 1, timeout: float = 0.1) -> bool:
        """Block up to *timeout* seconds until *count* connections are idle."""

        target = min(count, self.max_size)
        with self._cond:
            return self._cond.wait_for(
                lambda: self._shutdown or len(self._idle) >= target, timeout
            ) and not self._shutdown

    def acquire(self) -> socket.socket:
        """Return a fresh connection, opening one synchronously if none is idle."""

        with self._cond:
            if self._idle:
                sock = self._idle.popleft()
                self._cond.notify_all()
                return sock
        return self._connector(self.address, self.timeout)

    def close(self) -> None:
        with self._cond:
            self._shutdown = True
            self._cond.notify_all()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        with self._cond:
            while self._idle:
                sock = self._idle.popleft()
                try:
                    sock.close()
                except OSError:
                    pass

    def _maintain(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(
                    lambda: self._shutdown or len(self._idle) < self.max_size,
                    self.refill_interval,
                )
                if self._shutdown:
                    return
                if len(self._idle) >= self.max_size:
                    continue
            try:
                sock = self._connector(self.address, self.timeout)
            except ConnectError as exc:
                log.debug("pool refill failed: %s", exc)
                with self._cond:
                    self._cond.wait_for(lambda: self._shutdown, self.refill_interval)
                continue
            except Exception:  # pragma: no cover
                log.exception("unexpected error while refilling socket pool")
                with self._cond:
                    self._cond.wait_for(lambda: self._shutdown, self.refill_interval)
                continue
            with self._cond:
                if self._shutdown or len(self._idle) >= self.max_size:
                    keep = False
                else:
                    self._idle.append(sock)
                    self._cond.notify_all()
                    keep = True
            if not keep:
                sock.close()
