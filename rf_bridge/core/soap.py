"""SOAP-over-HTTP framing for the RealFlight link and the request framer."""

from __future__ import annotations

import logging
import select
import socket
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence
from xml.sax.saxutils import escape

from .actions import Action
from .errors import EmptyReplyError, LinkError, ReplyTimeoutError, SendError

log = logging.getLogger(__name__)

ENVELOPE_OPEN = (
    "<?xml version='1.0' encoding='UTF-8'?>"
    "<soap:Envelope xmlns:soap='http://schemas.xmlsoap.org/soap/envelope/' "
    "xmlns:xsd='http://www.w3.org/2001/XMLSchema' "
    "xmlns:xsi='http://www.w3.org/2001/XMLSchema-instance'>"
    "<soap:Body>"
)
ENVELOPE_CLOSE = "</soap:Body></soap:Envelope>"

# The server answers with its own envelope prefix.
REPLY_END_MARKER = b"</SOAP-ENV:Envelope>"

SELECTED_CHANNELS_ALL = 4095
DEFAULT_REPLY_CAPACITY = 10000
_RECV_CHUNK = 4096


class ConnectionSource(Protocol):
    """Anything that hands out one fresh connected socket per call."""

    def acquire(self) -> socket.socket:  # pragma: no cover - protocol signature
        ...


def format_value(value: float) -> str:
    return f"{value:g}"


def element(tag: str, content: str = "", *, raw: bool = False) -> str:
    """Return ``<tag>content</tag>``, escaping *content* unless *raw* is set."""

    text = content if raw else escape(content)
    return f"<{tag}>{text}</{tag}>"


def exchange_data_body(
    channels: Sequence[float], selected: int = SELECTED_CHANNELS_ALL
) -> str:
    """Build the ``pControlInputs`` fragment carrying *channels*."""

    items = "".join(element("item", format_value(value)) for value in channels)
    return element(
        "pControlInputs",
        element("m-selectedChannels", str(selected))
        + element("m-channelValues-0to1", items, raw=True),
        raw=True,
    )


def build_envelope(action: str, body_fragment: str = "") -> str:
    return ENVELOPE_OPEN + element(action, body_fragment, raw=True) + ENVELOPE_CLOSE


def build_request(action: str, body_fragment: str = "") -> bytes:
    """Return the complete HTTP POST request bytes for *action*."""

    envelope = build_envelope(action, body_fragment).encode("utf-8")
    head = (
        "POST / HTTP/1.1\r\n"
        f"Soapaction: '{action}'\r\n"
        f"Content-Length: {len(envelope)}\r\n"
        "Content-Type: text/xml;charset=utf-8\r\n"
        "\r\n"
    )
    return head.encode("ascii") + envelope


@dataclass(frozen=True)
class Reply:
    """Bytes received for one request.

    ``complete`` is set when the closing envelope marker was seen and
    ``truncated`` when the buffer filled up before that happened.
    """

    data: bytes
    complete: bool
    truncated: bool

    def __len__(self) -> int:
        return len(self.data)


class ReplyBuffer:
    """Growable receive buffer with a hard capacity."""

    def __init__(self, capacity: int = DEFAULT_REPLY_CAPACITY, marker: bytes = REPLY_END_MARKER) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._marker = marker
        self._data = bytearray()
        self._scan_from = 0
        self.complete = False
        self.truncated = False

    @property
    def remaining(self) -> int:
        return self.capacity - len(self._data)

    @property
    def full(self) -> bool:
        return self.remaining <= 0

    def feed(self, chunk: bytes) -> None:
        if len(chunk) > self.remaining:
            chunk = chunk[: self.remaining]
            self.truncated = True
        self._data.extend(chunk)
        if not self.complete and self._data.find(self._marker, self._scan_from) >= 0:
            self.complete = True
        self._scan_from = max(0, len(self._data) - len(self._marker) + 1)
        if self.full and not self.complete:
            self.truncated = True

    def to_reply(self) -> Reply:
        return Reply(bytes(self._data), complete=self.complete, truncated=self.truncated)

    def __len__(self) -> int:
        return len(self._data)


def _close_quietly(sock: socket.socket) -> None:
    try:
        sock.close()
    except OSError:
        pass


class ProtocolFramer:
    """Send one SOAP request per pooled connection and collect its reply.

    The simulator refuses a second request on the same connection, so the
    socket used by :meth:`start_request` is always closed by
    :meth:`finish_request` or on failure.
    """

    def __init__(self, pool: ConnectionSource, *, reply_capacity: int = DEFAULT_REPLY_CAPACITY) -> None:
        self._pool = pool
        self._reply_capacity = reply_capacity
        self._sock: Optional[socket.socket] = None

    @property
    def in_flight(self) -> bool:
        return self._sock is not None

    def start_request(self, action: str, body_fragment: str = "") -> None:
        """Acquire a connection and write the framed request for *action*."""

        if self._sock is not None:
            # A previous request was never finished; drop it.
            _close_quietly(self._sock)
            self._sock = None
        name = action.value if isinstance(action, Action) else action
        payload = build_request(name, body_fragment)
        sock = self._pool.acquire()
        try:
            sock.sendall(payload)
        except OSError as exc:
            _close_quietly(sock)
            raise SendError(f"failed to send {name} request: {exc}") from exc
        self._sock = sock

    def finish_request(self, timeout_ms: int) -> Reply:
        """Wait up to *timeout_ms* for the reply and read it."""

        sock = self._sock
        if sock is None:
            raise LinkError("no request in flight")
        self._sock = None
        try:
            try:
                readable, _, _ = select.select([sock], [], [], timeout_ms / 1000.0)
            except (OSError, ValueError) as exc:
                raise ReplyTimeoutError(f"error waiting for reply: {exc}") from exc
            if not readable:
                raise ReplyTimeoutError(f"no reply within {timeout_ms} ms")
            buffer = ReplyBuffer(self._reply_capacity)
            while not buffer.full:
                try:
                    chunk = sock.recv(min(_RECV_CHUNK, buffer.remaining))
                except OSError as exc:
                    # socket.timeout included: keep what has arrived so far.
                    log.debug("recv stopped: %s", exc)
                    break
                if not chunk:
                    break
                buffer.feed(chunk)
                if buffer.complete:
                    break
        finally:
            _close_quietly(sock)
        if not len(buffer):
            raise EmptyReplyError("connection closed without a reply")
        if buffer.truncated:
            log.debug("reply truncated at %d bytes", buffer.capacity)
        return buffer.to_reply()

    def request(self, action: str, body_fragment: str = "", *, timeout_ms: int = 1000) -> Reply:
        self.start_request(action, body_fragment)
        return self.finish_request(timeout_ms)

    def abort(self) -> None:
        if self._sock is not None:
            _close_quietly(self._sock)
            self._sock = None
