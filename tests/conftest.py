from __future__ import annotations

import socket
import threading
from typing import Callable, List, Optional, Tuple

import pytest

Responder = Callable[[str, bytes], Optional[bytes]]


def soap_reply(body: str) -> bytes:
    envelope = (
        "<?xml version='1.0' encoding='UTF-8'?>"
        "<SOAP-ENV:Envelope xmlns:SOAP-ENV='http://schemas.xmlsoap.org/soap/envelope/'>"
        f"<SOAP-ENV:Body>{body}</SOAP-ENV:Body>"
        "</SOAP-ENV:Envelope>"
    ).encode("utf-8")
    head = (
        "HTTP/1.1 200 OK\r\n"
        "Content-Type: text/xml; charset=utf-8\r\n"
        f"Content-Length: {len(envelope)}\r\n"
        "\r\n"
    ).encode("ascii")
    return head + envelope


def exchange_reply(*fields: Tuple[str, str]) -> bytes:
    items = "".join(f"<{tag}>{value}</{tag}>" for tag, value in fields)
    return soap_reply(
        f"<ReturnData><m-aircraftState>{items}</m-aircraftState></ReturnData>"
    )


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def _read_request(conn: socket.socket) -> Optional[Tuple[str, bytes]]:
    data = b""
    while b"\r\n\r\n" not in data:
        chunk = conn.recv(4096)
        if not chunk:
            return None
        data += chunk
    head, _, body = data.partition(b"\r\n\r\n")
    length = 0
    action = ""
    for line in head.split(b"\r\n")[1:]:
        name, _, value = line.partition(b":")
        if name.lower() == b"content-length":
            length = int(value.strip())
        elif name.lower() == b"soapaction":
            action = value.strip().strip(b"'").decode("ascii")
    while len(body) < length:
        chunk = conn.recv(4096)
        if not chunk:
            break
        body += chunk
    return action, body


class FakeRealFlight:
    """Loopback server answering one SOAP request per connection."""

    def __init__(self, responder: Optional[Responder] = None) -> None:
        self.responder = responder or self.default_responder
        self.requests: List[Tuple[str, bytes]] = []
        self._lock = threading.Lock()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(64)
        self.host, self.port = self._sock.getsockname()
        self._running = True
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    @staticmethod
    def default_responder(action: str, body: bytes) -> Optional[bytes]:
        if action == "ExchangeData":
            return exchange_reply(("m-airspeed-MPS", "12.3"), ("m-altitudeAGL-MTR", "1.5"))
        return soap_reply(f"<{action}Response/>")

    def actions(self) -> List[str]:
        with self._lock:
            return [action for action, _ in self.requests]

    def _serve(self) -> None:
        while self._running:
            try:
                conn, _ = self._sock.accept()
            except OSError:
                return
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        conn.settimeout(5.0)
        with conn:
            try:
                request = _read_request(conn)
            except OSError:
                return
            if request is None:
                return
            with self._lock:
                self.requests.append(request)
            reply = self.responder(*request)
            if reply:
                try:
                    conn.sendall(reply)
                except OSError:
                    pass

    def close(self) -> None:
        self._running = False
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self._sock.close()


@pytest.fixture
def fake_server():
    server = FakeRealFlight()
    yield server
    server.close()
