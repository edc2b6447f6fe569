"""JSTP: length-prefixed JSON request/response messages over TCP."""

import json
import re

from .server import ConnectionHandler, Server
from .tcp_server import TcpServer
from .utils import log

__all__ = ["JstpServer", "default_response", "encode_message", "read_exactly"]

_RECV_CHUNK = 1023
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def default_response():
    """Return the response every request starts from."""
    return {"header": {"status": 200}, "payload": None}


def encode_message(message):
    """Serialise ``message`` as compact JSON preceded by its byte length and CRLF."""
    payload = json.dumps(
        message, separators=(",", ":"), sort_keys=True, ensure_ascii=False
    ).encode("utf-8")
    return str(len(payload)).encode("ascii") + b"\r\n" + payload


def read_exactly(conn, num_bytes):
    """Read up to ``num_bytes`` from ``conn``, fewer if the peer closes or fails."""
    chunks = []
    total = 0
    while total < num_bytes:
        try:
            chunk = conn.recv(min(_RECV_CHUNK, num_bytes - total))
        except OSError:
            log("Failed to receive bytes from client socket connection.")
            break
        if not chunk:
            if total:
                log("Connection has been closed before finishing reading.")
            break
        chunks.append(chunk)
        total += len(chunk)
    return b"".join(chunks)


def _read_line(conn):
    """Read up to and including CRLF; return None if the peer closes first."""
    line = bytearray()
    while not line.endswith(b"\r\n"):
        byte = read_exactly(conn, 1)
        if not byte:
            return None
        line += byte
    return bytes(line[:-2])


def _parse_length(text):
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"no length in {text!r}")
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        raise OverflowError(f"length {value} does not fit")
    if value < 0:
        raise ValueError(f"negative length {value}")
    return value


class JstpServer(Server, ConnectionHandler):
    """Reads JSTP requests, runs them through routers and writes the reply."""

    def __init__(self, ip_address, port):
        self.routers = []
        self._tcp_server = TcpServer(ip_address, port)
        self._tcp_server.add_connection_handler(self)

    def run(self):
        """Serve until closed."""
        self._tcp_server.run()

    def close(self):
        """Detach from the TCP server and shut it down."""
        self._tcp_server.remove_connection_handler(self)
        self._tcp_server.close()

    def add_router(self, router):
        """Append ``router``; routers run in the order they were added."""
        self.routers.append(router)

    def handle_connection(self, conn):
        """Serve one JSTP request on ``conn``."""
        log("[jstp-server] Handling connection...")

        first_line = _read_line(conn)
        if first_line is None:
            return
        try:
            length = _parse_length(first_line.decode("latin-1"))
        except OverflowError as exc:
            log(f"Out of range: {exc}")
            return
        except ValueError as exc:
            log(f"Invalid argument: {exc}")
            return

        request = json.loads(read_exactly(conn, length))
        response = default_response()
        for router in self.routers:
            router.handle_request(request, response)

        message = encode_message(response)
        log("response jstp message: \n" + message.decode("utf-8"))

        try:
            conn.sendall(message)
        except OSError:
            log("[jstp-server] Failed to sending response to client.")

        log("[jstp-server] Connection closed...")