"""A threaded TCP server that hands each connection to registered handlers."""

import socket
import threading

from .server import ConnectionHandler, Server
from .utils import exit_with_error, log

__all__ = ["TcpServer"]

_BACKLOG = 20
_POLL_INTERVAL = 0.2


class TcpServer(Server, ConnectionHandler):
    """Listens on an IPv4 address and dispatches connections in threads."""

    def __init__(self, ip_address, port):
        self.ip_address = ip_address
        self.port = port
        self._handlers = []
        self._socket = None
        self._stop = threading.Event()
        self._lock = threading.Lock()

    def run(self):
        """Bind, listen and accept connections until closed."""
        self._stop.clear()
        sock = self._bind()
        try:
            self._serve(sock)
        finally:
            self.close()

    def _bind(self):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.bind((self.ip_address, self.port))
        except OSError:
            sock.close()
            exit_with_error("Failed to connect socket to address")
        with self._lock:
            self._socket = sock
        return sock

    def _serve(self, sock):
        try:
            sock.listen(_BACKLOG)
        except OSError:
            exit_with_error("Socket listening failed.")

        host, port = sock.getsockname()[:2]
        log(f"[server]: listening on {host}:{port}")

        sock.settimeout(_POLL_INTERVAL)
        while not self._stop.is_set():
            try:
                conn, _ = sock.accept()
            except TimeoutError:
                continue
            except OSError:
                if self._stop.is_set():
                    break
                exit_with_error(
                    f"[server]: failed to accept incomming connection from {host}:{port}"
                )
            conn.settimeout(None)
            threading.Thread(
                target=self.handle_connection, args=(conn,), daemon=True
            ).start()

    def close(self):
        """Stop accepting connections and release the listening socket."""
        self._stop.set()
        log("Closing TCP Server...\n")
        with self._lock:
            sock, self._socket = self._socket, None
        if sock is not None:
            sock.close()

    def handle_connection(self, conn):
        """Pass ``conn`` to every registered handler, then close it."""
        try:
            for handler in list(self._handlers):
                handler.handle_connection(conn)
        finally:
            conn.close()

    def add_connection_handler(self, handler):
        """Register ``handler`` unless it is already registered."""
        if handler not in self._handlers:
            self._handlers.append(handler)

    def remove_connection_handler(self, handler):
        """Unregister ``handler`` if it is registered."""
        if handler in self._handlers:
            self._handlers.remove(handler)