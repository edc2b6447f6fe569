"""Command-line entry point that starts the JSTP application server."""

import argparse

from .jstp_server import JstpServer
from .router import AppRouter
from .utils import log

__all__ = ["build_server", "main"]

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5101


def build_server(host, port):
    """Create a JSTP server with the application router installed."""
    server = JstpServer(host, port)
    server.add_router(AppRouter())
    return server


def _parse_args(argv):
    parser = argparse.ArgumentParser(prog="jstpserver", description="Run the JSTP server.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    return parser.parse_args(argv)


def main(argv=None):
    """Run the server until interrupted; return the exit status."""
    args = _parse_args(argv)
    server = build_server(args.host, args.port)
    try:
        server.run()
    except KeyboardInterrupt:
        log("\n")
        log("Closing running JSTP server...")
        server.close()
    return 0