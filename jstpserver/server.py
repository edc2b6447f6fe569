"""Abstract interfaces for servers and connection handlers."""

from abc import ABC, abstractmethod

__all__ = ["Server", "ConnectionHandler"]


class Server(ABC):
    """Something that can be started and serves until stopped."""

    @abstractmethod
    def run(self):
        """Start serving."""


class ConnectionHandler(ABC):
    """Something that processes an accepted client connection."""

    @abstractmethod
    def handle_connection(self, conn):
        """Process the connected socket ``conn``."""