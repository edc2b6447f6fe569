"""Threaded TCP server for a length-prefixed JSON request/response protocol."""

__version__ = "0.0.0"

__all__ = ["__version__"]