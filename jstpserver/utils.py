"""Console logging helpers shared by the server components."""

import sys

__all__ = ["log", "exit_with_error"]


def log(message):
    """Write a message on its own line to standard output."""
    print(message, flush=True)


def exit_with_error(error_message):
    """Log an error message and terminate with exit status 1."""
    log("ERROR: " + error_message)
    sys.exit(1)