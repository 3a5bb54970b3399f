"""Coloured console messages, printed only when logging is enabled."""

from __future__ import annotations

import sys

from canis.config import get_config

_RED = "\033[1;31m"
_YELLOW = "\033[1;33m"
_GREEN = "\033[1;32m"
_RESET = "\033[0m"


def _emit(colour: str, label: str, message: str) -> bool:
    if not get_config().log:
        return False
    print(f"{colour}{label}: {_RESET}{message}", file=sys.stdout, flush=True)
    return True


def fatal_error(message: str) -> None:
    """Report a fatal error, wait for enter and exit with status 1."""
    if not _emit(_RED, "FatalError", message):
        return
    sys.stdout.write("Press enter to quit")
    sys.stdout.flush()
    sys.stdin.readline()
    raise SystemExit(1)


def error(message: str) -> None:
    """Print an error message in red."""
    _emit(_RED, "Error", message)


def warning(message: str) -> None:
    """Print a warning message in yellow."""
    _emit(_YELLOW, "Warning", message)


def log(message: str) -> None:
    """Print an informational message in green."""
    _emit(_GREEN, "Log", message)