"""Console notices printed by the server."""

from __future__ import annotations

import sys
from typing import IO

BREAKER = "*************************************************************\n\n"


def _stream(out: IO[str] | None) -> IO[str]:
    return sys.stdout if out is None else out


def print_breaker(out: IO[str] | None = None) -> None:
    """Print the separator line."""
    _stream(out).write(BREAKER)


def print_tcp_start(addr: str, out: IO[str] | None = None) -> None:
    """Print the notice shown when a client connects."""
    out = _stream(out)
    out.write(f"Received connection request from /{addr}\n\n")
    print_breaker(out)


def print_tcp_end(out: IO[str] | None = None) -> None:
    """Print the notice shown when a client session ends."""
    out = _stream(out)
    out.write("Client finished, now waiting to service another client...\n\n")
    print_breaker(out)


def print_udp_start(out: IO[str] | None = None) -> None:
    """Print the notice shown when the UDP server starts listening."""
    out = _stream(out)
    print_breaker(out)
    out.write("Now listening for incoming messages...\n\n")
    out.flush()