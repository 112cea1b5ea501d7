"""Console notices printed by the client."""

from __future__ import annotations

import sys
from typing import IO

BREAKER = "*************************************************************\n\n"


def _stream(out: IO[str] | None) -> IO[str]:
    return sys.stdout if out is None else out


def print_breaker(out: IO[str] | None = None) -> None:
    """Print the separator line."""
    _stream(out).write(BREAKER)


def print_shutdown(out: IO[str] | None = None) -> None:
    """Print the notice shown when the user ends the session."""
    out = _stream(out)
    out.write('\nUser entered sentinel of ";;;", now stopping client\n\n')
    print_breaker(out)
    out.write("Attempting to shut down client sockets and other streams\n\n")


def print_startup_tcp(host: str, port: str, out: IO[str] | None = None) -> None:
    """Print the notice shown once a TCP connection is established."""
    out = _stream(out)
    out.write(f"Client has requested to start connection with host {host} on port {port}\n\n")
    print_breaker(out)
    out.write("Connection established, now waiting for user input...\n\nprompt> ")
    out.flush()


def print_startup_udp(host: str, port: str, out: IO[str] | None = None) -> None:
    """Print the notice shown once a UDP socket is open."""
    out = _stream(out)
    out.write(
        "Client has opened UDP socket to start communication with host "
        f"{host} on port {port}\n\n"
    )
    print_breaker(out)
    out.write("Now waiting for user input...\n\nprompt> ")
    out.flush()