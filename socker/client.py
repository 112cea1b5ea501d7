"""Interactive client that sends console lines to a server over TCP or UDP."""

from __future__ import annotations

import selectors
import socket
import sys
from typing import IO, Any

from socker.client_messages import print_shutdown, print_startup_tcp, print_startup_udp
from socker.protocol import ProtocolError, collect, open_socket, parse_mode, read_line, relay, relay_to

PACKET_SIZE = 1024
SENTINEL = ";;;"
USAGE = "usage: client -mode <server-IP-address> <port-number>"


def _receive(sock: socket.socket) -> str | None:
    try:
        body = collect(sock, PACKET_SIZE)
    except (OSError, ProtocolError) as exc:
        print(f"collect: {exc}", file=sys.stderr)
        return None
    if not body:
        return None
    return body.decode("utf-8", errors="replace")


def _print_response(stdout: IO[str], response: str, prefix: str) -> None:
    stdout.write(f'{prefix}Received response from server of\n\n"{response}"\n\nprompt> ')
    stdout.flush()


def _send_console_line(sock: socket.socket, stdin: IO[str], stdout: IO[str]) -> bool:
    """Send one console line and print the reply; return False when the session ends."""
    line = read_line(stdin, stdout)
    if line is None:
        return False
    stdout.write("\nSending message to server...\n\n")
    try:
        relay(sock, line.encode("utf-8"), PACKET_SIZE)
    except (OSError, ProtocolError) as exc:
        print(f"relay: {exc}", file=sys.stderr)
        return False
    if line == SENTINEL:
        return False
    response = _receive(sock)
    if response is None:
        return False
    _print_response(stdout, response, "")
    return True


def run_udp(sock: socket.socket, address: Any, stdin: IO[str], stdout: IO[str]) -> None:
    """Send console lines as datagrams to ``address`` until the sentinel or end of input."""
    while (line := read_line(stdin, stdout)) is not None:
        stdout.write("\nSending message to server...\n\nprompt> ")
        stdout.flush()
        try:
            relay_to(sock, line.encode("utf-8"), PACKET_SIZE, address)
        except (OSError, ProtocolError) as exc:
            print(f"relay_to: {exc}", file=sys.stderr)
        if line == SENTINEL:
            break
    print_shutdown(stdout)


def run_tcp(sock: socket.socket, stdin: IO[str], stdout: IO[str]) -> None:
    """Exchange messages over a connected socket while watching the console.

    The session ends on the sentinel, at end of input, or when the server goes away.
    """
    with selectors.DefaultSelector() as selector:
        selector.register(sock, selectors.EVENT_READ)
        selector.register(stdin, selectors.EVENT_READ)
        connected = True
        while connected:
            for key, _events in selector.select():
                if key.fileobj is sock:
                    response = _receive(sock)
                    if response is None:
                        connected = False
                    else:
                        _print_response(stdout, response, "\r")
                else:
                    connected = _send_console_line(sock, stdin, stdout)
                if not connected:
                    break
    print_shutdown(stdout)


def main(argv: list[str] | None = None) -> int:
    """Run the client: ``client -t|-u <server-address> <port>``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 3:
        print(USAGE, file=sys.stderr)
        return 1
    mode, host, port = args
    try:
        is_tcp = parse_mode(mode)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        sock, address = open_socket(is_tcp, host, port, sys.stdout)
    except (ProtocolError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1

    with sock:
        if is_tcp:
            print_startup_tcp(host, port, sys.stdout)
            run_tcp(sock, sys.stdin, sys.stdout)
        else:
            print_startup_udp(host, port, sys.stdout)
            run_udp(sock, address, sys.stdin, sys.stdout)
    sys.stdout.write("Shut down successful... goodbye\n")
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())