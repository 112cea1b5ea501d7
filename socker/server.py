"""Server that prints client messages and echoes them back in upper case."""

from __future__ import annotations

import errno
import selectors
import socket
import sys
import threading
from typing import IO

from socker.protocol import ProtocolError, collect, collect_from, open_socket, parse_mode, read_line, relay
from socker.server_messages import print_tcp_end, print_tcp_start, print_udp_start

PACKET_SIZE = 1024
SENTINEL = b";;;"
USAGE = "usage: server -mode <port-number>"


def serve_udp(sock: socket.socket, out: IO[str] | None = None) -> None:
    """Print framed datagram messages until an empty message or a receive error."""
    out = sys.stdout if out is None else out
    print_udp_start(out)
    while True:
        try:
            message, _address = collect_from(sock, PACKET_SIZE)
        except (OSError, ProtocolError) as exc:
            print(f"collect_from: {exc}", file=sys.stderr)
            break
        if not message:
            break
        text = message.decode("utf-8", errors="replace")
        out.write(f'Received the following message from client:\n\n"{text}"\n\n')
        out.flush()


def _answer_client(conn: socket.socket, stdout: IO[str]) -> bool:
    """Handle one incoming message; return False when the session ends."""
    try:
        message = collect(conn, PACKET_SIZE)
    except (OSError, ProtocolError) as exc:
        print(f"collect: {exc}", file=sys.stderr)
        return False
    if not message:
        return False
    text = message.decode("utf-8", errors="replace")
    stdout.write(f'\rReceived the following message from client:\n\n"{text}"\n\n')
    stdout.flush()
    if message == SENTINEL:
        return False
    stdout.write("Now sending message back having changed the string to upper case...\n\nserver> ")
    stdout.flush()
    try:
        relay(conn, message.upper(), PACKET_SIZE)
    except (OSError, ProtocolError) as exc:
        print(f"relay: {exc}", file=sys.stderr)
        return False
    return True


def _forward_console_line(conn: socket.socket, stdin: IO[str], stdout: IO[str]) -> bool:
    """Send one console line to the client; return False at end of input."""
    line = read_line(stdin, stdout)
    if line is None:
        return False
    stdout.write("\nserver> ")
    stdout.flush()
    try:
        relay(conn, line.encode("utf-8"), PACKET_SIZE)
    except (OSError, ProtocolError) as exc:
        print(f"relay: {exc}", file=sys.stderr)
    return True


def handle_client(conn: socket.socket, stdin: IO[str], stdout: IO[str]) -> None:
    """Serve one connected client until it sends the sentinel or disconnects."""
    stdout.write("Now listening for incoming messages...\n\nserver> ")
    stdout.flush()
    with selectors.DefaultSelector() as selector:
        selector.register(conn, selectors.EVENT_READ)
        selector.register(stdin, selectors.EVENT_READ)
        connected = True
        while connected:
            for key, _events in selector.select():
                if key.fileobj is conn:
                    connected = _answer_client(conn, stdout)
                    if not connected:
                        break
                elif not _forward_console_line(conn, stdin, stdout):
                    selector.unregister(stdin)
    print_tcp_end(stdout)


def _service(conn: socket.socket, stdin: IO[str], stdout: IO[str]) -> None:
    with conn:
        handle_client(conn, stdin, stdout)


def serve_tcp(sock: socket.socket, stdin: IO[str], stdout: IO[str]) -> None:
    """Accept clients forever, serving each one in its own thread.

    Returns once the listening socket has been closed or shut down.
    """
    while True:
        try:
            conn, peer = sock.accept()
        except OSError as exc:
            if exc.errno in (errno.EBADF, errno.EINVAL) or sock.fileno() == -1:
                return
            print(f"accept: {exc}", file=sys.stderr)
            continue
        print_tcp_start(str(peer[0]), stdout)
        stdout.flush()
        threading.Thread(target=_service, args=(conn, stdin, stdout), daemon=True).start()


def main(argv: list[str] | None = None) -> int:
    """Run the server: ``server -t|-u <port>``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print(USAGE, file=sys.stderr)
        return 1
    mode, port = args
    try:
        is_tcp = parse_mode(mode)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        sock, _address = open_socket(is_tcp, None, port, sys.stdout)
    except (ProtocolError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1

    with sock:
        if is_tcp:
            serve_tcp(sock, sys.stdin, sys.stdout)
        else:
            serve_udp(sock, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())