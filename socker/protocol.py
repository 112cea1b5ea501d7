"""Length-prefixed message framing over TCP and UDP sockets, plus socket setup helpers."""

from __future__ import annotations

import re
import socket
import sys
from typing import IO, Any

HEADER_SIZE = 32
LISTEN_BACKLOG = 10

_LEADING_INT = re.compile(rb"\s*([+-]?\d+)")


class ProtocolError(Exception):
    """Raised when a framed message cannot be sent, received or set up."""


def encode_header(length: int) -> bytes:
    """Return the fixed-size header announcing a message of ``length`` bytes."""
    if length < 0:
        raise ProtocolError(f"negative message length: {length}")
    digits = str(length).encode("ascii")
    if len(digits) >= HEADER_SIZE:
        raise ProtocolError(f"message length too large for header: {length}")
    return digits.ljust(HEADER_SIZE, b"\0")


def parse_header(data: bytes) -> int:
    """Return the message length held in a header; garbage yields 0."""
    text = data[: HEADER_SIZE - 1].split(b"\0", 1)[0]
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    length = int(match.group(1))
    if length < 0:
        raise ProtocolError(f"negative message length in header: {length}")
    return length


def _chunks(data: bytes, packet_size: int):
    if packet_size <= 0:
        raise ValueError("packet_size must be positive")
    for offset in range(0, len(data), packet_size):
        yield data[offset : offset + packet_size]


def relay(sock: socket.socket, data: bytes, packet_size: int) -> None:
    """Send ``data`` on a connected socket, preceded by its length header."""
    chunks = list(_chunks(data, packet_size))
    sock.sendall(encode_header(len(data)))
    for chunk in chunks:
        sock.sendall(chunk)


def relay_to(sock: socket.socket, data: bytes, packet_size: int, address: Any) -> None:
    """Send ``data`` to ``address`` as datagrams, preceded by its length header."""
    chunks = list(_chunks(data, packet_size))
    sock.sendto(encode_header(len(data)), address)
    for chunk in chunks:
        sock.sendto(chunk, address)


def _recv_exact(sock: socket.socket, size: int, packet_size: int) -> bytes:
    parts = []
    remaining = size
    while remaining:
        chunk = sock.recv(min(packet_size, remaining))
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def collect(sock: socket.socket, packet_size: int) -> bytes:
    """Receive one framed message from a connected socket.

    Returns ``b""`` when the peer has closed the connection before a header.
    """
    if packet_size <= 0:
        raise ValueError("packet_size must be positive")
    header = _recv_exact(sock, HEADER_SIZE, HEADER_SIZE)
    if not header:
        return b""
    if len(header) < HEADER_SIZE:
        raise ProtocolError("connection closed inside message header")
    length = parse_header(header)
    body = _recv_exact(sock, length, packet_size)
    if len(body) < length:
        raise ProtocolError("connection closed inside message body")
    return body


def collect_from(sock: socket.socket, packet_size: int) -> tuple[bytes, Any]:
    """Receive one framed message from datagrams; return it with the sender's address."""
    if packet_size <= 0:
        raise ValueError("packet_size must be positive")
    header, address = sock.recvfrom(HEADER_SIZE)
    length = parse_header(header)
    parts = []
    remaining = length
    while remaining > 0:
        chunk, address = sock.recvfrom(min(packet_size, remaining))
        parts.append(chunk)
        remaining -= min(packet_size, remaining)
    return b"".join(parts)[:length], address


def read_line(stream: IO[str], out: IO[str] | None = None) -> str | None:
    """Read one non-empty line from ``stream`` without its newline.

    Empty lines are answered with a fresh prompt. Returns ``None`` at end of input.
    """
    out = sys.stdout if out is None else out
    while True:
        line = stream.readline()
        if not line:
            return None
        if len(line) == 1:
            out.write("prompt> ")
            out.flush()
            continue
        if line.endswith("\n"):
            line = line[:-1]
        return line


def parse_mode(mode: str) -> bool:
    """Return True for TCP (``-t``), False for UDP (``-u``)."""
    if mode == "-u":
        return False
    if mode == "-t":
        return True
    raise ValueError("Invalid mode. Use -u for UDP or -t for TCP.")


def display_server_info(address: Any, port: str, out: IO[str] | None = None) -> None:
    """Print the server start-up banner."""
    out = sys.stdout if out is None else out
    try:
        hostname = socket.gethostname() or "unknown"
    except OSError:
        hostname = "unknown"
    addr = address[0] if address and address[0] else "unknown"
    out.write(f"Server on host {hostname}/{addr} is listening on port {port}\n\n")
    out.write(f"Server starting, listening on port {port}\n\n\n")
    out.flush()


def _prepare_server_socket(sock: socket.socket, is_tcp: bool) -> None:
    if is_tcp:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 0)


def open_socket(
    is_tcp: bool, host: str | None, port: str, out: IO[str] | None = None
) -> tuple[socket.socket, Any]:
    """Open a socket for a server (``host`` is None) or a client.

    A server socket is bound on all addresses, dual-stack, and listening when TCP.
    A TCP client socket is connected. Returns the socket and the address used.
    """
    is_server = host is None
    family = socket.AF_INET6 if is_server else socket.AF_UNSPEC
    socktype = socket.SOCK_STREAM if is_tcp else socket.SOCK_DGRAM
    flags = socket.AI_PASSIVE if is_server else 0
    infos = socket.getaddrinfo(host, port, family, socktype, 0, flags)

    for fam, stype, proto, _canon, sockaddr in infos:
        try:
            sock = socket.socket(fam, stype, proto)
        except OSError as exc:
            print(f"listening socket: {exc}", file=sys.stderr)
            continue
        if is_server:
            try:
                _prepare_server_socket(sock, is_tcp)
            except OSError:
                sock.close()
                raise
            try:
                sock.bind(sockaddr)
            except OSError as exc:
                print(f"server: bind: {exc}", file=sys.stderr)
                sock.close()
                continue
        elif is_tcp:
            try:
                sock.connect(sockaddr)
            except OSError as exc:
                print(f"client: connect: {exc}", file=sys.stderr)
                sock.close()
                continue
        break
    else:
        raise ProtocolError("server: failed to bind" if is_server else "client: failed to connect")

    if is_server:
        display_server_info(sockaddr, port, out)
        if is_tcp:
            try:
                sock.listen(LISTEN_BACKLOG)
            except OSError:
                sock.close()
                raise
    return sock, sockaddr