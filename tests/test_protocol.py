import io
import socket
from unittest import mock

import pytest

from socker.protocol import (
    HEADER_SIZE,
    ProtocolError,
    collect,
    collect_from,
    display_server_info,
    encode_header,
    open_socket,
    parse_header,
    parse_mode,
    read_line,
    relay,
    relay_to,
)


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    a.settimeout(5)
    b.settimeout(5)
    yield a, b
    a.close()
    b.close()


@pytest.fixture
def udp_pair():
    receiver = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    receiver.bind(("127.0.0.1", 0))
    receiver.settimeout(5)
    sender = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sender.bind(("127.0.0.1", 0))
    sender.settimeout(5)
    yield sender, receiver
    sender.close()
    receiver.close()


def test_header_has_fixed_size_and_digits_first():
    header = encode_header(1024)
    assert len(header) == HEADER_SIZE
    assert header.startswith(b"1024\0")


@pytest.mark.parametrize("length", [0, 1, 31, 1024, 99999999])
def test_header_round_trip(length):
    assert parse_header(encode_header(length)) == length


def test_parse_header_garbage_is_zero():
    assert parse_header(b"abc".ljust(HEADER_SIZE, b"\0")) == 0


def test_parse_header_stops_at_non_digit():
    assert parse_header(b"12x9".ljust(HEADER_SIZE, b"\0")) == 12


def test_parse_header_ignores_last_byte():
    data = b"0" * (HEADER_SIZE - 1) + b"7"
    assert parse_header(data) == 0


def test_encode_header_rejects_negative():
    with pytest.raises(ProtocolError):
        encode_header(-1)


def test_relay_collect_empty_message(pair):
    a, b = pair
    relay(a, b"", 16)
    relay(a, b"next", 16)
    assert collect(b, 16) == b""
    assert collect(b, 16) == b"next"


def test_collect_returns_empty_on_closed_peer(pair):
    a, b = pair
    a.close()
    assert collect(b, 16) == b""


def test_collect_raises_on_truncated_body(pair):
    a, b = pair
    a.sendall(encode_header(10) + b"abc")
    a.shutdown(socket.SHUT_WR)
    with pytest.raises(ProtocolError):
        collect(b, 16)


def test_relay_rejects_bad_packet_size(pair):
    a, _ = pair
    with pytest.raises(ValueError):
        relay(a, b"data", 0)


def test_relay_to_collect_from_round_trip(udp_pair):
    sender, receiver = udp_pair
    payload = b"hello world"
    relay_to(sender, payload, 4, receiver.getsockname())
    data, address = collect_from(receiver, 4)
    assert data == payload
    assert address == sender.getsockname()


def test_read_line_strips_newline():
    out = io.StringIO()
    assert read_line(io.StringIO("hello\n"), out) == "hello"
    assert out.getvalue() == ""


def test_read_line_prompts_on_blank_lines():
    out = io.StringIO()
    assert read_line(io.StringIO("\n\nabc\n"), out) == "abc"
    assert out.getvalue() == "prompt> prompt> "


def test_read_line_end_of_input():
    assert read_line(io.StringIO(""), io.StringIO()) is None


def test_read_line_last_line_without_newline():
    assert read_line(io.StringIO("last"), io.StringIO()) == "last"


def test_parse_mode():
    assert parse_mode("-t") is True
    assert parse_mode("-u") is False


def test_parse_mode_invalid():
    with pytest.raises(ValueError, match="Invalid mode"):
        parse_mode("-x")


def test_display_server_info_with_address():
    out = io.StringIO()
    display_server_info(("127.0.0.1", 5000), "5000", out)
    text = out.getvalue()
    assert "/127.0.0.1 is listening on port 5000\n\n" in text
    assert text.endswith("Server starting, listening on port 5000\n\n\n")


def test_display_server_info_unknown_address():
    out = io.StringIO()
    display_server_info(None, "5000", out)
    assert "/unknown is listening on port 5000" in out.getvalue()


def test_open_socket_client_connects_and_exchanges():
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    listener.settimeout(5)
    port = listener.getsockname()[1]
    try:
        client, address = open_socket(True, "127.0.0.1", str(port))
        conn, _ = listener.accept()
        conn.settimeout(5)
        try:
            assert address[1] == port
            relay(client, b"ping", 8)
            assert collect(conn, 8) == b"ping"
        finally:
            client.close()
            conn.close()
    finally:
        listener.close()


def test_open_socket_client_refused():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    with pytest.raises(ProtocolError, match="client: failed to connect"):
        open_socket(True, "127.0.0.1", str(port))


def test_open_socket_server_without_addresses():
    with mock.patch("socket.getaddrinfo", return_value=[]):
        with pytest.raises(ProtocolError, match="server: failed to bind"):
            open_socket(True, None, "5000", io.StringIO())