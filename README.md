# socker

A pair of console programs, a client and a server, that talk over TCP or UDP.
Every message travels behind a fixed 32-byte header that holds its length as
ASCII digits padded with NUL bytes, followed by the message body in packets of
up to 1024 bytes.

## Installing

    pip install .

## The server

    socker-server -t <port>
    socker-server -u <port>

The server binds to all addresses on the given port (IPv6, accepting IPv4 as
well) and prints a start-up banner with the host name and the port.

With `-t` it accepts TCP connections and serves each client in its own thread.
Every message from a client is printed and sent back in upper case. Lines typed
at the `server>` prompt are sent to the client too; once the console reaches
end of input, the server stops reading it. A client that sends `;;;`, or that
disconnects, ends its session, and the server goes on accepting clients.

With `-u` it binds a UDP socket and prints each framed message it receives. It
stops when it receives an empty message or a receive fails.

A wrong number of arguments or a mode other than `-t` or `-u` prints a message
to standard error and exits with status 1.

## The client

    socker-client -t <server-address> <port>
    socker-client -u <server-address> <port>

Type a line at the `prompt>` prompt to send it; empty lines are skipped.

- Over TCP the client connects, prints the server's reply to each line, and
  also prints any message the server sends on its own. The session ends on
  `;;;`, at end of input, or when the server goes away.
- Over UDP each line is sent as datagrams and no reply is awaited. The client
  stops on `;;;` or at end of input.

Both programs can also be started with `python -m socker.client` and
`python -m socker.server`.

## Using the pieces directly

`socker.protocol` holds the framing shared by both programs:

    from socker.protocol import encode_header, parse_header, relay, collect

    header = encode_header(5)      # b"5" padded with NUL bytes to 32 bytes
    parse_header(header)           # -> 5

- `relay(sock, data, packet_size)` sends a framed message on a connected
  socket; `collect(sock, packet_size)` reads one and returns its body, or
  `b""` if the peer closed the connection before a header.
- `relay_to(sock, data, packet_size, address)` and
  `collect_from(sock, packet_size)` do the same with datagrams;
  `collect_from` returns the body together with the sender's address.
- `open_socket(is_tcp, host, port)` opens a listening server socket when
  `host` is `None`, otherwise a client socket (connected for TCP), and returns
  the socket with the address it used.
- `parse_mode("-t")` is `True`, `parse_mode("-u")` is `False`; any other value
  raises `ValueError`.
- `read_line(stream)` returns the next non-empty line without its newline, or
  `None` at end of input.

A header that is too long, a negative length, or a connection that closes in
the middle of a message raises `ProtocolError`; socket failures surface as
`OSError`. A header without digits is read as length 0.

The session loops are available as functions too: `socker.client.run_tcp` and
`run_udp`, and `socker.server.serve_tcp`, `handle_client` and `serve_udp`.

## What it does not do

The server's TCP clients all share one console: lines typed at `server>` go to
whichever session reads them first. There is no encryption, authentication or
retransmission; UDP messages that are lost or reordered arrive truncated or
mixed up.

## Running the tests

    pip install .[test]
    pytest