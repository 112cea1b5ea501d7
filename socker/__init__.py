"""TCP/UDP console client and server exchanging length-prefixed messages."""

__version__ = "0.1.0"
__all__ = ["client", "client_messages", "protocol", "server", "server_messages"]