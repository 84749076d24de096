"""IPv4 host name resolution."""

from __future__ import annotations

import socket


class ResolveError(OSError):
    """Raised when a host name cannot be resolved."""

    def __init__(self, hostname: str) -> None:
        super().__init__(f"Unable to resolve '{hostname}'")
        self.hostname = hostname


def resolve_addr(hostname: str) -> str:
    """Return the dotted IPv4 address for a literal address or host name."""
    try:
        return socket.inet_ntoa(socket.inet_aton(hostname))
    except (OSError, ValueError):
        pass
    try:
        return socket.gethostbyname(hostname)
    except (OSError, UnicodeError) as exc:
        raise ResolveError(hostname) from exc